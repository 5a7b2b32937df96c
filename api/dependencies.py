"""
Service wiring for the API.

Configuration (environment, loaded from .env at the project root):
- SALES_REPOSITORY: "memory" (default) or "supabase"
- SUPABASE_URL / SUPABASE_KEY: required when SALES_REPOSITORY=supabase
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

from repositories.sale_repository import InMemorySaleRepository, SaleRepository
from services.event_handlers import LoggingEventSink
from services.sale_service import SaleService

env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


def _build_repository() -> SaleRepository:
    backend = os.getenv("SALES_REPOSITORY", "memory").strip().lower()

    if backend == "memory":
        return InMemorySaleRepository()
    if backend == "supabase":
        from repositories.supabase_sale_repository import SupabaseSaleRepository

        return SupabaseSaleRepository()

    raise RuntimeError(
        f"Unsupported SALES_REPOSITORY: {backend!r}. Use 'memory' or 'supabase'."
    )


@lru_cache(maxsize=1)
def get_sale_service() -> SaleService:
    """Process-wide SaleService (overridable via FastAPI dependency_overrides)."""
    return SaleService(_build_repository(), LoggingEventSink())
