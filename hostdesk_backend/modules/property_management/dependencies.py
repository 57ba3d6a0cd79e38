"""Store selection and injection for the property management routes."""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.exc import InterfaceError, OperationalError

from ...config import Settings
from ...core.exceptions import StoreError
from ...core.logging import get_logger
from ...database import build_engine, build_session_factory, init_db
from .crud import SqlPropertyStore
from .memory_store import MemoryPropertyStore
from .store import PropertyStore

logger = get_logger("property_management.dependencies")

# Failures that mean "the database is not reachable" rather than a bad query
CONNECTIVITY_ERRORS = (OperationalError, InterfaceError, OSError)


async def create_store(settings: Settings) -> PropertyStore:
    """Pick the store for this process.

    The SQL store is probed once; if the database cannot be reached and the
    fallback is enabled, the in-memory store is used until the process exits.
    """
    if settings.uses_memory_store:
        logger.info("Using in-memory property store (configured)")
        return MemoryPropertyStore()

    engine = build_engine(settings)
    store = SqlPropertyStore(build_session_factory(engine), engine=engine)
    try:
        if settings.database_create_tables:
            await init_db(engine)
        await store.ping()
    except CONNECTIVITY_ERRORS as exc:
        await engine.dispose()
        if not settings.store_fallback_enabled:
            logger.error(f"Database unreachable and fallback disabled: {exc}")
            raise StoreError(
                f"Database unreachable: {exc}", operation="create_store"
            ) from exc
        logger.warning(
            "Database unreachable, using in-memory property store for this process",
            extra={"operation": "create_store", "error": str(exc)},
        )
        return MemoryPropertyStore()

    logger.info("Using SQL property store")
    return store


def get_store(request: Request) -> PropertyStore:
    """Dependency returning the store chosen at startup."""
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise StoreError("Property store is not initialised", operation="get_store")
    return store


def get_links_dedupe(request: Request) -> bool:
    """Whether group links are de-duplicated before they are stored."""
    return request.app.state.settings.group_links_dedupe


# Type aliases for dependency injection
Store = Annotated[PropertyStore, Depends(get_store)]
LinksDedupe = Annotated[bool, Depends(get_links_dedupe)]
