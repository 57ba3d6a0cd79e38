"""Tests for picking the property store at startup."""

from __future__ import annotations

import pytest

from hostdesk_backend.core.exceptions import StoreError
from hostdesk_backend.modules.property_management import (
    MemoryPropertyStore,
    SqlPropertyStore,
    create_store,
)

pytestmark = pytest.mark.unit


def _sql_settings(test_settings, url: str, **overrides):
    return test_settings.model_copy(
        update={
            "store_backend": "sql",
            "database_url": url,
            "database_create_tables": True,
            **overrides,
        }
    )


@pytest.mark.asyncio
async def test_memory_backend_is_used_when_configured(test_settings):
    store = await create_store(test_settings)

    assert isinstance(store, MemoryPropertyStore)
    assert store.backend == "memory"


@pytest.mark.asyncio
async def test_reachable_database_selects_sql_store(test_settings, tmp_path):
    settings = _sql_settings(
        test_settings, f"sqlite+aiosqlite:///{tmp_path / 'hostdesk.db'}"
    )

    store = await create_store(settings)
    try:
        assert isinstance(store, SqlPropertyStore)
        assert await store.list_properties() == []
    finally:
        await store.close()


@pytest.mark.asyncio
async def test_unreachable_database_falls_back_to_memory(test_settings, tmp_path):
    unreachable = tmp_path / "missing-dir" / "hostdesk.db"
    settings = _sql_settings(test_settings, f"sqlite+aiosqlite:///{unreachable}")

    store = await create_store(settings)

    assert isinstance(store, MemoryPropertyStore)


@pytest.mark.asyncio
async def test_unreachable_database_without_fallback_raises(test_settings, tmp_path):
    unreachable = tmp_path / "missing-dir" / "hostdesk.db"
    settings = _sql_settings(
        test_settings,
        f"sqlite+aiosqlite:///{unreachable}",
        store_fallback_enabled=False,
    )

    with pytest.raises(StoreError) as exc_info:
        await create_store(settings)

    assert exc_info.value.operation == "create_store"


@pytest.mark.asyncio
async def test_fallback_store_is_isolated_per_instance(test_settings):
    first = await create_store(test_settings)
    second = await create_store(test_settings)

    await first.insert_property("Only in first")

    assert await second.list_properties() == []
