"""Shared fixtures for the HostDesk test suite."""

from __future__ import annotations

import os
from pathlib import Path

# Settings are loaded at import time from the file named by CONFIG.
TEST_CONFIG = Path(__file__).parent / "config" / "test.yaml"
os.environ.setdefault("CONFIG", str(TEST_CONFIG))

import httpx  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine  # noqa: E402

from hostdesk_backend.config import Settings  # noqa: E402
from hostdesk_backend.database import build_session_factory, init_db  # noqa: E402
from hostdesk_backend.main import create_app  # noqa: E402
from hostdesk_backend.modules.property_management import (  # noqa: E402
    MemoryPropertyStore,
    SqlPropertyStore,
)


async def make_sql_store(db_path: Path) -> SqlPropertyStore:
    """SQL store on a fresh SQLite file with all tables created."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}")
    await init_db(engine)
    return SqlPropertyStore(build_session_factory(engine), engine=engine)


@pytest.fixture
def test_settings() -> Settings:
    return Settings.from_yaml(str(TEST_CONFIG))


@pytest.fixture
def memory_store() -> MemoryPropertyStore:
    return MemoryPropertyStore()


@pytest.fixture
async def sql_store(tmp_path):
    store = await make_sql_store(tmp_path / "hostdesk.db")
    yield store
    await store.close()


@pytest.fixture(params=["memory", "sql"])
async def store(request, tmp_path):
    """Each store variant in turn, for behaviour both must share."""
    if request.param == "memory":
        yield MemoryPropertyStore()
        return

    sql = await make_sql_store(tmp_path / "hostdesk.db")
    yield sql
    await sql.close()


@pytest.fixture
def app(test_settings, memory_store):
    return create_app(app_settings=test_settings, store=memory_store)


@pytest.fixture
async def client(app):
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://test"
    ) as c:
        yield c
