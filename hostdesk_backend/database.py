"""
Database configuration for the HostDesk backend.

Engines are built explicitly from settings instead of at import time, so the
store factory can probe the database and fall back when it is unreachable.
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.dialects import mysql
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

from .config import Settings
from .core.utils import utc_now

# Base class
Base = declarative_base()

# Timestamps keep microseconds on every backend; MySQL needs DATETIME(6) for it
PreciseDateTime = DateTime(timezone=True).with_variant(
    mysql.DATETIME(timezone=True, fsp=6), "mysql"
)


def new_id() -> str:
    """Primary key generator; ids are uuid4 strings."""
    return str(uuid.uuid4())


class IdMixin:
    """Mixin adding a client-generated string primary key."""

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)


class TimestampMixin:
    """Mixin to add a created timestamp to models.

    Set on the Python side with microsecond precision, so rows inserted one
    after another sort in insertion order.
    """

    created_at: Mapped[datetime] = mapped_column(
        PreciseDateTime, nullable=False, default=utc_now
    )


def build_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine, with SSL options for MySQL."""
    connect_args = {}
    if settings.database_url.startswith("mysql+asyncmy"):
        connect_args = {
            "ssl": {
                "ssl_check_hostname": settings.database_ssl_check_hostname,
                "ssl_verify_cert": settings.database_ssl_verify_cert,
                "ssl_verify_identity": settings.database_ssl_verify_identity,
            },
        }

    engine_kwargs = {"echo": settings.app_debug, "connect_args": connect_args}
    if not settings.database_url.startswith("sqlite"):
        engine_kwargs.update(pool_pre_ping=True, pool_recycle=3600)

    return create_async_engine(settings.database_url, **engine_kwargs)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the async session factory bound to ``engine``."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db(engine: AsyncEngine) -> None:
    """Create any missing tables."""
    from .modules.property_management import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
