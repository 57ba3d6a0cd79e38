"""SQL-backed property store.

Every public method runs in its own session and transaction. SQLAlchemy
failures surface as StoreError; a single-row lookup that matches nothing
surfaces as ResourceNotFoundError.
"""

from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.exc import NoResultFound, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.sql import Select

from ...core.exceptions import ResourceNotFoundError, StoreError
from ...core.logging import get_logger
from ...core.utils import utc_now
from .models import DoorCode, Property, WhatsAppGroup
from .store import PropertyStore, Row

logger = get_logger("property_management.crud")

_PROPERTY_COLUMNS = (Property.id, Property.name)
_GROUP_COLUMNS = (
    WhatsAppGroup.id,
    WhatsAppGroup.property_id,
    WhatsAppGroup.name,
    WhatsAppGroup.template,
    WhatsAppGroup.links,
    WhatsAppGroup.evolution_id,
)
_DOOR_CODE_COLUMNS = (
    DoorCode.id,
    DoorCode.property_id,
    DoorCode.code_number,
    DoorCode.description,
    DoorCode.updated_at,
    DoorCode.last_used_at,
)


async def _fetch_one(
    db: AsyncSession, query: Select, resource_type: str, identifier: Any
) -> Row:
    """Execute ``query`` expecting exactly one row."""
    result = await db.execute(query)
    try:
        return dict(result.mappings().one())
    except NoResultFound as exc:
        raise ResourceNotFoundError(resource_type, identifier) from exc


async def _fetch_all(db: AsyncSession, query: Select) -> list[Row]:
    result = await db.execute(query)
    return [dict(row) for row in result.mappings().all()]


def _match_name(rows: Sequence[Row], name: str, resource_type: str) -> Row:
    """First row whose name equals ``name`` ignoring case."""
    wanted = name.casefold()
    for row in rows:
        if row["name"].casefold() == wanted:
            return row
    raise ResourceNotFoundError(resource_type, name)


def _group_row(group: WhatsAppGroup) -> Row:
    return {
        "id": group.id,
        "property_id": group.property_id,
        "name": group.name,
        "template": group.template,
        "links": list(group.links) if group.links is not None else None,
        "evolution_id": group.evolution_id,
    }


def _door_code_row(code: DoorCode) -> Row:
    return {
        "id": code.id,
        "property_id": code.property_id,
        "code_number": code.code_number,
        "description": code.description,
        "updated_at": code.updated_at,
        "last_used_at": code.last_used_at,
    }


def _new_door_codes(property_id: str, codes: Sequence[Row]) -> list[DoorCode]:
    return [
        DoorCode(
            property_id=property_id,
            code_number=code["code_number"],
            description=code.get("description", ""),
            updated_at=code.get("updated_at") or utc_now(),
            last_used_at=code.get("last_used_at"),
        )
        for code in codes
    ]


class SqlPropertyStore(PropertyStore):
    """Property store backed by a relational database through SQLAlchemy."""

    backend = "sql"

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        engine: AsyncEngine | None = None,
    ):
        self._session_factory = session_factory
        self._engine = engine

    @asynccontextmanager
    async def _transaction(
        self, operation: str, target_id: Any = None
    ) -> AsyncIterator[AsyncSession]:
        """Session with an open transaction, committed on success."""
        try:
            async with self._session_factory() as db:
                async with db.begin():
                    yield db
        except SQLAlchemyError as exc:
            logger.error(
                f"Store operation '{operation}' failed: {exc}",
                extra={"operation": operation, "target_id": target_id},
            )
            raise StoreError(
                str(exc), operation=operation, target_id=target_id
            ) from exc

    async def ping(self) -> None:
        # Errors propagate untranslated so the store factory can tell a
        # connectivity failure apart from anything else.
        async with self._session_factory() as db:
            await db.execute(select(Property.id).limit(1))

    # ----- Reads -----

    async def list_properties(self) -> list[Row]:
        query = select(*_PROPERTY_COLUMNS).order_by(
            Property.created_at, Property.name
        )
        async with self._transaction("list_properties") as db:
            return await _fetch_all(db, query)

    async def list_groups(self, property_ids: Sequence[str]) -> list[Row]:
        query = (
            select(*_GROUP_COLUMNS)
            .where(WhatsAppGroup.property_id.in_(list(property_ids)))
            .order_by(WhatsAppGroup.created_at, WhatsAppGroup.name)
        )
        async with self._transaction("list_groups") as db:
            return await _fetch_all(db, query)

    async def list_door_codes(self, property_ids: Sequence[str]) -> list[Row]:
        query = (
            select(*_DOOR_CODE_COLUMNS)
            .where(DoorCode.property_id.in_(list(property_ids)))
            .order_by(DoorCode.property_id, DoorCode.code_number)
        )
        async with self._transaction("list_door_codes") as db:
            return await _fetch_all(db, query)

    # Name lookups compare with str.casefold() rather than SQL lower(), whose
    # folding of non-ASCII text depends on the backend.

    async def find_property_by_name(self, name: str) -> Row:
        query = select(*_PROPERTY_COLUMNS).order_by(
            Property.created_at, Property.name
        )
        async with self._transaction("find_property_by_name", name) as db:
            rows = await _fetch_all(db, query)
        return _match_name(rows, name, "Property")

    async def find_group_by_name(
        self, name: str, property_id: str | None = None
    ) -> Row:
        query = select(*_GROUP_COLUMNS)
        if property_id is not None:
            query = query.where(WhatsAppGroup.property_id == property_id)
        query = query.order_by(WhatsAppGroup.created_at, WhatsAppGroup.name)
        async with self._transaction("find_group_by_name", name) as db:
            rows = await _fetch_all(db, query)
        return _match_name(rows, name, "Group")

    # ----- Writes -----

    async def insert_property(self, name: str) -> Row:
        async with self._transaction("insert_property") as db:
            property_obj = Property(name=name)
            db.add(property_obj)
            await db.flush()
            return {"id": property_obj.id, "name": property_obj.name}

    async def insert_door_codes(
        self, property_id: str, codes: Sequence[Row]
    ) -> list[Row]:
        async with self._transaction("insert_door_codes", property_id) as db:
            await _fetch_one(
                db,
                select(Property.id).where(Property.id == property_id),
                "Property",
                property_id,
            )
            door_codes = _new_door_codes(property_id, codes)
            db.add_all(door_codes)
            await db.flush()
            return [_door_code_row(c) for c in door_codes]

    async def create_property_with_door_codes(
        self, name: str, codes: Sequence[Row]
    ) -> tuple[Row, list[Row]]:
        """Insert the property and its door codes in one transaction."""
        async with self._transaction("create_property_with_door_codes") as db:
            property_obj = Property(name=name)
            db.add(property_obj)
            await db.flush()

            door_codes = _new_door_codes(property_obj.id, codes)
            db.add_all(door_codes)
            await db.flush()

            return (
                {"id": property_obj.id, "name": property_obj.name},
                [_door_code_row(c) for c in door_codes],
            )

    async def insert_group(self, property_id: str, fields: Row) -> Row:
        async with self._transaction("insert_group", property_id) as db:
            await _fetch_one(
                db,
                select(Property.id).where(Property.id == property_id),
                "Property",
                property_id,
            )
            group = WhatsAppGroup(
                property_id=property_id,
                name=fields["name"],
                template=fields.get("template", ""),
                links=fields.get("links"),
                evolution_id=fields.get("evolution_id"),
            )
            db.add(group)
            await db.flush()
            return _group_row(group)

    async def update_group(self, group_id: str, fields: Row) -> Row:
        query = select(*_GROUP_COLUMNS).where(WhatsAppGroup.id == group_id)
        async with self._transaction("update_group", group_id) as db:
            row = await _fetch_one(db, query, "Group", group_id)
            await db.execute(
                update(WhatsAppGroup)
                .where(WhatsAppGroup.id == group_id)
                .values(**fields)
            )
            row.update(fields)
            return row

    async def update_door_code(
        self, door_code_id: str, description: str, updated_at: datetime
    ) -> Row:
        query = select(*_DOOR_CODE_COLUMNS).where(DoorCode.id == door_code_id)
        values = {"description": description, "updated_at": updated_at}
        async with self._transaction("update_door_code", door_code_id) as db:
            row = await _fetch_one(db, query, "DoorCode", door_code_id)
            await db.execute(
                update(DoorCode).where(DoorCode.id == door_code_id).values(**values)
            )
            row.update(values)
            return row

    async def delete_property(self, property_id: str) -> None:
        # Children are removed explicitly as well, for backends where
        # foreign-key enforcement is switched off.
        async with self._transaction("delete_property", property_id) as db:
            await db.execute(
                delete(WhatsAppGroup).where(WhatsAppGroup.property_id == property_id)
            )
            await db.execute(
                delete(DoorCode).where(DoorCode.property_id == property_id)
            )
            await db.execute(delete(Property).where(Property.id == property_id))

    async def delete_group(self, group_id: str) -> None:
        async with self._transaction("delete_group", group_id) as db:
            await db.execute(delete(WhatsAppGroup).where(WhatsAppGroup.id == group_id))

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
