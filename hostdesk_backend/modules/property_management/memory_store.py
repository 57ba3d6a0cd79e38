"""In-process fallback store used when the database cannot be reached.

Holds the three collections as plain lists with a single counter for ids.
Operations are synchronous linear scans. There is no locking, so this store is
only meant for local development with a single client.
"""

import itertools
from collections.abc import Sequence
from datetime import datetime

from ...core.exceptions import ResourceNotFoundError
from ...core.utils import utc_now
from .store import PropertyStore, Row


def _copy(row: Row) -> Row:
    copied = dict(row)
    if isinstance(copied.get("links"), list):
        copied["links"] = list(copied["links"])
    return copied


class MemoryPropertyStore(PropertyStore):
    """Property store backed by process memory."""

    backend = "memory"

    def __init__(self):
        self._properties: list[Row] = []
        self._groups: list[Row] = []
        self._door_codes: list[Row] = []
        self._counter = itertools.count(1)

    def _next_id(self, prefix: str) -> str:
        return f"{prefix}-{next(self._counter)}"

    def _find(self, rows: list[Row], row_id: str) -> Row | None:
        for row in rows:
            if row["id"] == row_id:
                return row
        return None

    def _require_property(self, property_id: str) -> Row:
        row = self._find(self._properties, property_id)
        if row is None:
            raise ResourceNotFoundError("Property", property_id)
        return row

    async def ping(self) -> None:
        return None

    async def list_properties(self) -> list[Row]:
        return [{"id": p["id"], "name": p["name"]} for p in self._properties]

    async def list_groups(self, property_ids: Sequence[str]) -> list[Row]:
        wanted = set(property_ids)
        return [_copy(g) for g in self._groups if g["property_id"] in wanted]

    async def list_door_codes(self, property_ids: Sequence[str]) -> list[Row]:
        wanted = set(property_ids)
        return [_copy(c) for c in self._door_codes if c["property_id"] in wanted]

    async def insert_property(self, name: str) -> Row:
        row = {"id": self._next_id("mem"), "name": name}
        self._properties.append(row)
        return _copy(row)

    async def insert_door_codes(
        self, property_id: str, codes: Sequence[Row]
    ) -> list[Row]:
        self._require_property(property_id)
        rows = [
            {
                "id": self._next_id("mem-code"),
                "property_id": property_id,
                "code_number": code["code_number"],
                "description": code.get("description", ""),
                "updated_at": code.get("updated_at") or utc_now(),
                "last_used_at": code.get("last_used_at"),
            }
            for code in codes
        ]
        self._door_codes.extend(rows)
        return [_copy(r) for r in rows]

    async def insert_group(self, property_id: str, fields: Row) -> Row:
        self._require_property(property_id)
        links = fields.get("links")
        row = {
            "id": self._next_id("mem-group"),
            "property_id": property_id,
            "name": fields["name"],
            "template": fields.get("template", ""),
            "links": list(links) if links is not None else None,
            "evolution_id": fields.get("evolution_id"),
        }
        self._groups.append(row)
        return _copy(row)

    async def update_group(self, group_id: str, fields: Row) -> Row:
        row = self._find(self._groups, group_id)
        if row is None:
            raise ResourceNotFoundError("Group", group_id)
        for key, value in fields.items():
            row[key] = list(value) if key == "links" and value is not None else value
        return _copy(row)

    async def update_door_code(
        self, door_code_id: str, description: str, updated_at: datetime
    ) -> Row:
        row = self._find(self._door_codes, door_code_id)
        if row is None:
            raise ResourceNotFoundError("DoorCode", door_code_id)
        row["description"] = description
        row["updated_at"] = updated_at
        return _copy(row)

    async def delete_property(self, property_id: str) -> None:
        self._groups = [g for g in self._groups if g["property_id"] != property_id]
        self._door_codes = [
            c for c in self._door_codes if c["property_id"] != property_id
        ]
        self._properties = [p for p in self._properties if p["id"] != property_id]

    async def delete_group(self, group_id: str) -> None:
        self._groups = [g for g in self._groups if g["id"] != group_id]

    async def find_property_by_name(self, name: str) -> Row:
        wanted = name.casefold()
        for row in self._properties:
            if row["name"].casefold() == wanted:
                return _copy(row)
        raise ResourceNotFoundError("Property", name)

    async def find_group_by_name(
        self, name: str, property_id: str | None = None
    ) -> Row:
        wanted = name.casefold()
        for row in self._groups:
            if property_id is not None and row["property_id"] != property_id:
                continue
            if row["name"].casefold() == wanted:
                return _copy(row)
        raise ResourceNotFoundError("Group", name)
