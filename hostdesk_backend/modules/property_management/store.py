"""Storage contract shared by the SQL store and the in-memory fallback store.

Stores exchange plain row dictionaries keyed by column name:

- property: ``id``, ``name``
- group: ``id``, ``property_id``, ``name``, ``template``, ``links``, ``evolution_id``
- door code: ``id``, ``property_id``, ``code_number``, ``description``,
  ``updated_at``, ``last_used_at``

Rows handed back are copies; mutating them never changes stored state.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import datetime
from typing import Any

from ...core.exceptions import DoorCodeProvisioningError
from ...core.logging import get_logger

Row = dict[str, Any]

logger = get_logger("property_management.store")


class PropertyStore(ABC):
    """Capability set every property store implements."""

    #: Short name of the backend, reported in logs and the health endpoint
    backend: str = "abstract"

    @abstractmethod
    async def ping(self) -> None:
        """Issue a trivial read; raises if the store is unreachable."""

    @abstractmethod
    async def list_properties(self) -> list[Row]:
        """All properties, ``id`` and ``name`` only, in store order."""

    @abstractmethod
    async def list_groups(self, property_ids: Sequence[str]) -> list[Row]:
        """Groups belonging to any of ``property_ids``, in one fetch."""

    @abstractmethod
    async def list_door_codes(self, property_ids: Sequence[str]) -> list[Row]:
        """Door codes belonging to any of ``property_ids``, in one fetch."""

    @abstractmethod
    async def insert_property(self, name: str) -> Row: ...

    @abstractmethod
    async def insert_door_codes(
        self, property_id: str, codes: Sequence[Row]
    ) -> list[Row]:
        """Insert all ``codes`` for ``property_id``; all or nothing."""

    @abstractmethod
    async def insert_group(self, property_id: str, fields: Row) -> Row: ...

    @abstractmethod
    async def update_group(self, group_id: str, fields: Row) -> Row:
        """Overwrite ``fields`` on the group; ResourceNotFoundError if missing."""

    @abstractmethod
    async def update_door_code(
        self, door_code_id: str, description: str, updated_at: datetime
    ) -> Row:
        """Set description and timestamp; ResourceNotFoundError if missing."""

    @abstractmethod
    async def delete_property(self, property_id: str) -> None:
        """Delete the property together with its groups and door codes."""

    @abstractmethod
    async def delete_group(self, group_id: str) -> None: ...

    @abstractmethod
    async def find_property_by_name(self, name: str) -> Row:
        """Case-insensitive exact name match; ResourceNotFoundError if none."""

    @abstractmethod
    async def find_group_by_name(
        self, name: str, property_id: str | None = None
    ) -> Row:
        """Case-insensitive exact name match; ResourceNotFoundError if none."""

    async def create_property_with_door_codes(
        self, name: str, codes: Sequence[Row]
    ) -> tuple[Row, list[Row]]:
        """Insert a property and its door codes.

        Stores without transactions run this as two steps. When the second
        step fails the property row is deleted again; if that delete fails
        too, the error names the orphaned property so it can be reconciled.
        """
        property_row = await self.insert_property(name)
        property_id = property_row["id"]

        try:
            code_rows = await self.insert_door_codes(property_id, codes)
        except Exception as exc:
            logger.error(
                f"Door code provisioning failed for property {property_id}, "
                "removing property",
                extra={"operation": "insert_door_codes", "target_id": property_id},
            )
            try:
                await self.delete_property(property_id)
            except Exception:
                logger.exception(
                    f"Compensating delete failed, property {property_id} is orphaned",
                    extra={"operation": "delete_property", "target_id": property_id},
                )
                raise DoorCodeProvisioningError(
                    f"Door codes could not be created and property "
                    f"'{property_id}' could not be removed: {exc}",
                    property_id=property_id,
                    orphaned_property_id=property_id,
                ) from exc
            raise DoorCodeProvisioningError(
                f"Door codes could not be created, property was not added: "
                f"{exc}",
                property_id=property_id,
            ) from exc

        return property_row, code_rows

    async def close(self) -> None:
        """Release any resources held by the store."""
