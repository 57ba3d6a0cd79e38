"""Property management business logic services.

Reads assemble the flat store rows into nested property views; writes
validate input and delegate to whichever store is active.
"""

from collections import defaultdict
from collections.abc import Iterable

from ...core.exceptions import ValidationError
from ...core.logging import get_logger
from ...core.utils import sanitize_string, utc_now
from .models import DOOR_CODE_SLOTS
from .schemas import (
    DoorCodeResponse,
    GroupResponse,
    GroupTemplateResponse,
    PropertyGroupsResponse,
    PropertyResponse,
)
from .store import PropertyStore, Row

logger = get_logger("property_management.services")


def _require_name(value: str | None, field: str = "name") -> str:
    name = sanitize_string(value)
    if not name:
        raise ValidationError("must not be empty", field=field, value=value)
    return name


def _group_view(row: Row) -> GroupResponse:
    links = row.get("links")
    return GroupResponse(
        id=row["id"],
        name=row["name"],
        template=row.get("template") or "",
        links=list(links) if links is not None else [],
        evolution_id=row.get("evolution_id"),
    )


def _door_code_view(row: Row) -> DoorCodeResponse:
    return DoorCodeResponse.model_validate(row)


def dedupe_links(links: Iterable[str]) -> list[str]:
    """Drop repeated links, keeping the first occurrence and the order."""
    seen: set[str] = set()
    unique = []
    for link in links:
        if link not in seen:
            seen.add(link)
            unique.append(link)
    return unique


# ----- Assembly -----


async def get_all_properties(store: PropertyStore) -> list[PropertyResponse]:
    """Fetch every property with its groups and door codes nested.

    Groups and door codes are loaded with one batched query each, whatever
    the number of properties. Any failing fetch fails the whole call.
    """
    properties = await store.list_properties()
    if not properties:
        return []

    property_ids = [p["id"] for p in properties]
    groups = await store.list_groups(property_ids)
    door_codes = await store.list_door_codes(property_ids)

    groups_by_property: dict[str, list[GroupResponse]] = defaultdict(list)
    for row in groups:
        groups_by_property[row["property_id"]].append(_group_view(row))

    codes_by_property: dict[str, list[DoorCodeResponse]] = defaultdict(list)
    for row in door_codes:
        codes_by_property[row["property_id"]].append(_door_code_view(row))

    return [
        PropertyResponse(
            id=p["id"],
            name=p["name"],
            whatsapp_groups=groups_by_property.get(p["id"], []),
            door_codes=codes_by_property.get(p["id"], []),
        )
        for p in properties
    ]


# ----- Properties -----


async def add_property(store: PropertyStore, name: str) -> PropertyResponse:
    """Create a property together with its block of empty door codes.

    Raises:
        ValidationError: If name is empty
        DoorCodeProvisioningError: If the door codes could not be created
    """
    name = _require_name(name)
    now = utc_now()
    codes = [
        {"code_number": slot, "description": "", "updated_at": now}
        for slot in range(DOOR_CODE_SLOTS)
    ]

    property_row, code_rows = await store.create_property_with_door_codes(
        name, codes
    )
    logger.info(
        f"Created property {property_row['id']} with {len(code_rows)} door codes",
        extra={"operation": "add_property", "target_id": property_row["id"]},
    )

    return PropertyResponse(
        id=property_row["id"],
        name=property_row["name"],
        whatsapp_groups=[],
        door_codes=sorted(
            (_door_code_view(r) for r in code_rows), key=lambda c: c.code_number
        ),
    )


async def delete_property(store: PropertyStore, property_id: str) -> None:
    """Delete a property; its groups and door codes go with it."""
    await store.delete_property(property_id)
    logger.info(
        f"Deleted property {property_id}",
        extra={"operation": "delete_property", "target_id": property_id},
    )


# ----- Groups -----


async def add_group(
    store: PropertyStore,
    property_id: str,
    name: str,
    evolution_id: str | None = None,
) -> GroupResponse:
    """Attach a new group with an empty template and no links.

    Raises:
        ValidationError: If name is empty
        ResourceNotFoundError: If the property does not exist
    """
    name = _require_name(name)
    row = await store.insert_group(
        property_id,
        {
            "name": name,
            "template": "",
            "links": [],
            "evolution_id": sanitize_string(evolution_id) or None,
        },
    )
    return _group_view(row)


async def update_group(
    store: PropertyStore,
    group_id: str,
    template: str,
    links: list[str],
    dedupe: bool = False,
) -> GroupResponse:
    """Replace both the template and the links of a group.

    Links are stored exactly as given unless ``dedupe`` is set.
    """
    if dedupe:
        links = dedupe_links(links)
    row = await store.update_group(
        group_id, {"template": template, "links": list(links)}
    )
    return _group_view(row)


async def delete_group(store: PropertyStore, group_id: str) -> None:
    await store.delete_group(group_id)


# ----- Door codes -----


async def update_door_code(
    store: PropertyStore, door_code_id: str, description: str
) -> DoorCodeResponse:
    """Replace a door code's description and refresh its timestamp.

    Raises:
        ResourceNotFoundError: If no door code has this id
    """
    row = await store.update_door_code(door_code_id, description, utc_now())
    return _door_code_view(row)


# ----- Lookups -----


async def find_groups_by_property_name(
    store: PropertyStore, property_name: str
) -> PropertyGroupsResponse:
    """Look a property up by name (case-insensitive) and list its groups."""
    property_name = _require_name(property_name, field="propertyName")
    property_row = await store.find_property_by_name(property_name)
    groups = await store.list_groups([property_row["id"]])
    return PropertyGroupsResponse(
        property_name=property_row["name"],
        property_id=property_row["id"],
        groups=[_group_view(g) for g in groups],
    )


async def get_group_template(
    store: PropertyStore, group_name: str, property_name: str | None = None
) -> GroupTemplateResponse:
    """Look a group up by name, optionally within a named property."""
    group_name = _require_name(group_name, field="groupName")
    property_id = None
    if property_name:
        property_id = (await store.find_property_by_name(property_name))["id"]

    group = await store.find_group_by_name(group_name, property_id=property_id)
    return GroupTemplateResponse(
        group_name=group["name"],
        group_id=group["id"],
        property_id=group["property_id"],
        template=group.get("template") or "",
    )
