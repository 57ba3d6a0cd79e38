"""Tests for the SQL store against a temporary SQLite database."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from sqlalchemy import func, select, text

from hostdesk_backend.core.exceptions import ResourceNotFoundError, StoreError
from hostdesk_backend.modules.property_management import DoorCode, Property

pytestmark = pytest.mark.unit

_NOW = datetime(2026, 1, 1, tzinfo=UTC)


def _codes(numbers) -> list[dict]:
    return [{"code_number": n, "description": "", "updated_at": _NOW} for n in numbers]


async def _count(store, model) -> int:
    async with store._session_factory() as db:
        return (await db.execute(select(func.count()).select_from(model))).scalar()


@pytest.mark.asyncio
async def test_create_property_with_door_codes_persists_both(sql_store):
    prop, codes = await sql_store.create_property_with_door_codes(
        "Lakeview", _codes(range(11))
    )

    assert len(prop["id"]) == 36
    assert len(codes) == 11
    stored = await sql_store.list_door_codes([prop["id"]])
    assert [c["code_number"] for c in stored] == list(range(11))
    assert all(c["description"] == "" for c in stored)


@pytest.mark.asyncio
async def test_create_property_with_door_codes_is_one_transaction(sql_store):
    # Slot 3 twice violates the per-property slot uniqueness
    with pytest.raises(StoreError) as exc_info:
        await sql_store.create_property_with_door_codes("Broken", _codes([0, 3, 3]))

    assert exc_info.value.operation == "create_property_with_door_codes"
    assert await sql_store.list_properties() == []
    assert await _count(sql_store, DoorCode) == 0


@pytest.mark.asyncio
async def test_list_queries_filter_by_property_ids(sql_store):
    a = await sql_store.insert_property("A")
    b = await sql_store.insert_property("B")
    await sql_store.insert_door_codes(a["id"], _codes([0, 1]))
    await sql_store.insert_door_codes(b["id"], _codes([0]))
    await sql_store.insert_group(b["id"], {"name": "Guests", "links": ["l1"]})

    codes = await sql_store.list_door_codes([a["id"]])
    groups = await sql_store.list_groups([a["id"], b["id"]])

    assert {c["property_id"] for c in codes} == {a["id"]}
    assert len(groups) == 1
    assert groups[0]["links"] == ["l1"]
    assert groups[0]["property_id"] == b["id"]


@pytest.mark.asyncio
async def test_missing_row_is_translated_to_not_found(sql_store):
    with pytest.raises(ResourceNotFoundError) as exc_info:
        await sql_store.update_door_code("no-such-code", "1234", _NOW)
    assert exc_info.value.resource_type == "DoorCode"

    with pytest.raises(ResourceNotFoundError):
        await sql_store.update_group("no-such-group", {"template": "", "links": []})

    with pytest.raises(ResourceNotFoundError):
        await sql_store.insert_group("no-such-property", {"name": "G"})


@pytest.mark.asyncio
async def test_update_group_replaces_fields(sql_store):
    prop = await sql_store.insert_property("A")
    group = await sql_store.insert_group(
        prop["id"], {"name": "G", "template": "old", "links": ["a", "b"]}
    )

    updated = await sql_store.update_group(
        group["id"], {"template": "new", "links": ["c"]}
    )

    assert updated["template"] == "new"
    assert updated["links"] == ["c"]
    [stored] = await sql_store.list_groups([prop["id"]])
    assert stored["template"] == "new"
    assert stored["links"] == ["c"]


@pytest.mark.asyncio
async def test_null_links_read_back_as_none(sql_store):
    prop = await sql_store.insert_property("A")
    await sql_store.insert_group(prop["id"], {"name": "G", "links": None})

    [stored] = await sql_store.list_groups([prop["id"]])

    assert stored["links"] is None


@pytest.mark.asyncio
async def test_delete_property_removes_children(sql_store):
    prop = await sql_store.insert_property("A")
    await sql_store.insert_door_codes(prop["id"], _codes(range(11)))
    await sql_store.insert_group(prop["id"], {"name": "G"})

    await sql_store.delete_property(prop["id"])

    assert await _count(sql_store, Property) == 0
    assert await _count(sql_store, DoorCode) == 0
    assert await sql_store.list_groups([prop["id"]]) == []


@pytest.mark.asyncio
async def test_find_by_name_is_case_insensitive(sql_store):
    prop = await sql_store.insert_property("Lakeview")
    group = await sql_store.insert_group(prop["id"], {"name": "Guests"})

    assert (await sql_store.find_property_by_name("lakeVIEW"))["id"] == prop["id"]
    found = await sql_store.find_group_by_name("GUESTS", property_id=prop["id"])
    assert found["id"] == group["id"]

    with pytest.raises(ResourceNotFoundError):
        await sql_store.find_group_by_name("Guests", property_id="elsewhere")


@pytest.mark.asyncio
async def test_database_failure_surfaces_as_store_error(sql_store):
    async with sql_store._engine.begin() as conn:
        await conn.execute(text("DROP TABLE properties"))

    with pytest.raises(StoreError) as exc_info:
        await sql_store.list_properties()

    assert exc_info.value.operation == "list_properties"
    assert exc_info.value.status_code == 500


@pytest.mark.asyncio
async def test_door_code_without_timestamp_gets_current_time(sql_store):
    prop = await sql_store.insert_property("A")

    [code] = await sql_store.insert_door_codes(prop["id"], [{"code_number": 0}])

    assert code["updated_at"] is not None
    assert code["description"] == ""
    [stored] = await sql_store.list_door_codes([prop["id"]])
    assert stored["updated_at"] is not None


@pytest.mark.asyncio
async def test_rows_inserted_in_one_second_keep_insertion_order(sql_store):
    for name in ["Zeta", "Alpha", "Mid"]:
        await sql_store.insert_property(name)

    assert [p["name"] for p in await sql_store.list_properties()] == [
        "Zeta",
        "Alpha",
        "Mid",
    ]
