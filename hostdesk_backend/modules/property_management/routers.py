"""Property management API routes."""

from fastapi import APIRouter, Query, status

from ..commons import SuccessResponse
from . import services
from .dependencies import LinksDedupe, Store
from .schemas import (
    AllDataResponse,
    DoorCodeEnvelope,
    DoorCodeUpdate,
    GroupCreate,
    GroupEnvelope,
    GroupTemplateResponse,
    GroupUpdate,
    PropertyCreate,
    PropertyEnvelope,
    PropertyGroupsResponse,
)

data_router = APIRouter(prefix="/data", tags=["Data"])
router = APIRouter(prefix="/properties", tags=["Properties"])
groups_router = APIRouter(prefix="/groups", tags=["Groups"])
door_codes_router = APIRouter(prefix="/door-codes", tags=["Door Codes"])


# ----- Dashboard data -----


@data_router.get("", response_model=AllDataResponse)
async def get_all_data(store: Store):
    """Get every property with its groups and door codes."""
    properties = await services.get_all_properties(store)
    return AllDataResponse(properties=properties)


# ----- Properties -----


@router.post(
    "", response_model=PropertyEnvelope, status_code=status.HTTP_201_CREATED
)
async def create_property(data: PropertyCreate, store: Store):
    """Create a property and its door codes."""
    property_view = await services.add_property(store, data.name)
    return PropertyEnvelope(property=property_view)


@router.delete("/{property_id}", response_model=SuccessResponse)
async def delete_property(property_id: str, store: Store):
    """Delete a property with all of its groups and door codes."""
    await services.delete_property(store, property_id)
    return SuccessResponse()


@router.post(
    "/{property_id}/groups",
    response_model=GroupEnvelope,
    status_code=status.HTTP_201_CREATED,
)
async def create_group(property_id: str, data: GroupCreate, store: Store):
    """Attach a messaging group to a property."""
    group = await services.add_group(
        store, property_id, data.name, evolution_id=data.evolution_id
    )
    return GroupEnvelope(group=group)


@router.get("/{property_name}/groups", response_model=PropertyGroupsResponse)
async def get_groups_by_property_name(property_name: str, store: Store):
    """Get the groups of a property looked up by name."""
    return await services.find_groups_by_property_name(store, property_name)


# ----- Groups -----


@groups_router.put("/{group_id}", response_model=GroupEnvelope)
async def update_group(
    group_id: str, data: GroupUpdate, store: Store, dedupe: LinksDedupe
):
    """Replace a group's template and links."""
    group = await services.update_group(
        store, group_id, data.template, data.links, dedupe=dedupe
    )
    return GroupEnvelope(group=group)


@groups_router.delete("/{group_id}", response_model=SuccessResponse)
async def delete_group(group_id: str, store: Store):
    """Delete a group."""
    await services.delete_group(store, group_id)
    return SuccessResponse()


@groups_router.get("/{group_name}/template", response_model=GroupTemplateResponse)
async def get_group_template(
    group_name: str,
    store: Store,
    property_name: str | None = Query(None, alias="propertyName"),
):
    """Get the message template of a group looked up by name."""
    return await services.get_group_template(
        store, group_name, property_name=property_name
    )


# ----- Door codes -----


@door_codes_router.put("/{door_code_id}", response_model=DoorCodeEnvelope)
async def update_door_code(door_code_id: str, data: DoorCodeUpdate, store: Store):
    """Update a door code's description."""
    door_code = await services.update_door_code(
        store, door_code_id, data.description
    )
    return DoorCodeEnvelope(door_code=door_code)
