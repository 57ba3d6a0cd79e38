"""Property management schemas for HostDesk.

Response models use camelCase aliases where the dashboard expects them
(``whatsAppGroups``, ``doorCodes``, ``doorCode``).
"""

from datetime import datetime

from pydantic import BaseModel, Field

# ----- Request Schemas -----


class PropertyCreate(BaseModel):
    """Schema for creating a property."""

    name: str = Field(..., max_length=255)


class GroupCreate(BaseModel):
    """Schema for attaching a messaging group to a property."""

    name: str = Field(..., max_length=255)
    evolution_id: str | None = Field(None, max_length=255)


class GroupUpdate(BaseModel):
    """Schema for replacing a group's template and links."""

    template: str = ""
    links: list[str] = Field(default_factory=list)


class DoorCodeUpdate(BaseModel):
    """Schema for updating a door code description."""

    description: str = ""


# ----- View Models -----


class DoorCodeResponse(BaseModel):
    """Schema for door code response."""

    id: str
    code_number: int = Field(..., ge=0)
    description: str = ""
    updated_at: datetime | None = None
    last_used_at: datetime | None = None


class GroupResponse(BaseModel):
    """Schema for messaging group response."""

    id: str
    name: str
    template: str = ""
    links: list[str] = Field(default_factory=list)
    evolution_id: str | None = None


class PropertyResponse(BaseModel):
    """A property with its groups and door codes nested."""

    id: str
    name: str
    whatsapp_groups: list[GroupResponse] = Field(
        default_factory=list, alias="whatsAppGroups"
    )
    door_codes: list[DoorCodeResponse] = Field(
        default_factory=list, alias="doorCodes"
    )

    class Config:
        populate_by_name = True


# ----- Envelopes -----


class AllDataResponse(BaseModel):
    properties: list[PropertyResponse] = Field(default_factory=list)


class PropertyEnvelope(BaseModel):
    property: PropertyResponse


class GroupEnvelope(BaseModel):
    group: GroupResponse


class DoorCodeEnvelope(BaseModel):
    door_code: DoorCodeResponse = Field(..., alias="doorCode")

    class Config:
        populate_by_name = True


class PropertyGroupsResponse(BaseModel):
    """Groups of a property looked up by name."""

    property_name: str = Field(..., alias="propertyName")
    property_id: str = Field(..., alias="propertyId")
    groups: list[GroupResponse] = Field(default_factory=list)

    class Config:
        populate_by_name = True


class GroupTemplateResponse(BaseModel):
    """Template of a group looked up by name."""

    group_name: str = Field(..., alias="groupName")
    group_id: str = Field(..., alias="groupId")
    property_id: str = Field(..., alias="propertyId")
    template: str = ""

    class Config:
        populate_by_name = True
