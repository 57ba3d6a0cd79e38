"""Schemas for the external directory pass-through endpoints."""

from pydantic import BaseModel, Field


class ListingProperty(BaseModel):
    """A property as listed by the listing directory."""

    id: str
    name: str = ""

    class Config:
        coerce_numbers_to_str = True


class ListingPropertiesResponse(BaseModel):
    data: list[ListingProperty] = Field(default_factory=list)


class MessagingGroup(BaseModel):
    """A group as listed by the messaging directory."""

    id: str
    subject: str = ""
