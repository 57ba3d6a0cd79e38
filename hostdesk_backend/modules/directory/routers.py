"""Pass-through routes feeding the dashboard's selection pickers."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from .client import DirectoryClient
from .schemas import ListingPropertiesResponse, MessagingGroup

hospitable_router = APIRouter(prefix="/hospitable", tags=["Directories"])
whatsapp_router = APIRouter(prefix="/whatsapp", tags=["Directories"])


def get_directory_client(request: Request) -> DirectoryClient:
    return request.app.state.directory_client


Directory = Annotated[DirectoryClient, Depends(get_directory_client)]


@hospitable_router.get("/properties", response_model=ListingPropertiesResponse)
async def list_listing_properties(directory: Directory):
    """List candidate properties from the listing directory."""
    return await directory.list_listing_properties()


@whatsapp_router.get("/groups", response_model=list[MessagingGroup])
async def list_messaging_groups(directory: Directory):
    """List candidate groups from the messaging directory."""
    return await directory.list_messaging_groups()
