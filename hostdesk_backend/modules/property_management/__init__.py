"""Property management module for HostDesk.

Properties, their messaging groups and their door codes.
"""

from .crud import SqlPropertyStore
from .dependencies import create_store, get_store
from .memory_store import MemoryPropertyStore
from .models import DOOR_CODE_SLOTS, DoorCode, Property, WhatsAppGroup
from .routers import data_router, door_codes_router, groups_router, router
from .store import PropertyStore

__all__ = [
    # Models
    "Property",
    "WhatsAppGroup",
    "DoorCode",
    "DOOR_CODE_SLOTS",
    # Stores
    "PropertyStore",
    "SqlPropertyStore",
    "MemoryPropertyStore",
    "create_store",
    "get_store",
    # Routers
    "router",
    "data_router",
    "groups_router",
    "door_codes_router",
]
