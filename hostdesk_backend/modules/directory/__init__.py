"""External directory gateway (listing and messaging directories)."""

from .client import DirectoryClient
from .routers import hospitable_router, whatsapp_router

__all__ = [
    "DirectoryClient",
    "hospitable_router",
    "whatsapp_router",
]
