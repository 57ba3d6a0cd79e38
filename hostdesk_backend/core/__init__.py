"""Core infrastructure for the HostDesk backend."""

from .exceptions import (
    DoorCodeProvisioningError,
    HostDeskException,
    ResourceNotFoundError,
    StoreError,
    UpstreamError,
    ValidationError,
)
from .utils import sanitize_string, utc_now

__all__ = [
    "HostDeskException",
    "ValidationError",
    "ResourceNotFoundError",
    "StoreError",
    "DoorCodeProvisioningError",
    "UpstreamError",
    "sanitize_string",
    "utc_now",
]
