"""
Custom exception classes for consistent error handling across all modules.

Each exception carries the HTTP status it is surfaced with and a short
summary used as the ``error`` field of the response envelope; ``message``
becomes the ``details`` field.
"""

from typing import Any


class HostDeskException(Exception):
    """Base exception for all HostDesk related errors."""

    status_code: int = 500
    summary: str = "Request failed"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(HostDeskException):
    """Raised when a required field is missing or empty."""

    status_code = 400
    summary = "Validation failed"

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
        details: dict[str, Any] | None = None,
    ):
        if field:
            full_message = f"Validation error for field '{field}': {message}"
        else:
            full_message = message
        super().__init__(full_message, details)
        self.field = field
        self.value = value


class ResourceNotFoundError(HostDeskException):
    """Raised when a lookup by id or name yields no row."""

    status_code = 404

    def __init__(
        self,
        resource_type: str,
        identifier: Any,
        details: dict[str, Any] | None = None,
    ):
        message = f"{resource_type} with identifier '{identifier}' not found"
        super().__init__(message, details)
        self.resource_type = resource_type
        self.identifier = identifier
        self.summary = f"{resource_type} not found"


class StoreError(HostDeskException):
    """Raised when the backing store is unreachable or rejects an operation."""

    summary = "Store operation failed"

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        target_id: Any = None,
        details: dict[str, Any] | None = None,
    ):
        details = dict(details or {})
        if operation:
            details.setdefault("operation", operation)
        if target_id is not None:
            details.setdefault("target_id", target_id)
        super().__init__(message, details)
        self.operation = operation
        self.target_id = target_id


class DoorCodeProvisioningError(StoreError):
    """Raised when door codes could not be created for a new property.

    ``orphaned_property_id`` is set only when the compensating delete of the
    property row also failed and the row needs manual reconciliation.
    """

    summary = "Door code provisioning failed"

    def __init__(
        self,
        message: str,
        property_id: Any = None,
        orphaned_property_id: Any = None,
        details: dict[str, Any] | None = None,
    ):
        details = dict(details or {})
        if orphaned_property_id is not None:
            details["orphaned_property_id"] = orphaned_property_id
        super().__init__(
            message,
            operation="create_property_with_door_codes",
            target_id=property_id,
            details=details,
        )
        self.orphaned_property_id = orphaned_property_id


class UpstreamError(HostDeskException):
    """Raised when an external directory call fails or returns non-success."""

    summary = "Upstream request failed"

    def __init__(
        self,
        service_name: str,
        operation: str,
        upstream_status: int | None = None,
        reason: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        message = f"External service '{service_name}' failed during '{operation}'"
        if upstream_status is not None:
            message += f" (upstream status {upstream_status})"
        if reason:
            message += f": {reason}"
        details = dict(details or {})
        details.update(
            {
                "service": service_name,
                "operation": operation,
                "upstream_status": upstream_status,
            }
        )
        super().__init__(message, details)
        self.service_name = service_name
        self.operation = operation
        self.upstream_status = upstream_status
