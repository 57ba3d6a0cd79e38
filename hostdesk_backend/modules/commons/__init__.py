"""Common schemas and utilities shared across modules."""

from .schemas import ErrorResponse, SuccessResponse

__all__ = [
    "ErrorResponse",
    "SuccessResponse",
]
