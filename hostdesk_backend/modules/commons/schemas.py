"""Common schemas shared across all modules."""

from pydantic import BaseModel, Field


class SuccessResponse(BaseModel):
    """Body returned by operations that have nothing else to report."""

    success: bool = Field(default=True, description="Whether the request succeeded")


class ErrorResponse(BaseModel):
    """Error envelope returned for every failed request."""

    error: str = Field(..., description="Short summary of what failed")
    details: str = Field(..., description="Underlying error message")
