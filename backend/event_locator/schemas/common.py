"""Response shapes shared across routers."""

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """
    Plain message response, also the shape of every error body.

    Example:
        {"message": "Event deleted successfully"}
    """
    message: str = Field(..., examples=["Event deleted successfully"])


class FieldError(BaseModel):
    field: str = Field(..., examples=["latitude"])
    message: str = Field(..., examples=["Input should be less than or equal to 90"])


class ValidationErrorResponse(BaseModel):
    """
    Body of a 400 validation failure.

    Example:
        {
            "message": "Validation failed",
            "errors": [{"field": "latitude", "message": "..."}]
        }
    """
    message: str = Field(..., examples=["Validation failed"])
    errors: list[FieldError] = Field(default_factory=list)
