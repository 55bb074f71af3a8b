"""Standardized error response schema."""

from pydantic import BaseModel, Field


class FieldErrorDetail(BaseModel):
    field: str = Field(..., description="Attribute the error belongs to, or 'base'")
    code: str = Field(..., description="Machine-readable reason, e.g. 'taken' or 'invalid_chars'")
    message: str


class ErrorResponse(BaseModel):
    """Standard error body for domain exceptions (4xx)."""

    detail: str = Field(..., description="Human-readable error message")
    code: str = Field(..., description="Machine-readable error code")
    errors: list[FieldErrorDetail] | None = Field(
        None, description="Per-field validation errors, when the request failed record validation"
    )
