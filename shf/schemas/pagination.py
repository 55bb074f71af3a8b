from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class PaginatedResponse(BaseModel, Generic[T]):
    """One page of a listing together with the size of the whole listing."""

    items: list[T]
    total: int = Field(..., description="Number of items across all pages")
    page: int
    page_size: int
