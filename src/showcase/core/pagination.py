import math
from typing import TypeVar

from pydantic import BaseModel, Field, computed_field

T = TypeVar("T")


class PaginationResult[T](BaseModel):
    """Pagination result wrapper for list endpoints."""

    items: list[T] = Field(..., description="List of items in current page")
    total: int = Field(..., description="Total number of items across all pages", ge=0)
    page: int = Field(..., description="Current page number (1-based)", ge=1)
    limit: int = Field(..., description="Maximum items per page", ge=1)

    @computed_field(description="Total number of pages")  # type: ignore[prop-decorator]
    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit)

    @property
    def has_more(self) -> bool:
        """Whether there are more items beyond the current page."""
        return self.page < self.pages


def page_offset(page: int, limit: int) -> int:
    """Number of items to skip for a 1-based page."""
    return (page - 1) * limit
