from typing import Generic, TypeVar

from pydantic import Field

from taskboard.core.views import ViewModel

T = TypeVar("T")


class PaginationResult(ViewModel, Generic[T]):
    """One page of a list endpoint, addressed by limit and offset."""

    items: list[T]
    total: int = Field(..., ge=0, description="Matching items across all pages")
    limit: int = Field(..., ge=1)
    offset: int = Field(..., ge=0)

    @property
    def has_more(self) -> bool:
        return self.offset + len(self.items) < self.total
