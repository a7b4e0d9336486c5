"""
Common DTOs
===========

Response envelopes and pagination shared by every resource.
"""
import math
from dataclasses import dataclass
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """One page of entities plus the total matching count."""
    items: List[T]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


class PaginationMeta(BaseModel):
    current: int
    pages: int
    total: int
    limit: int


class DataResponse(BaseModel, Generic[T]):
    """Single-entity envelope."""
    success: bool = True
    message: Optional[str] = None
    data: T


class PageResponse(BaseModel, Generic[T]):
    """List envelope with pagination metadata."""
    success: bool = True
    data: List[T]
    pagination: PaginationMeta

    class Config:
        json_schema_extra = {
            "example": {
                "success": True,
                "data": [],
                "pagination": {"current": 1, "pages": 0, "total": 0, "limit": 10},
            }
        }


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    """Body rendered for every LedgerError."""
    success: bool = False
    message: str
    error: str

    class Config:
        json_schema_extra = {
            "example": {
                "success": False,
                "message": "No copies of 'Dune' available for borrowing",
                "error": "capacity_exhausted",
            }
        }


def pagination_of(page: Page) -> PaginationMeta:
    return PaginationMeta(current=page.page, pages=page.pages, total=page.total, limit=page.limit)
