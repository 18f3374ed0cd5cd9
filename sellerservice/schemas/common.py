"""Shared pagination schema."""

from __future__ import annotations

from pydantic import BaseModel

from sellerservice import domain


class PaginationResult(BaseModel):
    """Offset pagination block, present only when both page and limit were sent."""

    page: int
    limit: int
    total_pages: int
    total_items: int

    @classmethod
    def from_domain(cls, pagination: domain.PaginationResult) -> PaginationResult:
        return cls(
            page=pagination.page,
            limit=pagination.limit,
            total_pages=pagination.total_pages,
            total_items=pagination.total,
        )
