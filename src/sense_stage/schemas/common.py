"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    """One page of a list endpoint plus the total matching count."""

    items: list[T]
    total: int = Field(..., ge=0, description="Rows matching the query across all pages")
    limit: int
    offset: int


class ErrorResponse(BaseModel):
    """Body returned for every handled error."""

    error_code: str
    message: str
