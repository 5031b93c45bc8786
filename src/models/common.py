# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Shared API models: pagination envelope, messages and brief references."""

import math
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from src.infrastructure.database.models import Medium

T = TypeVar("T")


class PaginationMeta(BaseModel):
    """Pagination block of a list response."""

    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationMeta":
        """Compute the page count for a result set.

        Args:
            page: Requested page (1-based).
            limit: Page size.
            total: Total number of matching rows.

        Returns:
            Pagination metadata.
        """
        return cls(page=page, limit=limit, total=total, pages=math.ceil(total / limit))


class PaginatedResponse(BaseModel, Generic[T]):
    """List response envelope: ``{data, pagination}``."""

    data: list[T]
    pagination: PaginationMeta


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str


class ResetResponse(BaseModel):
    """Result of a reset sweep."""

    message: str
    affected: int


class SetupSaveResponse(BaseModel):
    """Result of a setup save from the setup screens."""

    message: str
    updated_count: int


class ClassBrief(BaseModel):
    """Class reference embedded in other responses."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    medium: Medium


class DepartmentBrief(BaseModel):
    """Department reference embedded in other responses."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str | None = None


class SectionCounts(BaseModel):
    """Nested counts of a section."""

    students: int = 0


class SectionItem(BaseModel):
    """Section embedded in a class or department response."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    class_id: str
    department_id: str | None = None
    department: DepartmentBrief | None = None
    capacity: int
    is_active: bool
    counts: SectionCounts = Field(default_factory=SectionCounts, alias="_count")
