# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Section API request and response models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from src.models.common import ClassBrief, DepartmentBrief, SectionCounts


class SectionCreateRequest(BaseModel):
    """Request to create a section."""

    name: str = Field(min_length=1, max_length=20, examples=["A"])
    class_id: str
    department_id: str | None = None
    capacity: int = Field(default=30, ge=1, le=100)


class SectionUpdateRequest(BaseModel):
    """Partial update of a section.

    Sending ``department_id: null`` detaches the section from its department.
    """

    name: str | None = Field(default=None, min_length=1, max_length=20)
    class_id: str | None = None
    department_id: str | None = None
    capacity: int | None = Field(default=None, ge=1, le=100)
    is_active: bool | None = None


class SectionResponse(BaseModel):
    """Section with its class, department and student count."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    class_id: str
    department_id: str | None = None
    capacity: int
    is_active: bool
    created_at: datetime
    updated_at: datetime
    class_info: ClassBrief = Field(alias="class")
    department: DepartmentBrief | None = None
    counts: SectionCounts = Field(default_factory=SectionCounts, alias="_count")


class SectionConfig(BaseModel):
    """One entry of a section setup.

    With ``id`` the existing section's activation is changed; without it a
    new section named ``name`` is created.
    """

    id: str | None = None
    name: str = Field(min_length=1, max_length=20)
    is_active: bool = True


class SectionSetupRequest(BaseModel):
    """Reconcile the sections of one class (and optional department)."""

    class_id: str
    department_id: str | None = None
    section_configs: list[SectionConfig] = Field(min_length=1)


class SectionBulkUpdateRequest(BaseModel):
    """Set the same activation state on many sections."""

    section_ids: list[str] = Field(min_length=1)
    is_active: bool
