# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Department and class-department association API models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from src.models.common import ClassBrief, DepartmentBrief


class DepartmentCreateRequest(BaseModel):
    """Request to create a department."""

    name: str = Field(min_length=1, max_length=100, examples=["Science"])
    description: str | None = None


class DepartmentUpdateRequest(BaseModel):
    """Partial update of a department."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None
    is_active: bool | None = None


class DepartmentCounts(BaseModel):
    """Nested counts of a department."""

    sections: int = 0


class DepartmentResponse(BaseModel):
    """Department with its section count.

    When returned for a specific class the count covers only that class.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    description: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime
    counts: DepartmentCounts = Field(default_factory=DepartmentCounts, alias="_count")


class DepartmentConfig(BaseModel):
    """Desired global activation state of one department."""

    id: str
    is_active: bool


class DepartmentSetupRequest(BaseModel):
    """Bulk global activation of departments."""

    department_configs: list[DepartmentConfig] = Field(min_length=1)


class DepartmentBulkUpdateRequest(BaseModel):
    """Set the same activation state on many departments."""

    department_ids: list[str] = Field(min_length=1)
    is_active: bool


class ClassDepartmentConfig(BaseModel):
    """Desired activation of one department for a class."""

    department_id: str
    is_active: bool


class ClassDepartmentSetupRequest(BaseModel):
    """Upsert the department associations of one class."""

    class_id: str
    departments: list[ClassDepartmentConfig] = Field(min_length=1)


class ClassDepartmentRow(BaseModel):
    """Stored association row between a class and a department."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    is_active: bool
    created_at: datetime
    updated_at: datetime


class ClassDepartmentResponse(BaseModel):
    """Association row with its department."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    class_id: str
    department_id: str
    is_active: bool
    created_at: datetime
    updated_at: datetime
    department: DepartmentBrief


class ClassDepartmentStatus(BaseModel):
    """Department as seen from one class.

    ``is_active`` is the class-specific state; a missing association row
    reads as inactive.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    description: str | None = None
    is_active: bool
    class_department: ClassDepartmentRow | None = None
    counts: DepartmentCounts = Field(default_factory=DepartmentCounts, alias="_count")


class ClassDepartmentsResponse(BaseModel):
    """Every active department with its activation for one class."""

    model_config = ConfigDict(populate_by_name=True)

    class_info: ClassBrief = Field(alias="class")
    departments: list[ClassDepartmentStatus]
