# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Models for the setup screens."""

from pydantic import BaseModel, ConfigDict, Field

from src.infrastructure.database.models import Medium
from src.models.class_ import ClassConfig, ClassCounts
from src.models.common import ClassBrief, DepartmentBrief
from src.models.department import DepartmentConfig
from src.models.section import SectionConfig, SectionResponse


class ClassSetupItem(BaseModel):
    """Class row of the class setup screen."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    medium: Medium
    is_active: bool
    counts: ClassCounts = Field(default_factory=ClassCounts, alias="_count")


class SaveClassSetupRequest(BaseModel):
    """Save the class setup screen."""

    medium: Medium | None = None
    classes: list[ClassConfig] = Field(min_length=1)


class SaveDepartmentSetupRequest(BaseModel):
    """Save the department setup screen of one class."""

    class_id: str
    departments: list[DepartmentConfig] = Field(min_length=1)


class SaveSectionSetupRequest(BaseModel):
    """Save the section setup screen of one class and department."""

    class_id: str
    department_id: str | None = None
    sections: list[SectionConfig] = Field(min_length=1)


class ResetSectionSetupRequest(BaseModel):
    """Deactivate the sections of one class and optional department."""

    class_id: str
    department_id: str | None = None


class SectionSetupView(BaseModel):
    """Payload of the section setup screen."""

    model_config = ConfigDict(populate_by_name=True)

    class_info: ClassBrief = Field(alias="class")
    department: DepartmentBrief | None = None
    sections: list[SectionResponse]
