# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Class API request and response models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from src.infrastructure.database.models import Medium
from src.models.common import SectionItem


class ClassCreateRequest(BaseModel):
    """Request to create a class."""

    name: str = Field(min_length=1, max_length=50, examples=["Eight"])
    medium: Medium = Medium.BANGLA


class ClassUpdateRequest(BaseModel):
    """Partial update of a class. Only fields that are sent are changed."""

    name: str | None = Field(default=None, min_length=1, max_length=50)
    medium: Medium | None = None
    is_active: bool | None = None


class ClassCounts(BaseModel):
    """Nested counts of a class."""

    sections: int = 0


class ClassResponse(BaseModel):
    """Class with its sections and counts."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    medium: Medium
    is_active: bool
    created_at: datetime
    updated_at: datetime
    sections: list[SectionItem] = []
    counts: ClassCounts = Field(default_factory=ClassCounts, alias="_count")


class ClassConfig(BaseModel):
    """Desired activation state of one class."""

    id: str
    is_active: bool


class ClassSetupRequest(BaseModel):
    """Bulk activation of classes, optionally limited to one medium in the reply."""

    medium: Medium | None = None
    class_configs: list[ClassConfig] = Field(min_length=1)


class ClassBulkUpdateRequest(BaseModel):
    """Set the same activation state on many classes."""

    class_ids: list[str] = Field(min_length=1)
    is_active: bool
