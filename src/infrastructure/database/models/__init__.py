# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy models for the school database."""

from src.infrastructure.database.models.base import (
    Base,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
    generate_uuid,
    utc_now,
)
from src.infrastructure.database.models.school import (
    Class,
    ClassDepartment,
    Department,
    Medium,
    Section,
    Student,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    "generate_uuid",
    "utc_now",
    "Class",
    "ClassDepartment",
    "Department",
    "Medium",
    "Section",
    "Student",
]
