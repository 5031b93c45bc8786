# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pydantic request and response models for the API.

Nested counts are exposed as ``_count`` and embedded class references as
``class``; both are aliases, so Python code uses ``counts`` and
``class_info``.
"""

from src.models.common import (
    ClassBrief,
    DepartmentBrief,
    MessageResponse,
    PaginatedResponse,
    PaginationMeta,
    ResetResponse,
    SectionCounts,
    SectionItem,
    SetupSaveResponse,
)

__all__ = [
    "ClassBrief",
    "DepartmentBrief",
    "MessageResponse",
    "PaginatedResponse",
    "PaginationMeta",
    "ResetResponse",
    "SectionCounts",
    "SectionItem",
    "SetupSaveResponse",
]
