# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Section domain package.

This package provides section functionality including:
- Section CRUD operations with reference checks
- Section setup, bulk activation and reset sweeps
"""

from src.domains.section.service import (
    ClassReferenceError,
    DepartmentReferenceError,
    SectionHasStudentsError,
    SectionNameExistsError,
    SectionNotFoundError,
    SectionsNotFoundError,
    SectionService,
    SectionServiceError,
)

__all__ = [
    "SectionService",
    "SectionServiceError",
    "SectionNotFoundError",
    "SectionNameExistsError",
    "SectionHasStudentsError",
    "SectionsNotFoundError",
    "ClassReferenceError",
    "DepartmentReferenceError",
]
