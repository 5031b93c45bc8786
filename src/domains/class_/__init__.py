# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Class domain package.

This package provides class registry functionality including:
- Class CRUD operations
- Bulk activation and reset sweeps
- Section and student count tracking
"""

from src.domains.class_.service import (
    ClassesNotFoundError,
    ClassHasStudentsError,
    ClassNameExistsError,
    ClassNotFoundError,
    ClassService,
    ClassServiceError,
)

__all__ = [
    "ClassService",
    "ClassServiceError",
    "ClassNotFoundError",
    "ClassNameExistsError",
    "ClassHasStudentsError",
    "ClassesNotFoundError",
]
