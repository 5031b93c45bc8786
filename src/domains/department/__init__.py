# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Department domain package.

This package provides department functionality including:
- Department CRUD operations
- Global bulk activation and reset sweeps
- Per-class department activation
"""

from src.domains.department.service import (
    DepartmentHasStudentsError,
    DepartmentNameExistsError,
    DepartmentNotFoundError,
    DepartmentsNotFoundError,
    DepartmentService,
    DepartmentServiceError,
)

__all__ = [
    "DepartmentService",
    "DepartmentServiceError",
    "DepartmentNotFoundError",
    "DepartmentNameExistsError",
    "DepartmentHasStudentsError",
    "DepartmentsNotFoundError",
]
