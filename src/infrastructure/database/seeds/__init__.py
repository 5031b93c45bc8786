# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database seed package.

This package contains demo data for initializing the school database:
classes, departments, per-class department activation and sections.
"""

from src.infrastructure.database.seeds.school import seed_school_database

__all__ = ["seed_school_database"]
