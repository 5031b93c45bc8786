# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

This package contains all v1 API endpoint definitions.
Each module provides a FastAPI router for a specific domain.

Modules:
    classes: Class registry and activation endpoints.
    departments: Department registry and per-class activation endpoints.
    sections: Section registry and per-scope setup endpoints.
    setup: Setup screen endpoints combining the three registries.
"""

from fastapi import APIRouter

from src.api.v1 import classes, departments, sections, setup

# Create the main v1 router
router = APIRouter(prefix="/api/v1")

# Include domain routers
router.include_router(classes.router, prefix="/classes", tags=["Classes"])
router.include_router(departments.router, prefix="/departments", tags=["Departments"])
router.include_router(sections.router, prefix="/sections", tags=["Sections"])
router.include_router(setup.router, prefix="/setup", tags=["Setup"])

__all__ = ["router"]
