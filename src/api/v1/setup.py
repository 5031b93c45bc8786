# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Setup screen API endpoints.

Class setup:
- GET /classes - Every class with its state
- POST /classes/save - Save class activation
- POST /classes/reset - Deactivate every class

Department setup (per class):
- GET /departments?class_id= - Every active department with its state for the class
- POST /departments/save - Save department activation for a class
- POST /departments/reset/{class_id} - Switch off every department of a class

Section setup (per class and department):
- GET /sections?class_id=&department_id= - Sections of the scope
- POST /sections/save - Create and toggle sections
- POST /sections/reset - Deactivate sections of a class
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_db, require_admin, require_auth
from src.api.middleware.auth import CurrentUser
from src.domains.setup.service import SetupService
from src.infrastructure.database.models import Medium
from src.models.common import ResetResponse, SetupSaveResponse
from src.models.department import ClassDepartmentsResponse
from src.models.setup import (
    ClassSetupItem,
    ResetSectionSetupRequest,
    SaveClassSetupRequest,
    SaveDepartmentSetupRequest,
    SaveSectionSetupRequest,
    SectionSetupView,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_service(db: AsyncSession) -> SetupService:
    """Get setup service instance.

    Args:
        db: Database session.

    Returns:
        Configured SetupService instance.
    """
    return SetupService(db=db)


# =========================================================================
# Class setup
# =========================================================================


@router.get(
    "/classes",
    response_model=list[ClassSetupItem],
    summary="Class setup screen",
)
async def get_classes_for_setup(
    medium: Annotated[Medium | None, Query(description="Filter by medium")] = None,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> list[ClassSetupItem]:
    """Every class, active or not, with section counts."""
    return await _get_service(db).get_classes_for_setup(medium)


@router.post(
    "/classes/save",
    response_model=SetupSaveResponse,
    summary="Save class setup",
)
async def save_class_setup(
    data: SaveClassSetupRequest,
    current_user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> SetupSaveResponse:
    """Save class activation."""
    return await _get_service(db).save_class_setup(data.classes, medium=data.medium)


@router.post(
    "/classes/reset",
    response_model=ResetResponse,
    summary="Reset class setup",
)
async def reset_class_setup(
    medium: Annotated[Medium | None, Query(description="Only reset this medium")] = None,
    current_user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> ResetResponse:
    """Deactivate every class."""
    return await _get_service(db).reset_class_setup(medium)


# =========================================================================
# Department setup
# =========================================================================


@router.get(
    "/departments",
    response_model=ClassDepartmentsResponse,
    summary="Department setup screen",
)
async def get_departments_for_setup(
    class_id: Annotated[str, Query(description="Class to configure")],
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> ClassDepartmentsResponse:
    """Every active department with its activation for the class."""
    return await _get_service(db).get_departments_for_setup(class_id)


@router.post(
    "/departments/save",
    response_model=SetupSaveResponse,
    summary="Save department setup",
)
async def save_department_setup(
    data: SaveDepartmentSetupRequest,
    current_user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> SetupSaveResponse:
    """Save department activation for a class."""
    return await _get_service(db).save_department_setup(data.class_id, data.departments)


@router.post(
    "/departments/reset/{class_id}",
    response_model=ResetResponse,
    summary="Reset department setup",
)
async def reset_department_setup(
    class_id: str,
    current_user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> ResetResponse:
    """Switch off every department of a class."""
    return await _get_service(db).reset_department_setup(class_id)


# =========================================================================
# Section setup
# =========================================================================


@router.get(
    "/sections",
    response_model=SectionSetupView,
    summary="Section setup screen",
)
async def get_sections_for_setup(
    class_id: Annotated[str, Query(description="Class to configure")],
    department_id: Annotated[str | None, Query(description="Department to configure")] = None,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> SectionSetupView:
    """Sections of one class and department."""
    return await _get_service(db).get_sections_for_setup(class_id, department_id)


@router.post(
    "/sections/save",
    response_model=SetupSaveResponse,
    summary="Save section setup",
)
async def save_section_setup(
    data: SaveSectionSetupRequest,
    current_user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> SetupSaveResponse:
    """Create and toggle sections of a class/department scope."""
    return await _get_service(db).save_section_setup(
        data.class_id,
        data.department_id,
        data.sections,
    )


@router.post(
    "/sections/reset",
    response_model=ResetResponse,
    summary="Reset section setup",
)
async def reset_section_setup(
    data: ResetSectionSetupRequest,
    current_user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> ResetResponse:
    """Deactivate sections of a class."""
    return await _get_service(db).reset_section_setup(data.class_id, data.department_id)
