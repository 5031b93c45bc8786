# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Department management API endpoints.

Department registry:
- POST / - Create a department
- GET / - List departments (paginated)
- GET /{department_id} - Get department details
- PATCH /{department_id} - Update department
- DELETE /{department_id} - Delete department without students
- POST /setup - Apply per-department global activation
- POST /bulk-update - Set activation on many departments
- POST /reset - Deactivate every department

Per-class activation:
- GET /by-class/{class_id} - Departments switched on for a class
- GET /class-setup/{class_id} - Every active department with its state for a class
- POST /class-setup - Upsert the department associations of a class
- POST /class-reset/{class_id} - Switch off every department of a class
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_db, require_admin, require_auth
from src.api.middleware.auth import CurrentUser
from src.domains.department.service import DepartmentService
from src.models.common import PaginatedResponse, PaginationMeta, ResetResponse
from src.models.department import (
    ClassDepartmentResponse,
    ClassDepartmentSetupRequest,
    ClassDepartmentsResponse,
    DepartmentBulkUpdateRequest,
    DepartmentCreateRequest,
    DepartmentResponse,
    DepartmentSetupRequest,
    DepartmentUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_service(db: AsyncSession) -> DepartmentService:
    """Get department service instance.

    Args:
        db: Database session.

    Returns:
        Configured DepartmentService instance.
    """
    return DepartmentService(db=db)


@router.post(
    "",
    response_model=DepartmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create department",
    description="Create a new department. Requires admin access.",
)
async def create_department(
    data: DepartmentCreateRequest,
    current_user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> DepartmentResponse:
    """Create a new department."""
    logger.info("Creating department: %s by %s", data.name, current_user.id)
    return await _get_service(db).create_department(data)


@router.get(
    "",
    response_model=PaginatedResponse[DepartmentResponse],
    summary="List departments",
)
async def list_departments(
    page: Annotated[int, Query(ge=1, description="Page number")] = 1,
    limit: Annotated[int, Query(ge=1, le=100, description="Page size")] = 10,
    include_inactive: Annotated[bool, Query(description="Include inactive departments")] = True,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> PaginatedResponse[DepartmentResponse]:
    """List departments with pagination.

    Args:
        page: Page number.
        limit: Page size.
        include_inactive: Include inactive departments.
        current_user: Authenticated user.
        db: Database session.

    Returns:
        Page of departments with pagination info.
    """
    departments, total = await _get_service(db).list_departments(
        page=page,
        limit=limit,
        include_inactive=include_inactive,
    )
    return PaginatedResponse[DepartmentResponse](
        data=departments,
        pagination=PaginationMeta.build(page, limit, total),
    )


@router.get(
    "/by-class/{class_id}",
    response_model=list[DepartmentResponse],
    summary="Departments of a class",
    description="Departments switched on for a class, with section counts for that class.",
)
async def list_for_class(
    class_id: str,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> list[DepartmentResponse]:
    """List departments active for a class."""
    return await _get_service(db).list_for_class(class_id)


@router.get(
    "/class-setup/{class_id}",
    response_model=ClassDepartmentsResponse,
    summary="Department setup of a class",
    description="Every active department with its activation for the class.",
)
async def get_class_departments(
    class_id: str,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> ClassDepartmentsResponse:
    """Get per-class department activation."""
    return await _get_service(db).get_class_departments(class_id)


@router.post(
    "/class-setup",
    response_model=list[ClassDepartmentResponse],
    summary="Set up departments of a class",
    description="Upsert the department associations of a class. Requires admin access.",
)
async def setup_class_departments(
    data: ClassDepartmentSetupRequest,
    current_user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> list[ClassDepartmentResponse]:
    """Switch departments on or off for one class.

    Args:
        data: Class id and per-department activation.
        current_user: Authenticated admin.
        db: Database session.

    Returns:
        Association rows after the change.
    """
    logger.info(
        "Setting up %d departments for class %s by %s",
        len(data.departments),
        data.class_id,
        current_user.id,
    )
    return await _get_service(db).setup_class_departments(data.class_id, data.departments)


@router.post(
    "/class-reset/{class_id}",
    response_model=ResetResponse,
    summary="Reset departments of a class",
    description="Switch off every department of a class. Requires admin access.",
)
async def reset_class_departments(
    class_id: str,
    current_user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> ResetResponse:
    """Switch off every department of a class."""
    return await _get_service(db).reset_class_departments(class_id)


@router.post(
    "/setup",
    response_model=list[DepartmentResponse],
    summary="Set up departments",
    description="Apply per-department global activation. Requires admin access.",
)
async def setup_departments(
    data: DepartmentSetupRequest,
    current_user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> list[DepartmentResponse]:
    """Apply per-department global activation states."""
    return await _get_service(db).setup_departments(data.department_configs)


@router.post(
    "/bulk-update",
    response_model=list[DepartmentResponse],
    summary="Bulk update departments",
    description="Set the same activation state on many departments. Requires admin access.",
)
async def bulk_update_departments(
    data: DepartmentBulkUpdateRequest,
    current_user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> list[DepartmentResponse]:
    """Set activation on many departments at once."""
    return await _get_service(db).bulk_set_active(data.department_ids, data.is_active)


@router.post(
    "/reset",
    response_model=ResetResponse,
    summary="Reset departments",
    description="Deactivate every department globally. Requires admin access.",
)
async def reset_departments(
    current_user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> ResetResponse:
    """Deactivate every department."""
    logger.info("Resetting departments by %s", current_user.id)
    return await _get_service(db).reset_departments()


@router.get(
    "/{department_id}",
    response_model=DepartmentResponse,
    summary="Get department",
)
async def get_department(
    department_id: str,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> DepartmentResponse:
    """Get department details."""
    return await _get_service(db).get_department(department_id)


@router.patch(
    "/{department_id}",
    response_model=DepartmentResponse,
    summary="Update department",
    description="Update name, description or activation. Requires admin access.",
)
async def update_department(
    department_id: str,
    data: DepartmentUpdateRequest,
    current_user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> DepartmentResponse:
    """Update a department.

    Args:
        department_id: Department identifier.
        data: Fields to change.
        current_user: Authenticated admin.
        db: Database session.

    Returns:
        Updated department.
    """
    return await _get_service(db).update_department(department_id, data)


@router.delete(
    "/{department_id}",
    response_model=DepartmentResponse,
    summary="Delete department",
    description="Delete a department whose sections have no students. Requires admin access.",
)
async def delete_department(
    department_id: str,
    current_user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> DepartmentResponse:
    """Delete a department."""
    logger.info("Deleting department: %s by %s", department_id, current_user.id)
    return await _get_service(db).delete_department(department_id)
