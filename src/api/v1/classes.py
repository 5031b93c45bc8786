# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Class management API endpoints.

This module provides endpoints for the class registry:
- POST / - Create a new class
- GET / - List classes (paginated)
- GET /by-medium - List classes of one medium
- GET /{class_id} - Get class details
- PATCH /{class_id} - Update class
- DELETE /{class_id} - Delete class without students
- POST /setup - Apply per-class activation
- POST /bulk-update - Set activation on many classes
- POST /reset - Deactivate every class

Reads require authentication; changes require an admin role. Domain errors
are translated to HTTP responses by the application exception handlers.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_db, require_admin, require_auth
from src.api.middleware.auth import CurrentUser
from src.domains.class_.service import ClassService
from src.infrastructure.database.models import Medium
from src.models.class_ import (
    ClassBulkUpdateRequest,
    ClassCreateRequest,
    ClassResponse,
    ClassSetupRequest,
    ClassUpdateRequest,
)
from src.models.common import PaginatedResponse, PaginationMeta, ResetResponse

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_service(db: AsyncSession) -> ClassService:
    """Get class service instance.

    Args:
        db: Database session.

    Returns:
        Configured ClassService instance.
    """
    return ClassService(db=db)


@router.post(
    "",
    response_model=ClassResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create class",
    description="Create a new class. Requires admin access.",
)
async def create_class(
    data: ClassCreateRequest,
    current_user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> ClassResponse:
    """Create a new class.

    Args:
        data: Class creation request.
        current_user: Authenticated admin.
        db: Database session.

    Returns:
        Created class response.
    """
    logger.info("Creating class: %s by %s", data.name, current_user.id)
    return await _get_service(db).create_class(data)


@router.get(
    "",
    response_model=PaginatedResponse[ClassResponse],
    summary="List classes",
    description="List classes with their sections, ordered by name.",
)
async def list_classes(
    page: Annotated[int, Query(ge=1, description="Page number")] = 1,
    limit: Annotated[int, Query(ge=1, le=100, description="Page size")] = 10,
    include_inactive: Annotated[bool, Query(description="Include inactive classes")] = True,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> PaginatedResponse[ClassResponse]:
    """List classes with pagination.

    Args:
        page: Page number.
        limit: Page size.
        include_inactive: Include inactive classes.
        current_user: Authenticated user.
        db: Database session.

    Returns:
        Page of classes with pagination info.
    """
    classes, total = await _get_service(db).list_classes(
        page=page,
        limit=limit,
        include_inactive=include_inactive,
    )
    return PaginatedResponse[ClassResponse](
        data=classes,
        pagination=PaginationMeta.build(page, limit, total),
    )


@router.get(
    "/by-medium",
    response_model=list[ClassResponse],
    summary="List classes by medium",
)
async def list_by_medium(
    medium: Annotated[Medium | None, Query(description="Filter by medium")] = None,
    include_inactive: Annotated[bool, Query(description="Include inactive classes")] = True,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> list[ClassResponse]:
    """List classes of one medium, or all when no medium is given."""
    return await _get_service(db).list_by_medium(medium, include_inactive=include_inactive)


@router.post(
    "/setup",
    response_model=list[ClassResponse],
    summary="Set up classes",
    description="Apply per-class activation in one transaction. Requires admin access.",
)
async def setup_classes(
    data: ClassSetupRequest,
    current_user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> list[ClassResponse]:
    """Apply per-class activation states.

    Args:
        data: Class configurations and optional medium filter for the reply.
        current_user: Authenticated admin.
        db: Database session.

    Returns:
        Configured classes.
    """
    return await _get_service(db).setup_classes(data.class_configs, medium=data.medium)


@router.post(
    "/bulk-update",
    response_model=list[ClassResponse],
    summary="Bulk update classes",
    description="Set the same activation state on many classes. Requires admin access.",
)
async def bulk_update_classes(
    data: ClassBulkUpdateRequest,
    current_user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> list[ClassResponse]:
    """Set activation on many classes at once."""
    return await _get_service(db).bulk_set_active(data.class_ids, data.is_active)


@router.post(
    "/reset",
    response_model=ResetResponse,
    summary="Reset classes",
    description="Deactivate every class, optionally of one medium. Requires admin access.",
)
async def reset_classes(
    medium: Annotated[Medium | None, Query(description="Only reset this medium")] = None,
    current_user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> ResetResponse:
    """Deactivate every class."""
    logger.info("Resetting classes (medium=%s) by %s", medium, current_user.id)
    return await _get_service(db).reset_classes(medium)


@router.get(
    "/{class_id}",
    response_model=ClassResponse,
    summary="Get class",
)
async def get_class(
    class_id: str,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> ClassResponse:
    """Get class details with sections.

    Args:
        class_id: Class identifier.
        current_user: Authenticated user.
        db: Database session.

    Returns:
        Class details.
    """
    return await _get_service(db).get_class(class_id)


@router.patch(
    "/{class_id}",
    response_model=ClassResponse,
    summary="Update class",
    description="Update name, medium or activation. Requires admin access.",
)
async def update_class(
    class_id: str,
    data: ClassUpdateRequest,
    current_user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> ClassResponse:
    """Update a class.

    Args:
        class_id: Class identifier.
        data: Fields to change.
        current_user: Authenticated admin.
        db: Database session.

    Returns:
        Updated class.
    """
    return await _get_service(db).update_class(class_id, data)


@router.delete(
    "/{class_id}",
    response_model=ClassResponse,
    summary="Delete class",
    description="Delete a class whose sections have no students. Requires admin access.",
)
async def delete_class(
    class_id: str,
    current_user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> ClassResponse:
    """Delete a class.

    Args:
        class_id: Class identifier.
        current_user: Authenticated admin.
        db: Database session.

    Returns:
        The deleted class.
    """
    logger.info("Deleting class: %s by %s", class_id, current_user.id)
    return await _get_service(db).delete_class(class_id)
