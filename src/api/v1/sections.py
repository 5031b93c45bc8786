# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Section management API endpoints.

This module provides endpoints for sections:
- POST / - Create a section
- GET / - List sections (paginated)
- GET /by-class/{class_id} - Sections of a class, optionally of one department
- GET /{section_id} - Get section details
- PATCH /{section_id} - Update section
- DELETE /{section_id} - Delete section without students
- POST /setup - Create and toggle sections of a class/department scope
- POST /bulk-update - Set activation on many sections
- POST /reset/{class_id} - Deactivate the sections of a class
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_db, require_admin, require_auth
from src.api.middleware.auth import CurrentUser
from src.domains.section.service import SectionService
from src.models.common import PaginatedResponse, PaginationMeta, ResetResponse
from src.models.section import (
    SectionBulkUpdateRequest,
    SectionCreateRequest,
    SectionResponse,
    SectionSetupRequest,
    SectionUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_service(db: AsyncSession) -> SectionService:
    """Get section service instance.

    Args:
        db: Database session.

    Returns:
        Configured SectionService instance.
    """
    return SectionService(db=db)


@router.post(
    "",
    response_model=SectionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create section",
    description="Create a section in a class and optional department. Requires admin access.",
)
async def create_section(
    data: SectionCreateRequest,
    current_user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> SectionResponse:
    """Create a new section.

    Args:
        data: Section creation request.
        current_user: Authenticated admin.
        db: Database session.

    Returns:
        Created section.
    """
    logger.info(
        "Creating section: %s in class %s by %s", data.name, data.class_id, current_user.id
    )
    return await _get_service(db).create_section(data)


@router.get(
    "",
    response_model=PaginatedResponse[SectionResponse],
    summary="List sections",
    description="List sections ordered by class, department and section name.",
)
async def list_sections(
    page: Annotated[int, Query(ge=1, description="Page number")] = 1,
    limit: Annotated[int, Query(ge=1, le=100, description="Page size")] = 10,
    include_inactive: Annotated[bool, Query(description="Include inactive sections")] = True,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> PaginatedResponse[SectionResponse]:
    """List sections with pagination."""
    sections, total = await _get_service(db).list_sections(
        page=page,
        limit=limit,
        include_inactive=include_inactive,
    )
    return PaginatedResponse[SectionResponse](
        data=sections,
        pagination=PaginationMeta.build(page, limit, total),
    )


@router.get(
    "/by-class/{class_id}",
    response_model=PaginatedResponse[SectionResponse],
    summary="Sections of a class",
)
async def list_by_class(
    class_id: str,
    department_id: Annotated[str | None, Query(description="Filter by department")] = None,
    page: Annotated[int, Query(ge=1, description="Page number")] = 1,
    limit: Annotated[int, Query(ge=1, le=100, description="Page size")] = 50,
    include_inactive: Annotated[bool, Query(description="Include inactive sections")] = True,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> PaginatedResponse[SectionResponse]:
    """List sections of a class.

    Args:
        class_id: Class identifier.
        department_id: Optional department filter.
        page: Page number.
        limit: Page size.
        include_inactive: Include inactive sections.
        current_user: Authenticated user.
        db: Database session.

    Returns:
        Page of sections with pagination info.
    """
    sections, total = await _get_service(db).list_by_class(
        class_id,
        department_id=department_id,
        page=page,
        limit=limit,
        include_inactive=include_inactive,
    )
    return PaginatedResponse[SectionResponse](
        data=sections,
        pagination=PaginationMeta.build(page, limit, total),
    )


@router.post(
    "/setup",
    response_model=list[SectionResponse],
    summary="Set up sections",
    description=(
        "Toggle existing sections and create new ones for a class/department scope "
        "in one transaction. Requires admin access."
    ),
)
async def setup_sections(
    data: SectionSetupRequest,
    current_user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> list[SectionResponse]:
    """Reconcile the sections of a scope.

    Args:
        data: Scope and section entries.
        current_user: Authenticated admin.
        db: Database session.

    Returns:
        Every section of the scope after the change.
    """
    return await _get_service(db).setup_sections(
        data.class_id,
        data.department_id,
        data.section_configs,
    )


@router.post(
    "/bulk-update",
    response_model=list[SectionResponse],
    summary="Bulk update sections",
    description="Set the same activation state on many sections. Requires admin access.",
)
async def bulk_update_sections(
    data: SectionBulkUpdateRequest,
    current_user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> list[SectionResponse]:
    """Set activation on many sections at once."""
    return await _get_service(db).bulk_set_active(data.section_ids, data.is_active)


@router.post(
    "/reset/{class_id}",
    response_model=ResetResponse,
    summary="Reset sections of a class",
    description="Deactivate the sections of a class, optionally of one department.",
)
async def reset_sections(
    class_id: str,
    department_id: Annotated[str | None, Query(description="Only this department")] = None,
    current_user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> ResetResponse:
    """Deactivate sections of a class."""
    return await _get_service(db).reset_sections(class_id, department_id)


@router.get(
    "/{section_id}",
    response_model=SectionResponse,
    summary="Get section",
)
async def get_section(
    section_id: str,
    current_user: CurrentUser = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
) -> SectionResponse:
    """Get section details."""
    return await _get_service(db).get_section(section_id)


@router.patch(
    "/{section_id}",
    response_model=SectionResponse,
    summary="Update section",
    description="Update a section. Requires admin access.",
)
async def update_section(
    section_id: str,
    data: SectionUpdateRequest,
    current_user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> SectionResponse:
    """Update a section.

    Args:
        section_id: Section identifier.
        data: Fields to change.
        current_user: Authenticated admin.
        db: Database session.

    Returns:
        Updated section.
    """
    return await _get_service(db).update_section(section_id, data)


@router.delete(
    "/{section_id}",
    response_model=SectionResponse,
    summary="Delete section",
    description="Delete a section without students. Requires admin access.",
)
async def delete_section(
    section_id: str,
    current_user: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> SectionResponse:
    """Delete a section."""
    logger.info("Deleting section: %s by %s", section_id, current_user.id)
    return await _get_service(db).delete_section(section_id)
