# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Class service for managing the class registry.

This module provides the ClassService class for:
- Class CRUD operations
- Bulk activation (setup and bulk-update) and reset sweeps
- Section and student count tracking
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.domains.errors import (
    ConflictError,
    HasDependentsError,
    MissingIdsError,
    NotFoundError,
    SchoolDeskError,
    find_missing_ids,
)
from src.domains.queries import existing_ids, grouped_counts, is_unique_violation
from src.infrastructure.database.models import (
    Class,
    ClassDepartment,
    Medium,
    Section,
    Student,
)
from src.models.class_ import (
    ClassConfig,
    ClassCounts,
    ClassCreateRequest,
    ClassResponse,
    ClassUpdateRequest,
)
from src.models.common import DepartmentBrief, ResetResponse, SectionCounts, SectionItem

logger = logging.getLogger(__name__)


class ClassServiceError(SchoolDeskError):
    """Base exception for class service errors."""

    pass


class ClassNotFoundError(ClassServiceError, NotFoundError):
    """Raised when class is not found."""

    def __init__(self, class_id: str) -> None:
        super().__init__(f"Class with ID {class_id} not found")
        self.class_id = class_id


class ClassNameExistsError(ClassServiceError, ConflictError):
    """Raised when class name is already taken."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Class with name {name} already exists")


class ClassHasStudentsError(ClassServiceError, HasDependentsError):
    """Raised when deleting a class with enrolled students."""

    def __init__(self, student_count: int) -> None:
        super().__init__(f"Cannot delete class with {student_count} students enrolled")
        self.student_count = student_count


class ClassesNotFoundError(ClassServiceError, MissingIdsError):
    """Raised when a batch names classes that do not exist."""

    entity_label = "Classes"


class ClassService:
    """Service for managing classes.

    This service handles all class operations including creating,
    updating, deleting and bulk activation of classes.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize class service.

        Args:
            db: Async database session.
        """
        self.db = db

    async def create_class(self, request: ClassCreateRequest) -> ClassResponse:
        """Create a new class.

        Args:
            request: Class creation data.

        Returns:
            Created class response.

        Raises:
            ClassNameExistsError: If the name is already taken.
        """
        if await self._get_by_name(request.name):
            raise ClassNameExistsError(request.name)

        class_ = Class(name=request.name, medium=request.medium, is_active=True)
        self.db.add(class_)
        await self._commit_unique(request.name)

        logger.info("Created class: %s (%s)", class_.name, class_.id)

        return self._to_response(class_, sections=[], section_count=0)

    async def list_classes(
        self,
        page: int = 1,
        limit: int = 10,
        include_inactive: bool = True,
    ) -> tuple[list[ClassResponse], int]:
        """List classes with their sections, ordered by name.

        Args:
            page: Page number (1-based).
            limit: Page size.
            include_inactive: Include classes with is_active=False.

        Returns:
            Tuple of (list of classes, total count).
        """
        conditions = [] if include_inactive else [Class.is_active.is_(True)]

        total = await self.db.scalar(
            select(func.count()).select_from(Class).where(*conditions)
        )

        result = await self.db.execute(
            select(Class)
            .where(*conditions)
            .order_by(Class.name)
            .offset((page - 1) * limit)
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        classes = list(result.scalars().all())

        return await self._build_responses(classes, with_sections=True), total or 0

    async def list_by_medium(
        self,
        medium: Medium | None = None,
        include_inactive: bool = True,
    ) -> list[ClassResponse]:
        """List classes of one medium (or all), ordered by name.

        Args:
            medium: Medium filter, None for every medium.
            include_inactive: Include classes with is_active=False.

        Returns:
            Classes with section counts.
        """
        query = (
            select(Class)
            .order_by(Class.name)
            .execution_options(populate_existing=True)
        )
        if medium is not None:
            query = query.where(Class.medium == medium)
        if not include_inactive:
            query = query.where(Class.is_active.is_(True))

        result = await self.db.execute(query)
        return await self._build_responses(list(result.scalars().all()), with_sections=False)

    async def get_class(self, class_id: str) -> ClassResponse:
        """Get class by ID with its sections.

        Args:
            class_id: Class identifier.

        Returns:
            Class response.

        Raises:
            ClassNotFoundError: If class not found.
        """
        class_ = await self.get_class_model(class_id)
        responses = await self._build_responses([class_], with_sections=True)
        return responses[0]

    async def update_class(
        self,
        class_id: str,
        request: ClassUpdateRequest,
    ) -> ClassResponse:
        """Update a class. Only fields present in the request are changed.

        Args:
            class_id: Class identifier.
            request: Update data.

        Returns:
            Updated class response.

        Raises:
            ClassNotFoundError: If class not found.
            ClassNameExistsError: If the new name belongs to another class.
        """
        class_ = await self.get_class_model(class_id)
        changes = request.model_dump(exclude_unset=True, exclude_none=True)

        new_name = changes.get("name")
        if new_name and new_name != class_.name:
            existing = await self._get_by_name(new_name)
            if existing and existing.id != class_id:
                raise ClassNameExistsError(new_name)

        for field, value in changes.items():
            setattr(class_, field, value)

        await self._commit_unique(class_.name)

        logger.info("Updated class: %s (%s)", class_.name, class_.id)

        return await self.get_class(class_id)

    async def delete_class(self, class_id: str) -> ClassResponse:
        """Delete a class that has no students.

        Empty sections and department associations of the class are
        removed with it.

        Args:
            class_id: Class identifier.

        Returns:
            The deleted class as it was before removal.

        Raises:
            ClassNotFoundError: If class not found.
            ClassHasStudentsError: If any section of the class has students.
        """
        snapshot = await self.get_class(class_id)

        student_count = await self.db.scalar(
            select(func.count(Student.id))
            .join(Section, Student.section_id == Section.id)
            .where(Section.class_id == class_id)
        )
        if student_count:
            raise ClassHasStudentsError(student_count)

        try:
            await self.db.execute(
                delete(ClassDepartment).where(ClassDepartment.class_id == class_id)
            )
            await self.db.execute(delete(Section).where(Section.class_id == class_id))
            await self.db.execute(delete(Class).where(Class.id == class_id))
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise

        logger.info("Deleted class: %s (%s)", snapshot.name, class_id)

        return snapshot

    async def setup_classes(
        self,
        configs: Sequence[ClassConfig],
        medium: Medium | None = None,
    ) -> list[ClassResponse]:
        """Apply per-class activation states in one transaction.

        Args:
            configs: Desired state per class id.
            medium: If given, only classes of this medium are returned.

        Returns:
            The configured classes, refreshed.

        Raises:
            ClassesNotFoundError: If any id does not exist. Nothing is changed.
        """
        class_ids = [config.id for config in configs]
        await self._ensure_exist(class_ids)

        try:
            for config in configs:
                await self.db.execute(
                    update(Class)
                    .where(Class.id == config.id)
                    .values(is_active=config.is_active)
                    .execution_options(synchronize_session=False)
                )
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise

        logger.info("Class setup applied to %d classes", len(configs))

        return await self._refetch(class_ids, medium=medium)

    async def bulk_set_active(
        self,
        class_ids: Sequence[str],
        is_active: bool,
    ) -> list[ClassResponse]:
        """Set the same activation state on many classes.

        Args:
            class_ids: Classes to update.
            is_active: New state.

        Returns:
            The updated classes, refreshed.

        Raises:
            ClassesNotFoundError: If any id does not exist. Nothing is changed.
        """
        await self._ensure_exist(class_ids)

        try:
            await self.db.execute(
                update(Class)
                .where(Class.id.in_(class_ids))
                .values(is_active=is_active)
                .execution_options(synchronize_session=False)
            )
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise

        logger.info("Set is_active=%s on %d classes", is_active, len(set(class_ids)))

        return await self._refetch(class_ids)

    async def reset_classes(self, medium: Medium | None = None) -> ResetResponse:
        """Deactivate every class (of one medium, if given).

        Args:
            medium: Optional medium filter.

        Returns:
            Confirmation message and number of classes touched.
        """
        stmt = update(Class).values(is_active=False).execution_options(
            synchronize_session=False
        )
        if medium is not None:
            stmt = stmt.where(Class.medium == medium)

        try:
            result = await self.db.execute(stmt)
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise

        if medium is None:
            message = "All classes have been reset to inactive status"
        else:
            message = f"All {medium.value} classes have been reset to inactive status"

        logger.info("Reset classes (medium=%s): %d rows", medium, result.rowcount)

        return ResetResponse(message=message, affected=result.rowcount)

    async def get_class_model(self, class_id: str) -> Class:
        """Load a class row.

        Args:
            class_id: Class identifier.

        Returns:
            Class model.

        Raises:
            ClassNotFoundError: If class not found.
        """
        class_ = await self.db.get(Class, class_id, populate_existing=True)
        if not class_:
            raise ClassNotFoundError(class_id)
        return class_

    async def _get_by_name(self, name: str) -> Class | None:
        result = await self.db.execute(select(Class).where(Class.name == name))
        return result.scalar_one_or_none()

    async def _ensure_exist(self, class_ids: Sequence[str]) -> None:
        found = await existing_ids(self.db, Class.id, class_ids)
        missing = find_missing_ids(class_ids, found)
        if missing:
            raise ClassesNotFoundError(missing)

    async def _commit_unique(self, name: str) -> None:
        """Commit, translating a lost race on the unique name."""
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            if not is_unique_violation(e):
                raise
            raise ClassNameExistsError(name) from e

    async def _refetch(
        self,
        class_ids: Sequence[str],
        medium: Medium | None = None,
    ) -> list[ClassResponse]:
        query = (
            select(Class)
            .where(Class.id.in_(class_ids))
            .order_by(Class.name)
            .execution_options(populate_existing=True)
        )
        if medium is not None:
            query = query.where(Class.medium == medium)

        result = await self.db.execute(query)
        return await self._build_responses(list(result.scalars().all()), with_sections=False)

    async def _build_responses(
        self,
        classes: list[Class],
        with_sections: bool,
    ) -> list[ClassResponse]:
        """Attach section counts (and optionally sections) to classes.

        Counts come from grouped queries, one per level, regardless of
        the number of classes.
        """
        class_ids = [c.id for c in classes]
        section_counts = await grouped_counts(self.db, Section.class_id, class_ids)

        sections_by_class: dict[str, list[SectionItem]] = {cid: [] for cid in class_ids}
        if with_sections and class_ids:
            result = await self.db.execute(
                select(Section)
                .options(selectinload(Section.department))
                .where(Section.class_id.in_(class_ids))
                .order_by(Section.name)
                .execution_options(populate_existing=True)
            )
            sections = list(result.scalars().all())
            student_counts = await grouped_counts(
                self.db, Student.section_id, [s.id for s in sections]
            )
            for section in sections:
                sections_by_class[section.class_id].append(
                    _section_item(section, student_counts.get(section.id, 0))
                )

        return [
            self._to_response(
                c,
                sections=sections_by_class[c.id],
                section_count=section_counts.get(c.id, 0),
            )
            for c in classes
        ]

    def _to_response(
        self,
        class_: Class,
        sections: list[SectionItem],
        section_count: int,
    ) -> ClassResponse:
        return ClassResponse(
            id=class_.id,
            name=class_.name,
            medium=class_.medium,
            is_active=class_.is_active,
            created_at=class_.created_at,
            updated_at=class_.updated_at,
            sections=sections,
            counts=ClassCounts(sections=section_count),
        )


def _section_item(section: Section, student_count: int) -> SectionItem:
    department = section.department
    return SectionItem(
        id=section.id,
        name=section.name,
        class_id=section.class_id,
        department_id=section.department_id,
        department=DepartmentBrief.model_validate(department) if department else None,
        capacity=section.capacity,
        is_active=section.is_active,
        counts=SectionCounts(students=student_count),
    )
