# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Section service for the section registry and section setup.

This module provides the SectionService class for:
- Section CRUD operations with class/department reference checks
- Section setup (create and toggle in one transaction)
- Bulk activation and reset sweeps scoped by class and department
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import ColumnElement, delete, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased, selectinload

from src.domains.class_.service import ClassService
from src.domains.department.service import DepartmentService
from src.domains.errors import (
    ConflictError,
    HasDependentsError,
    InvalidReferenceError,
    MissingIdsError,
    NotFoundError,
    SchoolDeskError,
    find_missing_ids,
)
from src.domains.queries import (
    department_scope,
    existing_ids,
    grouped_counts,
    is_unique_violation,
)
from src.infrastructure.database.models import Class, Department, Section, Student
from src.models.common import ClassBrief, DepartmentBrief, ResetResponse, SectionCounts
from src.models.section import (
    SectionConfig,
    SectionCreateRequest,
    SectionResponse,
    SectionUpdateRequest,
)

logger = logging.getLogger(__name__)


class SectionServiceError(SchoolDeskError):
    """Base exception for section service errors."""

    pass


class SectionNotFoundError(SectionServiceError, NotFoundError):
    """Raised when section is not found."""

    def __init__(self, section_id: str) -> None:
        super().__init__(f"Section with ID {section_id} not found")
        self.section_id = section_id


class SectionNameExistsError(SectionServiceError, ConflictError):
    """Raised when a section name is taken within its class/department."""

    def __init__(self, name: str, with_department: bool) -> None:
        scope = "this class and department" if with_department else "this class"
        super().__init__(f"Section {name} already exists for {scope}")


class SectionHasStudentsError(SectionServiceError, HasDependentsError):
    """Raised when deleting a section with enrolled students."""

    def __init__(self, student_count: int) -> None:
        super().__init__(f"Cannot delete section with {student_count} students enrolled")
        self.student_count = student_count


class SectionsNotFoundError(SectionServiceError, MissingIdsError):
    """Raised when a batch names sections that do not exist (in the given scope)."""

    entity_label = "Sections"


class ClassReferenceError(SectionServiceError, InvalidReferenceError):
    """Raised when a section refers to a class that does not exist."""

    def __init__(self, class_id: str) -> None:
        super().__init__(f"Class with ID {class_id} not found")
        self.class_id = class_id


class DepartmentReferenceError(SectionServiceError, InvalidReferenceError):
    """Raised when a section refers to a department that does not exist."""

    def __init__(self, department_id: str) -> None:
        super().__init__(f"Department with ID {department_id} not found")
        self.department_id = department_id


class SectionService:
    """Service for managing sections.

    A section belongs to one class and at most one department; its name is
    unique within that (class, department) scope, where "no department" is
    a scope of its own.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize section service.

        Args:
            db: Async database session.
        """
        self.db = db

    async def create_section(self, request: SectionCreateRequest) -> SectionResponse:
        """Create a new section.

        Args:
            request: Section creation data.

        Returns:
            Created section response.

        Raises:
            ClassReferenceError: If the class does not exist.
            DepartmentReferenceError: If the department does not exist.
            SectionNameExistsError: If the name is taken in the scope.
        """
        await self._check_references(request.class_id, request.department_id)

        if await self._find_in_scope(request.name, request.class_id, request.department_id):
            raise SectionNameExistsError(request.name, request.department_id is not None)

        section = Section(
            name=request.name,
            class_id=request.class_id,
            department_id=request.department_id,
            capacity=request.capacity,
            is_active=True,
        )
        self.db.add(section)
        await self._commit_unique(request.name, request.department_id)

        logger.info(
            "Created section: %s (%s) in class %s", section.name, section.id, section.class_id
        )

        return await self.get_section(section.id)

    async def list_sections(
        self,
        page: int = 1,
        limit: int = 10,
        include_inactive: bool = True,
    ) -> tuple[list[SectionResponse], int]:
        """List all sections ordered by class, department and section name.

        Args:
            page: Page number (1-based).
            limit: Page size.
            include_inactive: Include sections with is_active=False.

        Returns:
            Tuple of (list of sections, total count).
        """
        conditions = [] if include_inactive else [Section.is_active.is_(True)]
        return await self._paginate(conditions, page, limit, by_class_name=True)

    async def list_by_class(
        self,
        class_id: str,
        department_id: str | None = None,
        page: int = 1,
        limit: int = 50,
        include_inactive: bool = True,
    ) -> tuple[list[SectionResponse], int]:
        """List sections of a class, optionally of one department.

        Args:
            class_id: Class identifier.
            department_id: Restrict to this department if given.
            page: Page number (1-based).
            limit: Page size.
            include_inactive: Include sections with is_active=False.

        Returns:
            Tuple of (list of sections, total count).
        """
        conditions: list[ColumnElement[bool]] = [Section.class_id == class_id]
        if department_id is not None:
            conditions.append(Section.department_id == department_id)
        if not include_inactive:
            conditions.append(Section.is_active.is_(True))
        return await self._paginate(conditions, page, limit, by_class_name=False)

    async def get_section(self, section_id: str) -> SectionResponse:
        """Get section by ID with class, department and student count.

        Args:
            section_id: Section identifier.

        Returns:
            Section response.

        Raises:
            SectionNotFoundError: If section not found.
        """
        result = await self.db.execute(
            select(Section)
            .options(selectinload(Section.class_), selectinload(Section.department))
            .where(Section.id == section_id)
            .execution_options(populate_existing=True)
        )
        section = result.scalar_one_or_none()
        if not section:
            raise SectionNotFoundError(section_id)

        responses = await self._build_responses([section])
        return responses[0]

    async def update_section(
        self,
        section_id: str,
        request: SectionUpdateRequest,
    ) -> SectionResponse:
        """Update a section. Only fields present in the request are changed.

        Args:
            section_id: Section identifier.
            request: Update data.

        Returns:
            Updated section response.

        Raises:
            SectionNotFoundError: If section not found.
            ClassReferenceError: If the new class does not exist.
            DepartmentReferenceError: If the new department does not exist.
            SectionNameExistsError: If the resulting name is taken in the scope.
        """
        section = await self._get_model(section_id)
        changes = request.model_dump(exclude_unset=True)
        for field in ("name", "class_id", "capacity", "is_active"):
            if field in changes and changes[field] is None:
                del changes[field]

        name = changes.get("name", section.name)
        class_id = changes.get("class_id", section.class_id)
        department_id = changes.get("department_id", section.department_id)

        moves_department = changes.get("department_id") is not None
        if "class_id" in changes or moves_department:
            await self._check_references(
                class_id if "class_id" in changes else None,
                changes.get("department_id"),
            )

        if {"name", "class_id", "department_id"} & changes.keys():
            duplicate = await self._find_in_scope(name, class_id, department_id)
            if duplicate and duplicate.id != section_id:
                raise SectionNameExistsError(name, department_id is not None)

        for field, value in changes.items():
            setattr(section, field, value)

        await self._commit_unique(name, department_id)

        logger.info("Updated section: %s (%s)", section.name, section.id)

        return await self.get_section(section_id)

    async def delete_section(self, section_id: str) -> SectionResponse:
        """Delete a section without students.

        Args:
            section_id: Section identifier.

        Returns:
            The deleted section as it was before removal.

        Raises:
            SectionNotFoundError: If section not found.
            SectionHasStudentsError: If students are enrolled in it.
        """
        snapshot = await self.get_section(section_id)
        if snapshot.counts.students:
            raise SectionHasStudentsError(snapshot.counts.students)

        try:
            await self.db.execute(delete(Section).where(Section.id == section_id))
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise

        logger.info("Deleted section: %s (%s)", snapshot.name, section_id)

        return snapshot

    async def setup_sections(
        self,
        class_id: str,
        department_id: str | None,
        configs: Sequence[SectionConfig],
    ) -> list[SectionResponse]:
        """Reconcile the sections of a (class, department) scope.

        Entries with an id change that section's activation; entries
        without one create a new section. There is no name pre-check: the
        database constraints decide, and a collision rolls back the whole
        batch.

        Args:
            class_id: Class identifier.
            department_id: Department identifier, None for "no department".
            configs: Section entries.

        Returns:
            Every section of the scope after the change, ordered by name.

        Raises:
            ClassNotFoundError: If class not found.
            DepartmentNotFoundError: If department not found.
            SectionsNotFoundError: If an id is unknown or outside the scope.
            SectionNameExistsError: If a new name collides in the scope.
        """
        await self._check_scope(class_id, department_id)

        ids = [config.id for config in configs if config.id]
        found = await existing_ids(
            self.db,
            Section.id,
            ids,
            Section.class_id == class_id,
            department_scope(department_id),
        )
        missing = find_missing_ids(ids, found)
        if missing:
            raise SectionsNotFoundError(missing)

        created = 0
        try:
            for config in configs:
                if config.id:
                    await self.db.execute(
                        update(Section)
                        .where(Section.id == config.id)
                        .values(is_active=config.is_active)
                        .execution_options(synchronize_session=False)
                    )
                else:
                    self.db.add(
                        Section(
                            name=config.name,
                            class_id=class_id,
                            department_id=department_id,
                            is_active=config.is_active,
                        )
                    )
                    created += 1
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            if not is_unique_violation(e):
                raise
            raise SectionNameExistsError(
                ", ".join(c.name for c in configs if not c.id),
                department_id is not None,
            ) from e
        except SQLAlchemyError:
            await self.db.rollback()
            raise

        logger.info(
            "Section setup for class %s department %s: %d updated, %d created",
            class_id,
            department_id,
            len(configs) - created,
            created,
        )

        return await self.list_scope(class_id, department_id)

    async def bulk_set_active(
        self,
        section_ids: Sequence[str],
        is_active: bool,
    ) -> list[SectionResponse]:
        """Set the same activation state on many sections.

        Args:
            section_ids: Sections to update.
            is_active: New state.

        Returns:
            The updated sections, refreshed.

        Raises:
            SectionsNotFoundError: If any id does not exist. Nothing is changed.
        """
        found = await existing_ids(self.db, Section.id, section_ids)
        missing = find_missing_ids(section_ids, found)
        if missing:
            raise SectionsNotFoundError(missing)

        try:
            await self.db.execute(
                update(Section)
                .where(Section.id.in_(section_ids))
                .values(is_active=is_active)
                .execution_options(synchronize_session=False)
            )
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise

        logger.info("Set is_active=%s on %d sections", is_active, len(set(section_ids)))

        result = await self.db.execute(
            select(Section)
            .options(selectinload(Section.class_), selectinload(Section.department))
            .where(Section.id.in_(section_ids))
            .order_by(Section.name)
            .execution_options(populate_existing=True)
        )
        return await self._build_responses(list(result.scalars().all()))

    async def reset_sections(
        self,
        class_id: str,
        department_id: str | None = None,
    ) -> ResetResponse:
        """Deactivate the sections of a class (and department, if given).

        Without a department every section of the class is reset.

        Args:
            class_id: Class identifier.
            department_id: Optional department filter.

        Returns:
            Confirmation message and number of sections touched.

        Raises:
            ClassNotFoundError: If class not found.
        """
        class_ = await ClassService(self.db).get_class_model(class_id)

        stmt = (
            update(Section)
            .where(Section.class_id == class_id)
            .values(is_active=False)
            .execution_options(synchronize_session=False)
        )
        if department_id is not None:
            stmt = stmt.where(Section.department_id == department_id)

        try:
            result = await self.db.execute(stmt)
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise

        logger.info(
            "Reset sections of class %s department %s: %d rows",
            class_.name,
            department_id,
            result.rowcount,
        )

        return ResetResponse(
            message=f"All sections for class {class_.name} have been reset to inactive status",
            affected=result.rowcount,
        )

    async def list_scope(
        self,
        class_id: str,
        department_id: str | None,
    ) -> list[SectionResponse]:
        """Every section of exactly one (class, department) scope.

        Args:
            class_id: Class identifier.
            department_id: Department identifier, None for "no department".

        Returns:
            Sections ordered by name, active and inactive.
        """
        result = await self.db.execute(
            select(Section)
            .options(selectinload(Section.class_), selectinload(Section.department))
            .where(Section.class_id == class_id, department_scope(department_id))
            .order_by(Section.name)
            .execution_options(populate_existing=True)
        )
        return await self._build_responses(list(result.scalars().all()))

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _get_model(self, section_id: str) -> Section:
        section = await self.db.get(Section, section_id, populate_existing=True)
        if not section:
            raise SectionNotFoundError(section_id)
        return section

    async def _check_references(
        self,
        class_id: str | None,
        department_id: str | None,
    ) -> None:
        if class_id is not None and not await self.db.get(Class, class_id):
            raise ClassReferenceError(class_id)
        if department_id is not None and not await self.db.get(Department, department_id):
            raise DepartmentReferenceError(department_id)

    async def _check_scope(self, class_id: str, department_id: str | None) -> None:
        await ClassService(self.db).get_class_model(class_id)
        if department_id is not None:
            await DepartmentService(self.db).get_department_model(department_id)

    async def _find_in_scope(
        self,
        name: str,
        class_id: str,
        department_id: str | None,
    ) -> Section | None:
        result = await self.db.execute(
            select(Section).where(
                Section.name == name,
                Section.class_id == class_id,
                department_scope(department_id),
            )
        )
        return result.scalars().first()

    async def _commit_unique(self, name: str, department_id: str | None) -> None:
        """Commit, translating a lost race on the section uniqueness rules."""
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            if not is_unique_violation(e):
                raise
            raise SectionNameExistsError(name, department_id is not None) from e

    async def _paginate(
        self,
        conditions: list[ColumnElement[bool]],
        page: int,
        limit: int,
        by_class_name: bool,
    ) -> tuple[list[SectionResponse], int]:
        total = await self.db.scalar(
            select(func.count()).select_from(Section).where(*conditions)
        )

        query = (
            select(Section)
            .options(selectinload(Section.class_), selectinload(Section.department))
            .where(*conditions)
        )
        if by_class_name:
            class_alias = aliased(Class)
            department_alias = aliased(Department)
            query = (
                query.join(class_alias, Section.class_id == class_alias.id)
                .outerjoin(department_alias, Section.department_id == department_alias.id)
                .order_by(class_alias.name, department_alias.name, Section.name)
            )
        else:
            query = query.order_by(Section.name)

        result = await self.db.execute(
            query.offset((page - 1) * limit)
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        sections = list(result.scalars().all())

        return await self._build_responses(sections), total or 0

    async def _build_responses(self, sections: list[Section]) -> list[SectionResponse]:
        student_counts = await grouped_counts(
            self.db, Student.section_id, [s.id for s in sections]
        )
        return [
            self._to_response(s, student_count=student_counts.get(s.id, 0))
            for s in sections
        ]

    def _to_response(self, section: Section, student_count: int) -> SectionResponse:
        department = section.department
        return SectionResponse(
            id=section.id,
            name=section.name,
            class_id=section.class_id,
            department_id=section.department_id,
            capacity=section.capacity,
            is_active=section.is_active,
            created_at=section.created_at,
            updated_at=section.updated_at,
            class_info=ClassBrief.model_validate(section.class_),
            department=DepartmentBrief.model_validate(department) if department else None,
            counts=SectionCounts(students=student_count),
        )
