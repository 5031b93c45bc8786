# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Department service for the department registry and class associations.

This module provides the DepartmentService class for:
- Department CRUD operations
- Global bulk activation and reset sweeps
- Per-class department activation (ClassDepartment upserts)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from sqlalchemy import Insert, delete, func, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.domains.class_.service import ClassService
from src.domains.errors import (
    ConflictError,
    HasDependentsError,
    MissingIdsError,
    NotFoundError,
    SchoolDeskError,
    find_missing_ids,
)
from src.domains.queries import existing_ids, grouped_counts, is_unique_violation
from src.infrastructure.database.connection import DatabaseError
from src.infrastructure.database.models import (
    ClassDepartment,
    Department,
    Section,
    Student,
    generate_uuid,
    utc_now,
)
from src.models.common import ClassBrief, DepartmentBrief, ResetResponse
from src.models.department import (
    ClassDepartmentConfig,
    ClassDepartmentResponse,
    ClassDepartmentRow,
    ClassDepartmentsResponse,
    ClassDepartmentStatus,
    DepartmentConfig,
    DepartmentCounts,
    DepartmentCreateRequest,
    DepartmentResponse,
    DepartmentUpdateRequest,
)

logger = logging.getLogger(__name__)


class DepartmentServiceError(SchoolDeskError):
    """Base exception for department service errors."""

    pass


class DepartmentNotFoundError(DepartmentServiceError, NotFoundError):
    """Raised when department is not found."""

    def __init__(self, department_id: str) -> None:
        super().__init__(f"Department with ID {department_id} not found")
        self.department_id = department_id


class DepartmentNameExistsError(DepartmentServiceError, ConflictError):
    """Raised when department name is already taken."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Department with name {name} already exists")


class DepartmentHasStudentsError(DepartmentServiceError, HasDependentsError):
    """Raised when deleting a department whose sections have students."""

    def __init__(self, student_count: int) -> None:
        super().__init__(
            f"Cannot delete department with sections containing {student_count} students"
        )
        self.student_count = student_count


class DepartmentsNotFoundError(DepartmentServiceError, MissingIdsError):
    """Raised when a batch names departments that do not exist."""

    entity_label = "Departments"


class DepartmentService:
    """Service for managing departments and their per-class activation.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize department service.

        Args:
            db: Async database session.
        """
        self.db = db

    # =========================================================================
    # Department registry
    # =========================================================================

    async def create_department(self, request: DepartmentCreateRequest) -> DepartmentResponse:
        """Create a new department.

        Args:
            request: Department creation data.

        Returns:
            Created department response.

        Raises:
            DepartmentNameExistsError: If the name is already taken.
        """
        if await self._get_by_name(request.name):
            raise DepartmentNameExistsError(request.name)

        department = Department(
            name=request.name,
            description=request.description,
            is_active=True,
        )
        self.db.add(department)
        await self._commit_unique(request.name)

        logger.info("Created department: %s (%s)", department.name, department.id)

        return self._to_response(department, section_count=0)

    async def list_departments(
        self,
        page: int = 1,
        limit: int = 10,
        include_inactive: bool = True,
    ) -> tuple[list[DepartmentResponse], int]:
        """List departments ordered by name.

        Args:
            page: Page number (1-based).
            limit: Page size.
            include_inactive: Include departments with is_active=False.

        Returns:
            Tuple of (list of departments, total count).
        """
        conditions = [] if include_inactive else [Department.is_active.is_(True)]

        total = await self.db.scalar(
            select(func.count()).select_from(Department).where(*conditions)
        )
        result = await self.db.execute(
            select(Department)
            .where(*conditions)
            .order_by(Department.name)
            .offset((page - 1) * limit)
            .limit(limit)
            .execution_options(populate_existing=True)
        )

        return await self._build_responses(list(result.scalars().all())), total or 0

    async def get_department(self, department_id: str) -> DepartmentResponse:
        """Get department by ID.

        Args:
            department_id: Department identifier.

        Returns:
            Department response.

        Raises:
            DepartmentNotFoundError: If department not found.
        """
        department = await self.get_department_model(department_id)
        responses = await self._build_responses([department])
        return responses[0]

    async def update_department(
        self,
        department_id: str,
        request: DepartmentUpdateRequest,
    ) -> DepartmentResponse:
        """Update a department. Only fields present in the request are changed.

        Args:
            department_id: Department identifier.
            request: Update data.

        Returns:
            Updated department response.

        Raises:
            DepartmentNotFoundError: If department not found.
            DepartmentNameExistsError: If the new name belongs to another department.
        """
        department = await self.get_department_model(department_id)
        changes = request.model_dump(exclude_unset=True)

        if changes.get("name") is None:
            changes.pop("name", None)
        if changes.get("is_active") is None:
            changes.pop("is_active", None)

        new_name = changes.get("name")
        if new_name and new_name != department.name:
            existing = await self._get_by_name(new_name)
            if existing and existing.id != department_id:
                raise DepartmentNameExistsError(new_name)

        for field, value in changes.items():
            setattr(department, field, value)

        await self._commit_unique(department.name)

        logger.info("Updated department: %s (%s)", department.name, department.id)

        return await self.get_department(department_id)

    async def delete_department(self, department_id: str) -> DepartmentResponse:
        """Delete a department whose sections have no students.

        Its empty sections (in every class) and class associations are
        removed with it.

        Args:
            department_id: Department identifier.

        Returns:
            The deleted department as it was before removal.

        Raises:
            DepartmentNotFoundError: If department not found.
            DepartmentHasStudentsError: If any of its sections has students.
        """
        snapshot = await self.get_department(department_id)

        student_count = await self.db.scalar(
            select(func.count(Student.id))
            .join(Section, Student.section_id == Section.id)
            .where(Section.department_id == department_id)
        )
        if student_count:
            raise DepartmentHasStudentsError(student_count)

        try:
            await self.db.execute(
                delete(ClassDepartment).where(ClassDepartment.department_id == department_id)
            )
            await self.db.execute(delete(Section).where(Section.department_id == department_id))
            await self.db.execute(delete(Department).where(Department.id == department_id))
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise

        logger.info("Deleted department: %s (%s)", snapshot.name, department_id)

        return snapshot

    async def setup_departments(
        self,
        configs: Sequence[DepartmentConfig],
    ) -> list[DepartmentResponse]:
        """Apply per-department global activation states in one transaction.

        Args:
            configs: Desired state per department id.

        Returns:
            The configured departments, refreshed.

        Raises:
            DepartmentsNotFoundError: If any id does not exist. Nothing is changed.
        """
        department_ids = [config.id for config in configs]
        await self.ensure_departments_exist(department_ids)

        try:
            for config in configs:
                await self.db.execute(
                    update(Department)
                    .where(Department.id == config.id)
                    .values(is_active=config.is_active)
                    .execution_options(synchronize_session=False)
                )
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise

        logger.info("Department setup applied to %d departments", len(configs))

        return await self._refetch(department_ids)

    async def bulk_set_active(
        self,
        department_ids: Sequence[str],
        is_active: bool,
    ) -> list[DepartmentResponse]:
        """Set the same global activation state on many departments.

        Args:
            department_ids: Departments to update.
            is_active: New state.

        Returns:
            The updated departments, refreshed.

        Raises:
            DepartmentsNotFoundError: If any id does not exist. Nothing is changed.
        """
        await self.ensure_departments_exist(department_ids)

        try:
            await self.db.execute(
                update(Department)
                .where(Department.id.in_(department_ids))
                .values(is_active=is_active)
                .execution_options(synchronize_session=False)
            )
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise

        logger.info(
            "Set is_active=%s on %d departments", is_active, len(set(department_ids))
        )

        return await self._refetch(department_ids)

    async def reset_departments(self) -> ResetResponse:
        """Deactivate every department globally.

        Per-class associations are left untouched; see
        reset_class_departments for the class-scoped sweep.

        Returns:
            Confirmation message and number of departments touched.
        """
        try:
            result = await self.db.execute(
                update(Department)
                .values(is_active=False)
                .execution_options(synchronize_session=False)
            )
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise

        logger.info("Reset departments: %d rows", result.rowcount)

        return ResetResponse(
            message="All departments have been reset to inactive status",
            affected=result.rowcount,
        )

    async def get_department_model(self, department_id: str) -> Department:
        """Load a department row.

        Args:
            department_id: Department identifier.

        Returns:
            Department model.

        Raises:
            DepartmentNotFoundError: If department not found.
        """
        department = await self.db.get(Department, department_id, populate_existing=True)
        if not department:
            raise DepartmentNotFoundError(department_id)
        return department

    async def ensure_departments_exist(self, department_ids: Sequence[str]) -> None:
        """Validate a batch of department ids.

        Args:
            department_ids: Ids named by the caller.

        Raises:
            DepartmentsNotFoundError: With the unknown ids in request order.
        """
        found = await existing_ids(self.db, Department.id, department_ids)
        missing = find_missing_ids(department_ids, found)
        if missing:
            raise DepartmentsNotFoundError(missing)

    # =========================================================================
    # Class-department associations
    # =========================================================================

    async def list_for_class(self, class_id: str) -> list[DepartmentResponse]:
        """List departments switched on for a class.

        Args:
            class_id: Class identifier.

        Returns:
            Departments with an active association, ordered by name, with
            section counts scoped to the class.

        Raises:
            ClassNotFoundError: If class not found.
        """
        await ClassService(self.db).get_class_model(class_id)

        result = await self.db.execute(
            select(Department)
            .join(ClassDepartment, ClassDepartment.department_id == Department.id)
            .where(
                ClassDepartment.class_id == class_id,
                ClassDepartment.is_active.is_(True),
            )
            .order_by(Department.name)
            .execution_options(populate_existing=True)
        )
        departments = list(result.scalars().all())

        return await self._build_responses(departments, class_id=class_id)

    async def get_class_departments(self, class_id: str) -> ClassDepartmentsResponse:
        """Get every active department with its activation for one class.

        A department without an association row reads as inactive for the
        class, whatever its state in other classes.

        Args:
            class_id: Class identifier.

        Returns:
            Class summary and per-department status.

        Raises:
            ClassNotFoundError: If class not found.
        """
        class_ = await ClassService(self.db).get_class_model(class_id)

        result = await self.db.execute(
            select(Department)
            .where(Department.is_active.is_(True))
            .order_by(Department.name)
            .execution_options(populate_existing=True)
        )
        departments = list(result.scalars().all())
        department_ids = [d.id for d in departments]

        rows_result = await self.db.execute(
            select(ClassDepartment)
            .where(
                ClassDepartment.class_id == class_id,
                ClassDepartment.department_id.in_(department_ids),
            )
            .execution_options(populate_existing=True)
        )
        rows = {row.department_id: row for row in rows_result.scalars().all()}

        section_counts = await grouped_counts(
            self.db, Section.department_id, department_ids, Section.class_id == class_id
        )

        statuses = []
        for department in departments:
            row = rows.get(department.id)
            statuses.append(
                ClassDepartmentStatus(
                    id=department.id,
                    name=department.name,
                    description=department.description,
                    is_active=row.is_active if row else False,
                    class_department=ClassDepartmentRow.model_validate(row) if row else None,
                    counts=DepartmentCounts(sections=section_counts.get(department.id, 0)),
                )
            )

        return ClassDepartmentsResponse(
            class_info=ClassBrief.model_validate(class_),
            departments=statuses,
        )

    async def setup_class_departments(
        self,
        class_id: str,
        configs: Sequence[ClassDepartmentConfig],
    ) -> list[ClassDepartmentResponse]:
        """Upsert the department associations of a class in one transaction.

        Each entry is a single ``INSERT ... ON CONFLICT DO UPDATE`` keyed on
        (class_id, department_id), so concurrent setups never produce
        duplicate rows.

        Args:
            class_id: Class identifier.
            configs: Desired activation per department.

        Returns:
            The affected association rows with their departments.

        Raises:
            ClassNotFoundError: If class not found.
            DepartmentsNotFoundError: If any department does not exist.
        """
        await ClassService(self.db).get_class_model(class_id)

        department_ids = [config.department_id for config in configs]
        await self.ensure_departments_exist(department_ids)

        try:
            for config in configs:
                await self.db.execute(
                    self._upsert_class_department(class_id, config.department_id, config.is_active)
                )
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise

        logger.info(
            "Class-department setup for class %s: %d departments", class_id, len(configs)
        )

        result = await self.db.execute(
            select(ClassDepartment)
            .join(Department, ClassDepartment.department_id == Department.id)
            .options(selectinload(ClassDepartment.department))
            .where(
                ClassDepartment.class_id == class_id,
                ClassDepartment.department_id.in_(department_ids),
            )
            .order_by(Department.name)
            .execution_options(populate_existing=True)
        )

        return [
            ClassDepartmentResponse(
                id=row.id,
                class_id=row.class_id,
                department_id=row.department_id,
                is_active=row.is_active,
                created_at=row.created_at,
                updated_at=row.updated_at,
                department=DepartmentBrief.model_validate(row.department),
            )
            for row in result.scalars().all()
        ]

    async def reset_class_departments(self, class_id: str) -> ResetResponse:
        """Deactivate every existing department association of a class.

        Args:
            class_id: Class identifier.

        Returns:
            Confirmation message and number of association rows touched.

        Raises:
            ClassNotFoundError: If class not found.
        """
        class_ = await ClassService(self.db).get_class_model(class_id)

        try:
            result = await self.db.execute(
                update(ClassDepartment)
                .where(ClassDepartment.class_id == class_id)
                .values(is_active=False)
                .execution_options(synchronize_session=False)
            )
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise

        logger.info("Reset departments of class %s: %d rows", class_.name, result.rowcount)

        return ResetResponse(
            message=(
                f"All departments for class {class_.name} have been reset to inactive status"
            ),
            affected=result.rowcount,
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    def _upsert_class_department(
        self,
        class_id: str,
        department_id: str,
        is_active: bool,
    ) -> Insert:
        dialect = self.db.get_bind().dialect.name
        if dialect == "postgresql":
            insert_ = postgresql.insert
        elif dialect == "sqlite":
            insert_ = sqlite.insert
        else:
            raise DatabaseError(f"Upsert not supported on {dialect}")

        now = utc_now()
        stmt = insert_(ClassDepartment).values(
            id=generate_uuid(),
            class_id=class_id,
            department_id=department_id,
            is_active=is_active,
            created_at=now,
            updated_at=now,
        )
        return stmt.on_conflict_do_update(
            index_elements=[ClassDepartment.class_id, ClassDepartment.department_id],
            set_={
                "is_active": stmt.excluded.is_active,
                "updated_at": stmt.excluded.updated_at,
            },
        )

    async def _get_by_name(self, name: str) -> Department | None:
        result = await self.db.execute(select(Department).where(Department.name == name))
        return result.scalar_one_or_none()

    async def _commit_unique(self, name: str) -> None:
        """Commit, translating a lost race on the unique name."""
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            if not is_unique_violation(e):
                raise
            raise DepartmentNameExistsError(name) from e

    async def _refetch(self, department_ids: Sequence[str]) -> list[DepartmentResponse]:
        result = await self.db.execute(
            select(Department)
            .where(Department.id.in_(department_ids))
            .order_by(Department.name)
            .execution_options(populate_existing=True)
        )
        return await self._build_responses(list(result.scalars().all()))

    async def _build_responses(
        self,
        departments: list[Department],
        class_id: str | None = None,
    ) -> list[DepartmentResponse]:
        conditions: list[Any] = []
        if class_id is not None:
            conditions.append(Section.class_id == class_id)

        section_counts = await grouped_counts(
            self.db, Section.department_id, [d.id for d in departments], *conditions
        )
        return [
            self._to_response(d, section_count=section_counts.get(d.id, 0))
            for d in departments
        ]

    def _to_response(self, department: Department, section_count: int) -> DepartmentResponse:
        return DepartmentResponse(
            id=department.id,
            name=department.name,
            description=department.description,
            is_active=department.is_active,
            created_at=department.created_at,
            updated_at=department.updated_at,
            counts=DepartmentCounts(sections=section_count),
        )
