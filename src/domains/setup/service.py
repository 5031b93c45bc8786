# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Setup service backing the school setup screens.

The setup screens configure, step by step, which classes run, which
departments each class offers and which sections exist. Every rule lives
in the registry services; this module only shapes their results for the
screens.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.class_.service import ClassService
from src.domains.department.service import DepartmentService
from src.domains.section.service import SectionService
from src.infrastructure.database.models import Medium
from src.models.class_ import ClassConfig
from src.models.common import ClassBrief, DepartmentBrief, ResetResponse, SetupSaveResponse
from src.models.department import (
    ClassDepartmentConfig,
    ClassDepartmentsResponse,
    DepartmentConfig,
)
from src.models.section import SectionConfig
from src.models.setup import ClassSetupItem, SectionSetupView

logger = logging.getLogger(__name__)


class SetupService:
    """Facade over the class, department and section services.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize setup service.

        Args:
            db: Async database session.
        """
        self.db = db
        self.classes = ClassService(db)
        self.departments = DepartmentService(db)
        self.sections = SectionService(db)

    async def get_classes_for_setup(self, medium: Medium | None = None) -> list[ClassSetupItem]:
        """List every class, active or not, for the class setup screen.

        Args:
            medium: Optional medium filter.

        Returns:
            Classes ordered by name with section counts.
        """
        classes = await self.classes.list_by_medium(medium, include_inactive=True)
        return [
            ClassSetupItem(
                id=c.id,
                name=c.name,
                medium=c.medium,
                is_active=c.is_active,
                counts=c.counts,
            )
            for c in classes
        ]

    async def save_class_setup(
        self,
        classes: Sequence[ClassConfig],
        medium: Medium | None = None,
    ) -> SetupSaveResponse:
        """Save the class setup screen.

        Raises:
            ClassesNotFoundError: If any class id is unknown.
        """
        await self.classes.setup_classes(classes, medium=medium)
        return SetupSaveResponse(
            message="Class setup saved successfully",
            updated_count=len(classes),
        )

    async def reset_class_setup(self, medium: Medium | None = None) -> ResetResponse:
        """Deactivate every class (of one medium, if given)."""
        result = await self.classes.reset_classes(medium)
        return ResetResponse(message="Class setup reset successfully", affected=result.affected)

    async def get_departments_for_setup(self, class_id: str) -> ClassDepartmentsResponse:
        """Department setup screen of one class.

        Raises:
            ClassNotFoundError: If class not found.
        """
        return await self.departments.get_class_departments(class_id)

    async def save_department_setup(
        self,
        class_id: str,
        departments: Sequence[DepartmentConfig],
    ) -> SetupSaveResponse:
        """Save the department setup screen of one class.

        Each entry switches a department on or off for this class only.

        Raises:
            ClassNotFoundError: If class not found.
            DepartmentsNotFoundError: If any department id is unknown.
        """
        configs = [
            ClassDepartmentConfig(department_id=d.id, is_active=d.is_active)
            for d in departments
        ]
        await self.departments.setup_class_departments(class_id, configs)
        return SetupSaveResponse(
            message="Department setup saved successfully",
            updated_count=len(configs),
        )

    async def reset_department_setup(self, class_id: str) -> ResetResponse:
        """Switch off every department of one class.

        Raises:
            ClassNotFoundError: If class not found.
        """
        result = await self.departments.reset_class_departments(class_id)
        return ResetResponse(
            message="Department setup reset successfully",
            affected=result.affected,
        )

    async def get_sections_for_setup(
        self,
        class_id: str,
        department_id: str | None = None,
    ) -> SectionSetupView:
        """Section setup screen of one (class, department) scope.

        Args:
            class_id: Class identifier.
            department_id: Department identifier, None for sections without one.

        Returns:
            Class and department summaries with every section of the scope.

        Raises:
            ClassNotFoundError: If class not found.
            DepartmentNotFoundError: If department not found.
        """
        class_ = await self.classes.get_class_model(class_id)
        department = None
        if department_id is not None:
            department = DepartmentBrief.model_validate(
                await self.departments.get_department_model(department_id)
            )

        sections = await self.sections.list_scope(class_id, department_id)

        return SectionSetupView(
            class_info=ClassBrief.model_validate(class_),
            department=department,
            sections=sections,
        )

    async def save_section_setup(
        self,
        class_id: str,
        department_id: str | None,
        sections: Sequence[SectionConfig],
    ) -> SetupSaveResponse:
        """Save the section setup screen.

        Raises:
            ClassNotFoundError: If class not found.
            DepartmentNotFoundError: If department not found.
            SectionsNotFoundError: If an id is unknown or outside the scope.
            SectionNameExistsError: If a new name collides in the scope.
        """
        await self.sections.setup_sections(class_id, department_id, sections)
        return SetupSaveResponse(
            message="Section setup saved successfully",
            updated_count=len(sections),
        )

    async def reset_section_setup(
        self,
        class_id: str,
        department_id: str | None = None,
    ) -> ResetResponse:
        """Deactivate the sections of a class (and department, if given).

        Raises:
            ClassNotFoundError: If class not found.
        """
        result = await self.sections.reset_sections(class_id, department_id)
        logger.debug("Section setup reset for class %s", class_id)
        return ResetResponse(
            message="Section setup reset successfully",
            affected=result.affected,
        )
