# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""School structure seed data.

This module provides demo data for a fresh database:
- Classes: Play to Ten (Bangla medium)
- Departments: The seven standard departments
- Class departments: Every department for classes Nine and Ten
- Sections: A/B/C for class One, A/B for Eight/Science

Every step goes through the domain services and skips rows that already
exist, so running the seed twice leaves the data unchanged.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.domains.class_.service import ClassService
from src.domains.department.service import DepartmentService
from src.domains.section.service import SectionService
from src.infrastructure.database.models import Class, Department, Medium
from src.models.class_ import ClassCreateRequest
from src.models.department import ClassDepartmentConfig, DepartmentCreateRequest
from src.models.section import SectionConfig

logger = logging.getLogger(__name__)

CLASS_NAMES = [
    "Play",
    "Nursery",
    "KG",
    "One",
    "Two",
    "Three",
    "Four",
    "Five",
    "Six",
    "Seven",
    "Eight",
    "Nine",
    "Ten",
]

DEPARTMENTS = [
    ("Science", "Physics, chemistry, biology and higher mathematics"),
    ("Business Studies", "Accounting, finance and business entrepreneurship"),
    ("Humanities", "History, geography, civics and economics"),
    ("Vocational - General Mechanics", "Technical trade: general mechanics"),
    ("Vocational - Electrical", "Technical trade: electrical works"),
    ("Vocational", "General vocational track"),
    ("B.S.S", "Bachelor of Social Science preparation"),
]

# Classes that offer every department
DEPARTMENT_CLASSES = ["Nine", "Ten"]

# (class name, department name or None, section names)
SECTIONS = [
    ("One", None, ["A", "B", "C"]),
    ("Eight", "Science", ["A", "B"]),
]


async def seed_classes(session: AsyncSession) -> dict[str, str]:
    """Seed the standard classes.

    Args:
        session: Database session.

    Returns:
        Mapping of class name to id.
    """
    service = ClassService(session)
    result = await session.execute(select(Class.name, Class.id))
    ids = {name: id_ for name, id_ in result.all()}

    created = 0
    for name in CLASS_NAMES:
        if name in ids:
            continue
        response = await service.create_class(
            ClassCreateRequest(name=name, medium=Medium.BANGLA)
        )
        ids[name] = response.id
        created += 1

    logger.info("Seeded %d classes (%d already present)", created, len(CLASS_NAMES) - created)
    return ids


async def seed_departments(session: AsyncSession) -> dict[str, str]:
    """Seed the standard departments.

    Args:
        session: Database session.

    Returns:
        Mapping of department name to id.
    """
    service = DepartmentService(session)
    result = await session.execute(select(Department.name, Department.id))
    ids = {name: id_ for name, id_ in result.all()}

    created = 0
    for name, description in DEPARTMENTS:
        if name in ids:
            continue
        response = await service.create_department(
            DepartmentCreateRequest(name=name, description=description)
        )
        ids[name] = response.id
        created += 1

    logger.info("Seeded %d departments", created)
    return ids


async def seed_class_departments(
    session: AsyncSession,
    class_ids: dict[str, str],
    department_ids: dict[str, str],
) -> int:
    """Switch departments on for the classes that offer them.

    The upsert makes repeated runs harmless.

    Returns:
        Number of associations written.
    """
    service = DepartmentService(session)
    assignments: dict[str, list[str]] = {
        class_name: list(department_ids) for class_name in DEPARTMENT_CLASSES
    }
    for class_name, department_name, _ in SECTIONS:
        if department_name is not None:
            assignments.setdefault(class_name, [])
            if department_name not in assignments[class_name]:
                assignments[class_name].append(department_name)

    written = 0
    for class_name, department_names in assignments.items():
        rows = await service.setup_class_departments(
            class_ids[class_name],
            [
                ClassDepartmentConfig(department_id=department_ids[name], is_active=True)
                for name in department_names
            ],
        )
        written += len(rows)

    logger.info("Seeded %d class departments", written)
    return written


async def seed_sections(
    session: AsyncSession,
    class_ids: dict[str, str],
    department_ids: dict[str, str],
) -> int:
    """Seed demo sections, skipping names that already exist in a scope.

    Returns:
        Number of sections created.
    """
    service = SectionService(session)

    created = 0
    for class_name, department_name, names in SECTIONS:
        class_id = class_ids[class_name]
        department_id = department_ids[department_name] if department_name else None

        existing = {s.name for s in await service.list_scope(class_id, department_id)}
        missing = [name for name in names if name not in existing]
        if not missing:
            continue

        await service.setup_sections(
            class_id,
            department_id,
            [SectionConfig(name=name) for name in missing],
        )
        created += len(missing)

    logger.info("Seeded %d sections", created)
    return created


async def seed_school_database(session: AsyncSession) -> dict:
    """Seed the school structure.

    Args:
        session: Database session.

    Returns:
        Dictionary with seeded ids and counts.
    """
    logger.info("Seeding school database...")

    class_ids = await seed_classes(session)
    department_ids = await seed_departments(session)
    class_departments = await seed_class_departments(session, class_ids, department_ids)
    sections = await seed_sections(session, class_ids, department_ids)

    logger.info("School database seeding complete")

    return {
        "classes": class_ids,
        "departments": department_ids,
        "class_departments": class_departments,
        "sections": sections,
    }
