# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Query helpers shared by the school services."""

from collections.abc import Collection
from typing import Any

from sqlalchemy import ColumnElement, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from src.infrastructure.database.models import Section


async def grouped_counts(
    db: AsyncSession,
    key: InstrumentedAttribute[Any],
    keys: Collection[str],
    *conditions: ColumnElement[bool],
) -> dict[str, int]:
    """Count rows per value of ``key`` in one grouped query.

    Args:
        db: Database session.
        key: Column to group by (e.g. ``Section.class_id``).
        keys: Values of ``key`` to count for.
        *conditions: Extra filters on the counted rows.

    Returns:
        Mapping of key value to row count. Keys without rows are absent.
    """
    if not keys:
        return {}

    stmt = (
        select(key, func.count())
        .where(key.in_(keys), *conditions)
        .group_by(key)
    )
    result = await db.execute(stmt)
    return {row[0]: row[1] for row in result.all()}


async def existing_ids(
    db: AsyncSession,
    id_column: InstrumentedAttribute[str],
    ids: Collection[str],
    *conditions: ColumnElement[bool],
) -> set[str]:
    """Return which of ``ids`` exist (and match ``conditions``).

    Args:
        db: Database session.
        id_column: Primary key column of the table.
        ids: Candidate ids.
        *conditions: Extra filters.

    Returns:
        Set of ids found.
    """
    if not ids:
        return set()

    result = await db.execute(select(id_column).where(id_column.in_(ids), *conditions))
    return set(result.scalars().all())


def department_scope(department_id: str | None) -> ColumnElement[bool]:
    """Filter sections by department, treating ``None`` as "no department"."""
    if department_id is None:
        return Section.department_id.is_(None)
    return Section.department_id == department_id


def is_unique_violation(error: IntegrityError) -> bool:
    """Tell a unique constraint failure from other integrity errors.

    SQLite reports ``UNIQUE constraint failed`` and PostgreSQL reports
    ``duplicate key value violates unique constraint``; foreign key and
    not-null failures match neither.
    """
    message = str(error.orig).lower()
    return "unique" in message or "duplicate key" in message
