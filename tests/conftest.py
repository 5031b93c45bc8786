# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests: services against an in-memory SQLite database
- Integration tests: the HTTP API through an ASGI client
"""

from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Any

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from src.infrastructure.database.connection import configure_engine, create_sessionmaker
from src.infrastructure.database.models import (
    Base,
    Class,
    ClassDepartment,
    Department,
    Medium,
    Section,
    Student,
)

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def test_environment() -> dict[str, str]:
    """Provide test environment variables.

    Returns:
        Dictionary of environment variables for testing.
    """
    return {
        "ENVIRONMENT": "development",
        "DEBUG": "true",
        "LOG_LEVEL": "DEBUG",
        "DATABASE_URL": TEST_DATABASE_URL,
        "JWT_SECRET_KEY": "test-secret-key-for-testing-only",
        "JWT_ALGORITHM": "HS256",
        "ACCESS_TOKEN_EXPIRE_MINUTES": "30",
    }


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database with every table.

    StaticPool keeps the single connection alive, so every session sees
    the same in-memory database.
    """
    engine = configure_engine(
        create_async_engine(
            TEST_DATABASE_URL,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create async session for service tests."""
    async with create_sessionmaker(db_engine)() as session:
        yield session


# =============================================================================
# Data Factories
# =============================================================================


@pytest.fixture
def make_class(db_session: AsyncSession) -> Callable[..., Awaitable[Class]]:
    """Factory inserting a class row directly."""

    async def _make(name: str, medium: Medium = Medium.BANGLA, is_active: bool = True) -> Class:
        class_ = Class(name=name, medium=medium, is_active=is_active)
        db_session.add(class_)
        await db_session.commit()
        return class_

    return _make


@pytest.fixture
def make_department(db_session: AsyncSession) -> Callable[..., Awaitable[Department]]:
    """Factory inserting a department row directly."""

    async def _make(name: str, is_active: bool = True, description: str | None = None) -> Department:
        department = Department(name=name, is_active=is_active, description=description)
        db_session.add(department)
        await db_session.commit()
        return department

    return _make


@pytest.fixture
def make_class_department(db_session: AsyncSession) -> Callable[..., Awaitable[ClassDepartment]]:
    """Factory inserting a class-department association directly."""

    async def _make(class_id: str, department_id: str, is_active: bool = True) -> ClassDepartment:
        row = ClassDepartment(class_id=class_id, department_id=department_id, is_active=is_active)
        db_session.add(row)
        await db_session.commit()
        return row

    return _make


@pytest.fixture
def make_section(db_session: AsyncSession) -> Callable[..., Awaitable[Section]]:
    """Factory inserting a section row directly."""

    async def _make(
        name: str,
        class_id: str,
        department_id: str | None = None,
        is_active: bool = True,
        capacity: int = 30,
    ) -> Section:
        section = Section(
            name=name,
            class_id=class_id,
            department_id=department_id,
            is_active=is_active,
            capacity=capacity,
        )
        db_session.add(section)
        await db_session.commit()
        return section

    return _make


@pytest.fixture
def make_student(db_session: AsyncSession) -> Callable[..., Awaitable[Student]]:
    """Factory enrolling a student in a section."""

    async def _make(section_id: str, first_name: str = "Rahim") -> Student:
        student = Student(first_name=first_name, section_id=section_id)
        db_session.add(student)
        await db_session.commit()
        return student

    return _make


# =============================================================================
# Helper Fixtures
# =============================================================================


@pytest.fixture
def sample_user_id() -> str:
    """Provide a sample user ID for tokens."""
    return "550e8400-e29b-41d4-a716-446655440001"


@pytest.fixture
def unknown_id() -> str:
    """Provide an ID that never exists in the test database."""
    return "00000000-0000-0000-0000-000000000000"


@pytest.fixture
def sample_class_data() -> dict[str, Any]:
    """Provide sample class payload."""
    return {"name": "Eight", "medium": "BANGLA"}
