# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Fixtures for API integration tests.

The application runs against the in-memory test database through an
ASGI transport, on the same event loop as the database fixtures.
"""

from collections.abc import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from src.api.app import create_app
from src.api.dependencies import get_db
from src.core.config import clear_settings_cache, get_settings
from src.domains.auth.jwt import JWTManager, Role
from src.infrastructure.database.connection import create_sessionmaker


@pytest.fixture
def app(
    monkeypatch: pytest.MonkeyPatch,
    test_environment: dict[str, str],
    db_engine: AsyncEngine,
) -> Generator[FastAPI, None, None]:
    """Create the application with its database dependency pointed at the test engine."""
    for key, value in test_environment.items():
        monkeypatch.setenv(key, value)
    clear_settings_cache()

    application = create_app()
    sessionmaker = create_sessionmaker(db_engine)

    async def _get_test_db() -> AsyncGenerator[AsyncSession, None]:
        async with sessionmaker() as session:
            yield session

    application.dependency_overrides[get_db] = _get_test_db

    yield application

    application.dependency_overrides.clear()
    clear_settings_cache()


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for the application."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


def _auth_headers(user_id: str, role: Role) -> dict[str, str]:
    token = JWTManager(get_settings().jwt).create_access_token(user_id=user_id, role=role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(app: FastAPI, sample_user_id: str) -> dict[str, str]:
    """Authorization header of an admin."""
    return _auth_headers(sample_user_id, Role.ADMIN)


@pytest.fixture
def teacher_headers(app: FastAPI, sample_user_id: str) -> dict[str, str]:
    """Authorization header of a teacher (read-only access)."""
    return _auth_headers(sample_user_id, Role.TEACHER)
