# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication domain services.

Users authenticate against the identity service, which issues JWTs. This
API only validates the tokens and enforces role checks.

Exports:
    JWTManager: JWT token creation and validation.
    Role: User roles.
    ADMIN_ROLES: Roles allowed to change the school structure.
"""

from src.domains.auth.jwt import (
    ADMIN_ROLES,
    InvalidTokenError,
    JWTManager,
    Role,
    TokenExpiredError,
    TokenPayload,
)

__all__ = [
    "ADMIN_ROLES",
    "InvalidTokenError",
    "JWTManager",
    "Role",
    "TokenExpiredError",
    "TokenPayload",
]
