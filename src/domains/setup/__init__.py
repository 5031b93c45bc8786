# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Setup domain package: facade for the school setup screens."""

from src.domains.setup.service import SetupService

__all__ = ["SetupService"]
