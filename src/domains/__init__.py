# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services layer for SchoolDesk.

This package contains domain services that encapsulate business logic.
Each service receives an AsyncSession and raises typed errors from
``src.domains.errors``.

Domains:
    auth: JWT validation and roles.
    class_: Class registry.
    department: Department registry and per-class department activation.
    section: Section registry and section setup.
    setup: Facade for the setup screens.
"""
