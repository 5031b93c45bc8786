# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Seed the configured database.

Usage:
    python -m src.infrastructure.database.seeds

Tables are created when missing; the connection comes from the DB_*
environment variables (or DATABASE_URL).
"""

import asyncio

from src.core.config import get_settings
from src.infrastructure.database.connection import (
    close_database,
    create_tables,
    get_engine,
    get_session,
    init_database,
)
from src.infrastructure.database.seeds.school import seed_school_database
from src.utils.logging import setup_logging


async def main() -> None:
    settings = get_settings()
    setup_logging(settings)

    await init_database(settings)
    try:
        await create_tables(get_engine())
        async with get_session() as session:
            await seed_school_database(session)
    finally:
        await close_database()


if __name__ == "__main__":
    asyncio.run(main())
