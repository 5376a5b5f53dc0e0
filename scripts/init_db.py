#!/usr/bin/env python3
"""
Create (or recreate with --drop) the GlowTrack task list tables.

Usage:
    python scripts/init_db.py [--drop]
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import logging

from app.config import get_settings
from app.database import Base, engine, init_db

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def drop_tables() -> None:
    from app.models.db import TaskList  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    logger.info("Dropped existing tables")


async def main(drop: bool) -> None:
    try:
        logger.info(f"Initializing database at {get_settings().database_url}")
        if drop:
            await drop_tables()
        await init_db()
        logger.info("✅ Database ready")
    except Exception as e:
        logger.error(f"❌ Error initializing database: {str(e)}")
        raise
    finally:
        await engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create the task list tables")
    parser.add_argument(
        "--drop", action="store_true", help="Drop existing tables before creating them"
    )
    args = parser.parse_args()
    asyncio.run(main(args.drop))
