#!/usr/bin/env python3
"""
Standalone schema initialization script for local development.

Production schema is managed outside the service; this creates the tables
from the ORM models against DATABASE_URL.
"""

import sys
import logging
from pathlib import Path

# Add parent directory to path to import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import inspect  # noqa: E402
from sqlalchemy.exc import SQLAlchemyError  # noqa: E402

from domain.models import Base, engine  # noqa: E402

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("haven.scripts.init_db")


def main() -> int:
    logger.info("Creating Haven tables...")
    try:
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError as e:
        logger.error(f"Failed to create tables: {e}")
        return 1

    tables = inspect(engine).get_table_names()
    logger.info(f"Schema ready with {len(tables)} tables: {', '.join(sorted(tables))}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
