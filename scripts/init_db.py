#!/usr/bin/env python3
"""
Initialize the eats-catalog database.

This script creates the restaurants and dishes tables.
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from eats_catalog.logger import setup_logger
from eats_catalog.storage.database import init_db


def main() -> None:
    """Initialize the database."""
    import argparse

    parser = argparse.ArgumentParser(description="Initialize eats-catalog database")
    parser.add_argument(
        "--drop", action="store_true", help="Drop existing tables before creating new ones"
    )
    parser.add_argument(
        "--no-migrations",
        action="store_true",
        help="Create tables directly instead of running Alembic migrations",
    )
    args = parser.parse_args()

    setup_logger()
    print("Initializing database...")
    init_db(drop_all=args.drop, use_migrations=not args.no_migrations)
    print("Database initialized successfully!")


if __name__ == "__main__":
    main()
