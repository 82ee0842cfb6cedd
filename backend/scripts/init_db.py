"""
init_db.py — Create (or recreate) the users schema.

Creates the `users` and `favorited_properties` tables in the database chosen
by settings (DATABASE_URL, or TEST_DATABASE_URL when ENVIRONMENT=test).
Use migrations for production schema changes; this is for local setup.

Example:
    python scripts/init_db.py
    python scripts/init_db.py --drop
    python scripts/init_db.py --database-url sqlite:///neighborhood.db
"""

from __future__ import annotations

import argparse

from app.core.config import settings
from app.core.database import Database
from app.core.logging import configure_logging, get_logger

logger = get_logger(__name__)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Create the Neighborhood users schema"
    )
    parser.add_argument(
        "--database-url",
        type=str,
        default=None,
        help="Database URL (default: from settings for the current ENVIRONMENT)",
    )
    parser.add_argument(
        "--drop",
        action="store_true",
        help="Drop existing tables first (destroys all users and favorites)",
    )

    args = parser.parse_args()
    configure_logging(settings.LOG_LEVEL)

    with Database(args.database_url or settings.database_uri) as db:
        if args.drop:
            logger.warning("Dropping users schema")
            db.drop_all()
        db.create_all()
        logger.info("Users schema ready")

    print("\n✓ Database initialized")


if __name__ == "__main__":
    main()
