#!/usr/bin/env python3
"""
Seed a development database with demo players, gear and results.

Usage:
    # Create tables (if missing) and seed
    python scripts/seed_database.py --create-tables

    # Show what would be inserted without committing
    python scripts/seed_database.py --dry-run
"""

import argparse
import logging
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from paddlerank.config import settings
from paddlerank.db.models import Base, Player
from paddlerank.db.session import _get_engine, get_session
from paddlerank.services.seed import seed_demo_data

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Seed the database with demo data.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create any missing tables before seeding (dev SQLite databases).",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Insert inside a transaction and roll it back.",
    )
    return parser


def main() -> int:
    args = _build_parser().parse_args()

    if args.create_tables:
        Base.metadata.create_all(_get_engine())

    with get_session() as session:
        if session.query(Player).count():
            logger.error("Database already has players; refusing to seed twice")
            return 1

        counts = seed_demo_data(session)

        if args.dry_run:
            session.rollback()
            logger.info("(dry run - changes rolled back)")

    for kind, count in counts.items():
        print(f"Created {count:3d} {kind}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
