"""Housekeeping script that deletes notifications past their ``expires_at``."""

from __future__ import annotations

import argparse
import logging

from shopfeed.domain.errors import TransientStoreFailure
from shopfeed.infrastructure.database import SessionLocal, initialize_database
from shopfeed.infrastructure.repositories import NotificationRepository
from shopfeed.utils import now_in_app_timezone

logger = logging.getLogger("shopfeed.scripts.purge")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Delete expired notifications together with their delivery records.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only report how many notifications would be deleted.",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=logging.INFO)
    cutoff = now_in_app_timezone()

    initialize_database()
    session = SessionLocal()
    try:
        repository = NotificationRepository(session)
        if args.dry_run:
            expired = repository.count_expired(now=cutoff)
            print(f"Would delete {expired} notifications that expired before {cutoff.isoformat()}")
            return
        deleted = repository.delete_expired(now=cutoff)
    except TransientStoreFailure as exc:
        raise SystemExit(f"Could not purge notifications: {exc}") from exc
    finally:
        session.close()
    logger.info("Deleted %d expired notifications", deleted)


if __name__ == "__main__":
    main()
