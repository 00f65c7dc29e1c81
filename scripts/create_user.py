"""Utility script to register a user and print a bearer token for it."""

from __future__ import annotations

import argparse
from uuid import uuid4

from shopfeed.domain.entities import ROLES, User
from shopfeed.domain.errors import NotificationError
from shopfeed.infrastructure.database import SessionLocal, initialize_database
from shopfeed.infrastructure.repositories import UserRepository
from shopfeed.infrastructure.security import create_access_token


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for user creation."""

    parser = argparse.ArgumentParser(
        description="Register a user with the shopfeed notification service.",
    )
    parser.add_argument("--name", default="Administrator", help="Display name")
    parser.add_argument("--email", default="admin@example.com", help="Unique email address")
    parser.add_argument(
        "--role",
        choices=ROLES,
        default="admin",
        help="Role that decides who the user may notify (default: admin)",
    )
    parser.add_argument(
        "--leader-id",
        default=None,
        help="Id of the leader whose team the user belongs to (optional)",
    )
    return parser.parse_args()


def main() -> None:
    """Create a user using the provided command line arguments."""

    args = parse_args()
    initialize_database()

    session = SessionLocal()
    try:
        user = UserRepository(session).create(
            User(
                id=str(uuid4()),
                name=args.name,
                email=args.email,
                role=args.role,
                leader_id=args.leader_id,
            )
        )
    except NotificationError as exc:
        raise SystemExit(f"Could not store the user: {exc}") from exc
    finally:
        session.close()

    print(
        "User created:\n"
        f"  ID: {user.id}\n"
        f"  Name: {user.name}\n"
        f"  Email: {user.email}\n"
        f"  Role: {user.role}\n"
        f"  Token: {create_access_token(user.id)}"
    )


if __name__ == "__main__":
    main()
