"""Utility script to register a store together with its first staff account."""

from __future__ import annotations

import argparse
from getpass import getpass

from sqlalchemy.exc import SQLAlchemyError

from shelfcure.application.use_cases.users import create_store, create_user
from shelfcure.domain.entities import ROLE_ADMIN, ROLE_STORE_MANAGER, ROLE_STORE_OWNER
from shelfcure.infrastructure.database import SessionLocal, initialize_database


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for store and user creation."""

    parser = argparse.ArgumentParser(
        description="Create a store and a user who can read its notifications.",
    )
    parser.add_argument(
        "--store-name",
        default=None,
        help="Name of the store to create. Omit together with --role admin.",
    )
    parser.add_argument("--name", default="Store Manager", help="Full name of the user")
    parser.add_argument(
        "--email", default="manager@example.com", help="Login email of the user"
    )
    parser.add_argument(
        "--role",
        choices=(ROLE_STORE_MANAGER, ROLE_STORE_OWNER, ROLE_ADMIN),
        default=ROLE_STORE_MANAGER,
        help="Role granted to the user (default: store_manager)",
    )
    parser.add_argument(
        "--password",
        default=None,
        help="User password. Prompted interactively when omitted.",
    )
    return parser.parse_args()


def main() -> None:
    """Create the store and user described by the command line arguments."""

    args = parse_args()
    if args.role != ROLE_ADMIN and not args.store_name:
        raise SystemExit("--store-name is required for store staff.")

    password = args.password or getpass("User password: ")
    if not password:
        raise SystemExit("No password was provided.")

    initialize_database()

    session = SessionLocal()
    try:
        store = create_store(session, name=args.store_name) if args.store_name else None
        user = create_user(
            session,
            name=args.name,
            email=args.email,
            password=password,
            role=args.role,
            store_id=store.id if store else None,
        )
    except ValueError as exc:
        session.rollback()
        raise SystemExit(f"Could not create the user: {exc}") from exc
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Database error while saving the user: {exc}") from exc
    else:
        print(
            "User created:\n"
            f"  ID: {user.id}\n"
            f"  Name: {user.name}\n"
            f"  Email: {user.email}\n"
            f"  Role: {user.role}\n"
            f"  Store: {store.name + ' (' + str(store.id) + ')' if store else '-'}"
        )
    finally:
        session.close()


if __name__ == "__main__":
    main()
