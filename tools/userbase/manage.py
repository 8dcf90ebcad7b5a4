#!/usr/bin/env python3
"""CLI management tool for the user store.

Provides commands to:
- Add users, with an explicit uid or the next free one
- List all users
- Show users by uid
- Find a user by first and last name
- Remove users by uid
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

# Ensure userbase package is importable
sys.path.insert(0, str(Path(__file__).parent.parent))

from userbase.config import DEFAULT_CONFIG_PATH, ConfigError, load_config
from userbase.database import AppDatabase
from userbase.errors import ConstraintViolation, NotFound, UserStoreError
from userbase.store import User, UserStore


def _print_table(users: list[User]) -> None:
    print(f"{'UID':<8} {'First name':<20} {'Last name':<20}")
    print("-" * 50)
    for user in users:
        first = user.first_name if user.first_name is not None else "None"
        last = user.last_name if user.last_name is not None else "None"
        print(f"{user.uid:<8} {first:<20} {last:<20}")


def add_user(args, store: UserStore) -> int:
    """Add a user, letting the store pick the uid unless --uid is given."""
    if args.uid < 0:
        print("Error: uid must be 0 or positive", file=sys.stderr)
        return 1

    user = User(uid=args.uid, first_name=args.first_name, last_name=args.last_name)
    try:
        (uid,) = store.insert_all([user])
    except ConstraintViolation:
        print(f"Error: uid {args.uid} already exists", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"✓ User created: {uid} ({args.first_name} {args.last_name})")
    return 0


def list_users(args, store: UserStore) -> int:
    """List all users."""
    users = store.all()

    if not users:
        print("No users found")
        return 0

    _print_table(users)
    return 0


def show_users(args, store: UserStore) -> int:
    """Show the users with the given uids; unknown uids are skipped."""
    users = store.load_all_by_ids(args.uid)

    if not users:
        print("No matching users")
        return 0

    _print_table(users)
    return 0


def find_user(args, store: UserStore) -> int:
    """Find the first user with the given names."""
    try:
        user = store.find_by_name(args.first_name, args.last_name, like=args.like)
    except NotFound:
        print(
            f"Error: No user named '{args.first_name} {args.last_name}'",
            file=sys.stderr,
        )
        return 1

    _print_table([user])
    return 0


def remove_user(args, store: UserStore) -> int:
    """Remove a user by uid.

    The store treats deleting a missing user as a no-op; the CLI reports it
    as an error so scripts notice a wrong uid.
    """
    if not store.delete(User(uid=args.uid)):
        print(f"Error: User {args.uid} not found", file=sys.stderr)
        return 1

    print(f"✓ Removed user {args.uid}")
    return 0


COMMANDS = {
    "add-user": add_user,
    "list-users": list_users,
    "show-users": show_users,
    "find-user": find_user,
    "remove-user": remove_user,
}


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="userbase-manage",
        description="Manage users in the userbase store",
    )
    parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help=f"Path to config.json (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument("--db-path", help="Override the database path from config")

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # add-user command
    add_parser = subparsers.add_parser("add-user", help="Add a new user")
    add_parser.add_argument("--first-name", help="First name")
    add_parser.add_argument("--last-name", help="Last name")
    add_parser.add_argument(
        "--uid", type=int, default=0, help="Explicit uid (default: next free)"
    )

    # list-users command
    subparsers.add_parser("list-users", help="List all users")

    # show-users command
    show_parser = subparsers.add_parser("show-users", help="Show users by uid")
    show_parser.add_argument(
        "--uid", type=int, action="append", required=True, help="uid, repeatable"
    )

    # find-user command
    find_parser = subparsers.add_parser("find-user", help="Find a user by name")
    find_parser.add_argument("--first-name", required=True, help="First name")
    find_parser.add_argument("--last-name", required=True, help="Last name")
    find_parser.add_argument(
        "--like", action="store_true", help="Treat names as SQL LIKE patterns"
    )

    # remove-user command
    remove_parser = subparsers.add_parser(
        "remove-user",
        help="Remove a user (exits 1 if the uid does not exist)",
        description="Remove a user; exits 1 if the uid does not exist.",
    )
    remove_parser.add_argument("--uid", type=int, required=True, help="uid")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    db_path = args.db_path or config["db_path"]

    try:
        database = AppDatabase(
            db_path=db_path,
            fallback_to_destructive_migration=config["fallback_to_destructive_migration"],
            journal_mode=config["journal_mode"],
        )
    except UserStoreError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        return COMMANDS[args.command](args, database.user_dao())
    except UserStoreError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        database.close()


if __name__ == "__main__":
    sys.exit(main())
