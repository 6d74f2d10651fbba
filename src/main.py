"""Command-line administration for Embed Manager.

Bootstraps a deployment before anyone can log in: seeds role permissions,
whitelists emails or domains, and provisions users.

Usage:
    python main.py init-db
    python main.py whitelist add example.com
    python main.py whitelist list
    python main.py create-user admin@example.com --role admin
"""

import argparse
import sys
from typing import List, Optional

from core.database import SessionLocal
from core.exceptions import ValidationError
from core.logging_config import setup_logging
from utils.permission_manager import PermissionManager
from utils.user_manager import UserAlreadyExistsError, UserManager
from utils.whitelist_manager import DuplicateWhitelistEntryError, WhitelistManager


def init_db(args: argparse.Namespace) -> int:
    db = SessionLocal()
    try:
        inserted = PermissionManager(db).seed_default_permissions()
    finally:
        db.close()
    print(f"Database ready ({inserted} default permissions inserted).")
    return 0


def whitelist_add(args: argparse.Namespace) -> int:
    db = SessionLocal()
    try:
        entry = WhitelistManager(db).add_entry(args.value, entry_type=args.type)
    except (ValidationError, DuplicateWhitelistEntryError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        db.close()
    print(f"Whitelisted {entry.email or entry.domain}")
    return 0


def whitelist_list(args: argparse.Namespace) -> int:
    db = SessionLocal()
    try:
        entries = WhitelistManager(db).list_entries()
        for entry in entries:
            kind = "email" if entry.email else "domain"
            print(f"{entry.entry_id}  {kind:<6}  {entry.email or entry.domain}  {entry.added_at}")
    finally:
        db.close()
    return 0


def create_user(args: argparse.Namespace) -> int:
    db = SessionLocal()
    try:
        user = UserManager(db).create_user(
            email=args.email,
            password=args.password,
            role=args.role,
            first_name=args.first_name,
            last_name=args.last_name,
        )
    except (ValidationError, UserAlreadyExistsError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        db.close()
    print(f"Created {user.role} {user.email} ({user.user_id})")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Embed Manager administration")
    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser("init-db", help="Create tables and seed permissions")
    init_parser.set_defaults(func=init_db)

    whitelist_parser = subparsers.add_parser("whitelist", help="Manage the whitelist")
    whitelist_sub = whitelist_parser.add_subparsers(dest="whitelist_command", required=True)
    add_parser = whitelist_sub.add_parser("add", help="Whitelist an email or domain")
    add_parser.add_argument("value")
    add_parser.add_argument("--type", choices=["email", "domain"], default=None)
    add_parser.set_defaults(func=whitelist_add)
    list_parser = whitelist_sub.add_parser("list", help="Show whitelist entries")
    list_parser.set_defaults(func=whitelist_list)

    user_parser = subparsers.add_parser("create-user", help="Provision a user profile")
    user_parser.add_argument("email")
    user_parser.add_argument(
        "--role", choices=["admin", "moderator", "user", "guest"], default="user"
    )
    user_parser.add_argument("--password", default=None)
    user_parser.add_argument("--first-name", dest="first_name", default=None)
    user_parser.add_argument("--last-name", dest="last_name", default=None)
    user_parser.set_defaults(func=create_user)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    setup_logging()
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
