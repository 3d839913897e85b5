#!/usr/bin/env python3
"""Administer membership accounts from the command line.

Usage:
    python -m scripts.manage_users list --limit 50
    python -m scripts.manage_users deactivate <user_id>
    python -m scripts.manage_users reset-password <user_id> --password <new>
"""

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

# manage_users.py is at <root>/src/scripts/, src is one level up
sys.path.insert(0, str(Path(__file__).parent.parent))

from api.context import AppContext, open_context
from domain.model.errors import DomainError
from domain.model.user import User
from services import account_service
from utils.logging import setup_structured_logging
from utils.settings import Settings


def _format_user(user: User) -> str:
    state = 'active' if user.is_active else 'deactivated'
    return f"{user.id}  {user.email:<32} {user.name:<24} {state:<11} {user.created_at:%Y-%m-%d %H:%M}"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage membership accounts")
    sub = parser.add_subparsers(dest="command", required=True)

    list_cmd = sub.add_parser("list", help="List users, newest first")
    list_cmd.add_argument("--offset", type=int, default=0)
    list_cmd.add_argument("--limit", type=int, default=20)

    for name, help_text in (
        ("show", "Show one user"),
        ("deactivate", "Disable login for a user"),
        ("activate", "Re-enable a deactivated user"),
        ("regenerate-key", "Issue a new API key, revoking the old one"),
        ("delete", "Delete a user"),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("user_id")

    reset = sub.add_parser("reset-password", help="Set a new password")
    reset.add_argument("user_id")
    reset.add_argument("--password", required=True)

    return parser


def run(args: argparse.Namespace, context: AppContext) -> int:
    """Execute one command against the context. Returns the process exit code."""
    repo = context.user_repo()
    if repo is None:
        print("Database unavailable (check MONGO_URL)", file=sys.stderr)
        return 1

    try:
        if args.command == "list":
            page = account_service.list_users(repo, offset=args.offset, limit=args.limit)
            for user in page.items:
                print(_format_user(user))
            print(f"\n{len(page.items)} of {page.total} users")
        elif args.command == "show":
            print(_format_user(account_service.get_user(repo, args.user_id)))
        elif args.command == "deactivate":
            print(_format_user(account_service.deactivate(repo, args.user_id)))
        elif args.command == "activate":
            print(_format_user(account_service.activate(repo, args.user_id)))
        elif args.command == "regenerate-key":
            user = account_service.regenerate_api_key(repo, args.user_id)
            print(f"New API key for {user.email}: {user.api_key}")
        elif args.command == "reset-password":
            user = account_service.reset_password(repo, context.password_hasher, args.user_id, args.password)
            print(f"Password reset for {user.email}")
        elif args.command == "delete":
            account_service.delete_user(repo, args.user_id)
            print(f"Deleted {args.user_id}")
    except DomainError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    load_dotenv()
    settings = Settings.from_env()
    setup_structured_logging('WARNING')

    with open_context(settings) as context:
        return run(args, context)


if __name__ == "__main__":
    sys.exit(main())
