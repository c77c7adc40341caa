#!/usr/bin/env python3
"""
JokeVault -- administration CLI.

Usage:
  python main.py migrate                 Create the users table
  python main.py rollback                Drop the users table
  python main.py truncate                Delete every registered user
  python main.py serve                   Run the API with uvicorn
  python main.py serve --port 9000 --reload

Environment variables (see core/config.py):
  SECRET_KEY    Token signing secret, at least 32 characters. Required unless DEBUG=true.
  DATABASE_URL  SQLAlchemy URL for the credential store.
"""

import argparse
import sys

from core.config import get_settings


def _open_store():
    from auth.store import UserStore

    return UserStore(get_settings().database_url)


def cmd_migrate(args: argparse.Namespace) -> int:
    store = _open_store()
    try:
        store.migrate()
    finally:
        store.close()
    print("  Schema up to date.")
    return 0


def cmd_rollback(args: argparse.Namespace) -> int:
    if not args.yes:
        print("  [!] rollback drops the users table. Re-run with --yes to confirm.")
        return 1
    store = _open_store()
    try:
        store.rollback()
    finally:
        store.close()
    print("  Schema rolled back.")
    return 0


def cmd_truncate(args: argparse.Namespace) -> int:
    if not args.yes:
        print("  [!] truncate deletes every registered user. Re-run with --yes to confirm.")
        return 1
    store = _open_store()
    try:
        store.migrate()
        removed = store.truncate()
    finally:
        store.close()
    print(f"  Removed {removed} user(s).")
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("asgi:app", host=args.host, port=args.port, reload=args.reload)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="jokevault",
        description="Administration commands for the JokeVault API.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  DEBUG=true python main.py migrate
  SECRET_KEY=... python main.py serve --host 0.0.0.0 --port 8000
  python main.py truncate --yes
        """,
    )
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    migrate = sub.add_parser("migrate", help="Create the users table if it does not exist")
    migrate.set_defaults(func=cmd_migrate)

    rollback = sub.add_parser("rollback", help="Drop the users table")
    rollback.add_argument("--yes", action="store_true", help="Confirm the destructive operation")
    rollback.set_defaults(func=cmd_rollback)

    truncate = sub.add_parser("truncate", help="Delete every registered user")
    truncate.add_argument("--yes", action="store_true", help="Confirm the destructive operation")
    truncate.set_defaults(func=cmd_truncate)

    serve = sub.add_parser("serve", help="Run the API server with uvicorn")
    serve.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    serve.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")
    serve.add_argument("--reload", action="store_true", help="Restart on code changes (development only)")
    serve.set_defaults(func=cmd_serve)

    args = parser.parse_args(argv)
    if not getattr(args, "func", None):
        parser.print_help()
        return 0
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
