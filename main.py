#!/usr/bin/env python3
"""
fintrack -- Personal finance REST backend.

Usage:
  python main.py create-user --username alice --email alice@example.com
  python main.py create-user --username alice --email alice@example.com --password s3cret
  python main.py serve
  python main.py serve --host 0.0.0.0 --port 8080 --reload

Environment variables (see core/config.py):
  SECRET_KEY         Token signing secret, at least 32 characters. Required
                     unless DEBUG=true.
  TOKEN_TTL_MINUTES  Session token lifetime (default 100).
  AUTH_DB_URL        SQLAlchemy URL for the user store.
  LEDGER_DB_URL      SQLAlchemy URL for the category store.
"""

import argparse
import getpass
import sys

from sqlalchemy.exc import IntegrityError

from auth.passwords import hash_password
from auth.store import UserStore
from core.config import get_settings


def _create_user(args: argparse.Namespace) -> int:
    """Insert a user with a bcrypt(SHA-512/256) password hash. Returns an exit code."""
    password = args.password
    if password is None:
        password = getpass.getpass("Password: ")
        if password != getpass.getpass("Repeat password: "):
            print("  [!] Passwords do not match.")
            return 1
    if not password:
        print("  [!] Password must not be empty.")
        return 1

    store = UserStore(get_settings().auth_db_url)
    try:
        user_id = store.create_user(args.username, hash_password(password), args.email)
    except IntegrityError:
        print(f"  [!] A user named '{args.username}' or with email '{args.email}' already exists.")
        return 1
    finally:
        store.close()
    print(f"  Created user '{args.username}' (id={user_id})")
    return 0


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("api.main:app", host=args.host, port=args.port, reload=args.reload)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="fintrack",
        description="Personal finance REST backend.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    create = sub.add_parser("create-user", help="Create a login for the API")
    create.add_argument("--username", required=True)
    create.add_argument("--email", required=True)
    create.add_argument("--password", help="Prompted for when omitted (recommended)")
    create.set_defaults(func=_create_user)

    serve = sub.add_parser("serve", help="Run the API server with uvicorn")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.add_argument("--reload", action="store_true", help="Auto-reload on code changes (development)")
    serve.set_defaults(func=_serve)

    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
