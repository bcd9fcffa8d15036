#!/usr/bin/env python3
"""
Administration command line for the EODSA Competition API.

Installed as ``eodsa-admin``.  Subcommands:

    eodsa-admin init-db
    eodsa-admin create-admin --email admin@eodsa.co.za --name "Head Judge" [--password ...]
    eodsa-admin create-token --email admin@eodsa.co.za [--days 365]
    eodsa-admin reset-password --email studio@example.com [--password ...]
    eodsa-admin serve [--host 0.0.0.0] [--port 8000] [--reload]

``--db`` overrides ``DATABASE_URL`` for any subcommand.  Passwords that
are not given on the command line are prompted for without echo.  The
commands never print existing password hashes.
"""

import argparse
import getpass
import logging
import sys
from typing import List, Optional

from eodsa_api.app.core.config import settings
from eodsa_api.app.core.constants import MIN_PASSWORD_LENGTH
from eodsa_api.app.core.db import get_connection, get_database_path, init_db
from eodsa_api.app.core.errors import AppError
from eodsa_api.app.core.logging_config import setup_logging
from eodsa_api.app.core.security import JudgePrincipal, create_access_token, hash_password


logger = logging.getLogger(__name__)


def _read_password(given: Optional[str]) -> str:
    password = given or getpass.getpass("Enter NEW password: ")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise SystemExit(f"[!] Password must be at least {MIN_PASSWORD_LENGTH} characters.")
    return password


def cmd_init_db(args: argparse.Namespace) -> int:
    init_db()
    print(f"[+] Database ready at {get_database_path()}")
    return 0


def cmd_create_admin(args: argparse.Namespace) -> int:
    from eodsa_api.app.services.judge_service import JudgeService

    init_db()
    judge = JudgeService.ensure_admin(args.name, args.email, _read_password(args.password))
    print(f"[+] Administrator {judge.email} ready (id {judge.id})")
    return 0


def cmd_create_token(args: argparse.Namespace) -> int:
    conn = get_connection()
    try:
        row = conn.execute(
            "SELECT id, name, email, is_admin FROM judges WHERE email = ?", (args.email.strip().lower(),)
        ).fetchone()
    finally:
        conn.close()
    if not row:
        print(f"[!] No judge with email {args.email}", file=sys.stderr)
        return 1
    principal = JudgePrincipal(id=row["id"], name=row["name"], email=row["email"], is_admin=bool(row["is_admin"]))
    token = create_access_token(
        {"sub": principal.id, "kind": principal.kind}, expires_delta=args.days * 24 * 60 * 60
    )
    print(token)
    return 0


def cmd_reset_password(args: argparse.Namespace) -> int:
    from eodsa_api.app.services.password_reset_service import resolve_account

    account = resolve_account(args.email)
    if account is None:
        print(f"[!] No studio or judge with email {args.email}", file=sys.stderr)
        return 1
    hashed = hash_password(_read_password(args.password))
    conn = get_connection()
    try:
        conn.execute(f"UPDATE {account.table} SET password = ? WHERE id = ?", (hashed, account.id))
        conn.commit()
    finally:
        conn.close()
    print(f"[+] Password updated for {account.kind} {account.email}")
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("eodsa_api.app.main:app", host=args.host, port=args.port, reload=args.reload, log_level="info")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="eodsa-admin", description="EODSA Competition API administration")
    parser.add_argument("--db", help="Path to the SQLite database (overrides DATABASE_URL)")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("init-db", help="Create the database and apply migrations")
    p.set_defaults(func=cmd_init_db)

    p = sub.add_parser("create-admin", help="Create or promote an administrator judge")
    p.add_argument("--email", required=True)
    p.add_argument("--name", default="Administrator")
    p.add_argument("--password", help="If omitted, you'll be prompted securely.")
    p.set_defaults(func=cmd_create_admin)

    p = sub.add_parser("create-token", help="Print a long-lived bearer token for a judge")
    p.add_argument("--email", required=True)
    p.add_argument("--days", type=int, default=365)
    p.set_defaults(func=cmd_create_token)

    p = sub.add_parser("reset-password", help="Set a new password for a studio or judge")
    p.add_argument("--email", required=True)
    p.add_argument("--password", help="If omitted, you'll be prompted securely.")
    p.set_defaults(func=cmd_reset_password)

    p = sub.add_parser("serve", help="Run the API with uvicorn")
    p.add_argument("--host", default="0.0.0.0")
    p.add_argument("--port", type=int, default=8000)
    p.add_argument("--reload", action="store_true")
    p.set_defaults(func=cmd_serve)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.db:
        settings.database_url = args.db
    setup_logging(settings.log_level, settings.log_file or None)
    try:
        return args.func(args)
    except AppError as exc:
        print(f"[!] {exc.message}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
