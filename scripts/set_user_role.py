#!/usr/bin/env python3
# scripts/set_user_role.py
"""
Usage: USER_UID=<uid> [USER_ROLE=scorekeeper] python scripts/set_user_role.py
   or: python scripts/set_user_role.py <uid> [role]
"""
from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from dotenv import load_dotenv  # noqa: E402

from webapp.config import DATABASE_URL  # noqa: E402
from webapp.services.document_store import DocumentStore  # noqa: E402
from webapp.services.roles import SCOREKEEPER, set_role  # noqa: E402


def run(store, uid: str, role: str = SCOREKEEPER) -> Optional[str]:
    """Set the user's role; returns the previous one."""
    prev = (store.get("users", uid) or {}).get("role")
    set_role(store, uid, role)
    print(f"[OK] users/{uid} role {prev or '(none)'} -> {role}")
    return prev


def main(argv=None) -> int:
    load_dotenv(ROOT / ".env", override=False)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    ap = argparse.ArgumentParser(description="Grant a user the admin or scorekeeper role.")
    ap.add_argument("uid", nargs="?", default=None)
    ap.add_argument("role", nargs="?", default=None)
    ap.add_argument("--database-url", default=DATABASE_URL)
    args = ap.parse_args(argv)

    uid = os.getenv("USER_UID") or args.uid
    role = os.getenv("USER_ROLE") or args.role or SCOREKEEPER
    if not uid:
        print("[ERROR] Usage: USER_UID=<uid> [USER_ROLE=scorekeeper] python scripts/set_user_role.py", file=sys.stderr)
        return 1

    try:
        store = DocumentStore.from_url(args.database_url)
        try:
            run(store, uid, role)
        finally:
            store.close()
    except Exception as exc:
        print(f"[ERROR] Failed to update user role: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
