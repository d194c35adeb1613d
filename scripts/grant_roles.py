#!/usr/bin/env python3
"""
Add role ids to a stored user (e.g. to make someone an admin outside dev mode).

Usage:
  python scripts/grant_roles.py --discord-id 1234 --role 222222222222222222 [--role ...]
"""
from __future__ import annotations

import argparse
import sys

from voteboard.core.config import get_settings
from voteboard.repositories.json_storage import JSONStore


def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser(description="Grant roles to a user")
    ap.add_argument("--discord-id", required=True)
    ap.add_argument("--role", action="append", required=True, help="Role id (repeatable)")
    ap.add_argument("--data-file", help="JSON data file (default: DATA_FILE env)")
    args = ap.parse_args(argv)

    discord_id = args.discord_id.strip()
    with JSONStore(args.data_file or get_settings().data_file) as store:
        user = store.get_user(discord_id)
        if user is None:
            raise SystemExit(f"User '{discord_id}' does not exist")
        roles = list(user.get("roles") or [])
        roles.extend(role for role in args.role if role not in roles)
        user = store.update_user(discord_id, {"roles": roles})
    print("OK: roles updated")
    print(f"  User: {discord_id}")
    print(f"  Roles: {', '.join(user['roles'])}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI use
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
