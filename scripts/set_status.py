#!/usr/bin/env python3
"""
Change the triage status of a suggestion directly in the JSON data file.

Usage:
  python scripts/set_status.py --id <suggestion-id> --status "In Progress" [--data-file data/database.json]
"""
from __future__ import annotations

import argparse
import sys

from voteboard.core.config import get_settings
from voteboard.domain.suggestions import SuggestionStatus
from voteboard.repositories.json_storage import JSONStore


def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser(description="Set a suggestion status")
    ap.add_argument("--id", required=True, help="Suggestion id")
    ap.add_argument("--status", required=True, choices=[s.value for s in SuggestionStatus])
    ap.add_argument("--data-file", help="JSON data file (default: DATA_FILE env)")
    args = ap.parse_args(argv)

    with JSONStore(args.data_file or get_settings().data_file) as store:
        suggestion = store.update_suggestion(args.id.strip(), {"status": args.status})
    if suggestion is None:
        raise SystemExit(f"Suggestion '{args.id}' not found")
    print("OK: status updated")
    print(f"  Title: {suggestion.get('title')}")
    print(f"  Status: {suggestion['status']}")
    print(f"  Votes: {suggestion['votes']}")


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - CLI use
        sys.stderr.write(f"Error: {exc}\n")
        raise SystemExit(1)
