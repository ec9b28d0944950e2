#!/usr/bin/env python3
"""CLI tool to browse stored release notes."""

import sys
import argparse
from pathlib import Path

# Add src to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from release_watch.errors import StorageError
from release_watch.storage.factory import get_entry_store


def print_header(title):
    print(f"\n{'='*60}")
    print(f" {title}")
    print('='*60)


def print_entry(entry):
    print(f"\n  {entry.title or '(untitled)'}")
    print(f"    {entry.link}")
    if entry.publish_date:
        print(f"    Published: {entry.publish_date}")
    print(f"    First seen: {entry.last_seen}")


def cmd_stats(args):
    """Show stored release note counts."""
    stats = get_entry_store().get_stats()

    print_header("RELEASE NOTE STATISTICS")
    print(f"\nTotal:         {stats['total']}")
    print(f"Added today:   {stats['today']}")
    print(f"This month:    {stats['this_month']}")
    print(f"Last updated:  {stats['last_updated'] or '-'}")


def cmd_list(args):
    """List recently stored release notes."""
    entries = get_entry_store().list_recent(limit=args.limit)

    print_header(f"RELEASE NOTES ({len(entries)} shown)")
    for entry in entries:
        print_entry(entry)


def cmd_search(args):
    """Search release note titles."""
    entries = get_entry_store().search(args.query, limit=args.limit)

    print_header(f"SEARCH: '{args.query}'")
    if not entries:
        print("\n  No release notes found.")
        return

    for entry in entries:
        print_entry(entry)


def main():
    parser = argparse.ArgumentParser(
        description="Browse stored release notes"
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # stats
    subparsers.add_parser("stats", help="Show release note counts")

    # list
    p = subparsers.add_parser("list", help="List recent release notes")
    p.add_argument("--limit", type=int, default=50, help="Max results")

    # search
    p = subparsers.add_parser("search", help="Search release note titles")
    p.add_argument("query", help="Search query")
    p.add_argument("--limit", type=int, default=20, help="Max results")

    args = parser.parse_args()

    commands = {"stats": cmd_stats, "list": cmd_list, "search": cmd_search}
    if args.command not in commands:
        parser.print_help()
        return 0

    try:
        commands[args.command](args)
    except StorageError as e:
        print(f"\nQUERY FAILED: {e}\n")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
