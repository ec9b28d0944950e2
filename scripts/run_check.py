#!/usr/bin/env python3
"""Run one release note check now and print the new entries."""

import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from release_watch.config.settings import settings
from release_watch.errors import ReleaseWatchError
from release_watch.logging_config import configure_logging
from release_watch.pipeline.runner import build_pipeline


def main():
    configure_logging(settings.log_level, settings.log_json)

    print("\n" + "=" * 50)
    print("RELEASE NOTE CHECK")
    print("=" * 50 + "\n")

    pipeline = build_pipeline()
    try:
        new_entries = asyncio.run(pipeline.run_now())
    except ReleaseWatchError as e:
        print(f"\nCHECK FAILED: {e}\n")
        return 1

    print(f"\nNEW ENTRIES: {len(new_entries)}")
    for entry in new_entries:
        print(f"  • {entry.title}")
        print(f"      {entry.link}")
        if entry.publish_date:
            print(f"      {entry.publish_date}")
    print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
