"""
Maintenance commands for the feed cache.

    python -m feedcache stats
    python -m feedcache clear
    python -m feedcache prune
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from feedcache.app import create_cache_manager
from feedcache.config import load_config
from feedcache.exceptions import ConfigError
from feedcache.utils.logging_setup import setup_logging_from_config

logger = logging.getLogger(__name__)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="feedcache",
        description="Inspect and maintain the on-disk feed cache",
    )
    parser.add_argument(
        "--config",
        help="Path to config.yaml (auto-detected if not specified)",
    )
    parser.add_argument(
        "command",
        choices=["stats", "clear", "prune"],
        help="stats: print sizes and counters; clear: remove every entry; prune: drop expired entries",
    )

    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    setup_logging_from_config(config.logging)
    manager = create_cache_manager(config)

    if args.command == "stats":
        print(json.dumps(manager.get_detailed_stats(), indent=2))
    elif args.command == "clear":
        before = manager.total_size_formatted
        manager.clear_all()
        print(f"Cleared {before} of cached feeds")
    elif args.command == "prune":
        feed = manager.get("feed")
        removed = feed.storage.remove_expired()
        print(f"Removed {removed} expired entries")

    return 0


if __name__ == "__main__":
    sys.exit(main())
