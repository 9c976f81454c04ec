from __future__ import annotations

import argparse
import logging
import sys
import time
from typing import List, Optional

from gallery_watch.repositories.kv import make_store
from gallery_watch.services.watcher import GalleryWatcher, WatchConfig
from gallery_watch.utils.log import setup_logging


logger = logging.getLogger("gallery_watch.cli")
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gallery-watch", description="Text new paintings listed on a gallery shop page"
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Logging level (default: INFO)",
    )
    parser.add_argument("--shop-url", default=None, help="Override the shop page URL")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("run", help="Run once: notify and record the first new painting")
    sub.add_parser("links", help="Only log the product links found on the shop page")
    watch = sub.add_parser("watch", help="Run repeatedly on a fixed interval")
    watch.add_argument("--interval", type=float, default=900.0, help="Seconds between runs")
    watch.add_argument("--max-runs", type=int, default=None, help="Stop after this many runs")
    show = sub.add_parser("show", help="Print the stored record for a handle")
    show.add_argument("handle")
    return parser


def watch_loop(watcher: GalleryWatcher, interval: float, max_runs: Optional[int] = None) -> int:
    """Run on a fixed cadence; a failed run is logged and retried next interval."""
    failures = 0
    runs = 0
    while max_runs is None or runs < max_runs:
        runs += 1
        try:
            watcher.run()
        except Exception:
            failures += 1
            logger.exception("Run %d failed", runs)
        if max_runs is not None and runs >= max_runs:
            break
        time.sleep(interval)
    return failures


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    config = WatchConfig()
    if args.shop_url:
        config.shop_url = args.shop_url

    if args.command == "show":
        stored = make_store(config.redis_url, config.key_prefix).get(args.handle)
        if stored is None:
            print(f"{args.handle}: unseen")
            return 1
        print(stored.model_dump_json(indent=2))
        return 0

    watcher = GalleryWatcher(config)
    if args.command == "watch":
        watch_loop(watcher, args.interval, args.max_runs)
        return 0

    try:
        if args.command == "links":
            watcher.list_links()
            return 0
        result = watcher.run()
    except Exception:
        logger.exception("Run failed")
        return 1
    if result.notified is not None:
        print(f"Notified and recorded {result.notified.handle}")
    else:
        print(f"No new paintings among {result.found} listings")
    return 0


if __name__ == "__main__":
    sys.exit(main())
