"""
junglesales.cli
===============

Command line entry point.

Examples
--------
$ python -m junglesales.cli create-db         # first‑time table creation
$ python -m junglesales.cli tick              # run one decay pass now
$ python -m junglesales.cli run-scheduler     # fire the decay daily at JUNGLESALES_DECAY_AT
"""

from __future__ import annotations

import argparse
import logging
import sys
import textwrap
from typing import List, Optional

from pydantic import ValidationError

from junglesales.db import create_all, drop_all
from junglesales.scheduler import DecayScheduler
from junglesales.settings import LOG_FORMAT, LOG_LEVEL, Settings, settings

logger = logging.getLogger("junglesales.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="junglesales",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=textwrap.dedent(
            """\
            Jungle Sales utilities
            ----------------------
            create-db      Create all tables (safe if they already exist)
            tick           Apply one decay pass to every company
            run-scheduler  Apply the decay once a day until interrupted
            """
        ),
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    create = sub.add_parser("create-db", help="create tables")
    create.add_argument("--reset", action="store_true", help="drop existing tables first")

    sub.add_parser("tick", help="run one decay pass now")

    run = sub.add_parser("run-scheduler", help="run the daily decay job")
    run.add_argument("--at", help="time of day HH:MM (overrides JUNGLESALES_DECAY_AT)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else LOG_LEVEL,
        format=LOG_FORMAT,
    )

    if args.command == "create-db":
        if args.reset:
            drop_all()
        create_all()
        logger.info("junglesales schema initialised")
        return 0

    if args.command == "tick":
        create_all()
        report = DecayScheduler().tick()
        return 0 if report.failed == 0 else 1

    if args.command == "run-scheduler":
        config = settings
        if args.at:
            try:
                config = Settings(**{**settings.model_dump(), "decay_at": args.at})
            except ValidationError:
                parser.error(f"--at must be a 24h time as HH:MM, got {args.at!r}")
        create_all()
        scheduler = DecayScheduler(config=config)
        try:
            scheduler.run_forever()
        except KeyboardInterrupt:
            logger.info("interrupted")
        return 0

    return 2


if __name__ == "__main__":
    sys.exit(main())
