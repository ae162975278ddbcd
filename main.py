#!/usr/bin/env python3
"""
CATTREE - Category tree importer
================================

    python main.py -f var/import/categories.csv [-d ,] [-e '"'] [-t] [--force]

See config.py for all environment-variable tunables.
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import NoReturn

import config
from db import init_db, get_session
from import_engine import run_import, CategoryImportError
from services.store_service import ensure_catalog

logger = logging.getLogger(__name__)

USAGE = """\
Usage:  python main.py [options]

  -f            File to import (relative to the base directory)
  -d            Delimiter (default is ,)
  -e            Enclosure (default is ")
  -t            Enable store translations in first line
  --force       Delete old categories and create new ones
  -h            Short alias for help
  help          This help
"""

_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(add_help=False, usage=USAGE)
    parser.add_argument("-f", dest="file")
    parser.add_argument("-d", dest="delimiter", default=config.DEFAULT_DELIMITER)
    parser.add_argument("-e", dest="enclosure", default=config.DEFAULT_ENCLOSURE)
    parser.add_argument("-t", dest="header", action="store_true")
    parser.add_argument("--force", action="store_true")
    parser.add_argument("-h", dest="help", action="store_true")
    parser.add_argument("command", nargs="?")
    return parser


def configure_logging(log_path: Path | None = None) -> None:
    """Send log records to the operator log file."""
    log_path = Path(log_path or config.LOG_PATH)
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_cattree", False):
            root.removeHandler(handler)
            handler.close()

    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_path, encoding="utf-8")
    except OSError as exc:
        print(f"WARNING: log file disabled ({log_path}): {exc}", file=sys.stderr)
        return

    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    handler._cattree = True
    root.addHandler(handler)
    root.setLevel(logging.INFO)


def fault(message: str) -> NoReturn:
    """Print a critical message and terminate."""
    print(f"\n{message}", file=sys.stderr)
    sys.exit(1)


def main(argv: list[str] | None = None) -> int:
    args, unknown = build_parser().parse_known_args(argv)

    if args.help or args.command == "help" or not args.file:
        print(USAGE)
        return 0
    if unknown or args.command:
        fault(f"Unknown option: {' '.join(unknown or [args.command])}")

    configure_logging()
    init_db(config.DB_URL)
    session = get_session()
    try:
        ensure_catalog(session)
    finally:
        session.close()

    path = Path(config.BASE_DIR) / args.file
    start = time.time()
    try:
        report = run_import(
            path,
            delimiter=args.delimiter,
            enclosure=args.enclosure,
            header=args.header,
            force=args.force,
        )
    except CategoryImportError as exc:
        fault(str(exc))
    end = time.time()

    print(f"\nCreated {report.created} categories, "
          f"{report.overrides} store labels from {report.lines} lines")
    print()
    print(f"Script Start: {time.strftime('%H:%M:%S', time.localtime(start))}")
    print(f"Script End: {time.strftime('%H:%M:%S', time.localtime(end))}")
    print(f"Duration: {end - start:.3f} sec")
    return 0


if __name__ == "__main__":
    sys.exit(main())
