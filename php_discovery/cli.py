"""
Command line entry point: list the PHP builds installed on this host.

Usage:
    php-discovery              # One line per build
    php-discovery --json       # Full build records as JSON
    php-discovery -v           # Trace every scanned location and probe
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from typing import Sequence

from .build import Build
from .config import load_config
from .discovery import discover
from .errors import DiscoveryError
from .logging_config import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="php-discovery",
        description="Discover installed PHP builds.",
    )
    parser.add_argument("--json", action="store_true", help="Print builds as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log scanned locations and probes")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors")
    parser.add_argument("--config", metavar="PATH", help="Configuration file to load first")
    parser.add_argument("--log-file", metavar="PATH", help="Also write logs to this file")
    parser.add_argument("--timeout", type=float, metavar="SECONDS", help="Timeout for each probe")
    return parser


def format_build(build: Build) -> str:
    """One-line summary of a build."""
    return f"found build version '{build.version}' => {build.binary}"


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logger = setup_logging(log_file=args.log_file, verbose=args.verbose, quiet=args.quiet)

    try:
        config = load_config(args.config, verbose=args.verbose)
        if args.timeout is not None:
            config = replace(config, timeout_seconds=args.timeout)
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        return 2

    try:
        builds = discover(config=config, verbose=args.verbose)
    except DiscoveryError as e:
        logger.error(f"Discovery failed: {e}")
        return 1

    if args.json:
        print(json.dumps([b.to_dict() for b in builds], indent=2))
    else:
        for build in builds:
            print(format_build(build))

    return 0


if __name__ == "__main__":
    sys.exit(main())
