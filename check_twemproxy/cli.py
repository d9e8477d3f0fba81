# filename: check_twemproxy/cli.py
# -*- coding: utf-8 -*-
"""
Command line entry point.

Usage:
    check_twemproxy -H proxy01 [-p 22222] [-w 0] [-c 10] [-v]

Exit codes follow the monitoring-plugin contract: 0 OK, 1 WARNING,
2 CRITICAL, 3 UNKNOWN. Usage errors exit 3 before anything is fetched.
"""
from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from pydantic import ValidationError

from .check import run_check
from .errors import ArgumentError
from .logging_setup import configure_logging
from .reporter import Status, unknown_line
from .settings import DEFAULT_CRITICAL, DEFAULT_PORT, DEFAULT_WARNING, CheckConfig, Settings, load_settings
from .store import SnapshotStore


class _Parser(argparse.ArgumentParser):
    def error(self, message):
        raise ArgumentError(message)


class _HelpAction(argparse.Action):
    def __init__(self, option_strings, dest=argparse.SUPPRESS, default=argparse.SUPPRESS, help=None):
        super().__init__(option_strings=option_strings, dest=dest, default=default, nargs=0, help=help)

    def __call__(self, parser, namespace, values, option_string=None):
        parser.print_help(sys.stdout)
        parser.exit(int(Status.UNKNOWN))


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    ap = _Parser(
        prog="check_twemproxy",
        description="Check twemproxy shard connectivity by comparing stats with the previous run.",
        add_help=False,
    )
    ap.add_argument("-H", "--host", required=True, help="twemproxy host")
    ap.add_argument("-p", "--port", type=int, default=DEFAULT_PORT, help=f"stats port (default {DEFAULT_PORT})")
    ap.add_argument("-w", "--warning", type=int, default=DEFAULT_WARNING, metavar="COUNT",
                    help=f"warn when more than COUNT shards are disconnected (default {DEFAULT_WARNING})")
    ap.add_argument("-c", "--critical", type=int, default=DEFAULT_CRITICAL, metavar="COUNT",
                    help=f"critical when more than COUNT shards are disconnected (default {DEFAULT_CRITICAL})")
    ap.add_argument("-t", "--timeout", type=float, default=settings.FETCH_TIMEOUT, metavar="SECONDS",
                    help=f"connect/read timeout (default {settings.FETCH_TIMEOUT:g})")
    ap.add_argument("--transport", choices=["tcp", "http"], default=settings.TRANSPORT,
                    help=f"how to reach the stats port (default {settings.TRANSPORT})")
    ap.add_argument("-v", "--verbose", action="store_true", help="dump the counters of every shard")
    ap.add_argument("-?", "--help", action=_HelpAction, help="show this help and exit")
    return ap


def _usage_error(parser: argparse.ArgumentParser, message: str) -> int:
    print(parser.format_usage().rstrip())
    print(unknown_line(message))
    return int(Status.UNKNOWN)


def main(argv: Optional[List[str]] = None) -> int:
    try:
        settings = load_settings()
    except ValidationError as exc:
        print(unknown_line(f"invalid settings: {exc.errors()[0].get('msg')}"))
        return int(Status.UNKNOWN)
    configure_logging(settings.LOG_LEVEL)

    parser = build_parser(settings)
    try:
        args = parser.parse_args(argv)
        config = CheckConfig(
            host=args.host,
            port=args.port,
            warning=args.warning,
            critical=args.critical,
            verbose=args.verbose,
            timeout=args.timeout,
            transport=args.transport,
        )
    except ArgumentError as exc:
        return _usage_error(parser, str(exc))
    except ValidationError as exc:
        err = exc.errors()[0]
        field = ".".join(str(p) for p in err.get("loc", ()))
        return _usage_error(parser, f"invalid {field}: {err.get('msg')}")

    store = SnapshotStore(settings.STATE_DIR, max_age=settings.STALE_AFTER_SECONDS)
    result = run_check(config, store)
    for line in result.lines:
        print(line)
    return result.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
