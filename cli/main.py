"""cronmatch CLI -- the `cronmatch` command.

Usage:
    cronmatch test "<expr>" [--at TIME] [--tz ZONE] [--utc]
                                   Exit 0 if TIME matches, 1 if not
    cronmatch compile "<expr>"     Print the compiled fields as JSON
    cronmatch check [--at TIME]    Print configured schedules due at TIME

TIME is an ISO-8601 string; it defaults to the current UTC time.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime, timezone

from core.config import AppConfig, load_config
from core.errors import CronError
from scheduler.book import ScheduleBook
from scheduler.cron import CronExpression, compile_expression

logger = logging.getLogger("cronmatch")

EXIT_MATCH = 0
EXIT_NO_MATCH = 1
EXIT_ERROR = 2


def setup_logging(level: str) -> None:
    """Configure logging for the application."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _instant(args: argparse.Namespace) -> str | datetime:
    return args.at if args.at else datetime.now(timezone.utc)


def cmd_test(args: argparse.Namespace, config: AppConfig) -> int:
    tz = args.tz or config.cron.timezone
    expr = CronExpression.parse(args.expression, tz=tz, utc=args.utc or config.cron.utc)
    instant = _instant(args)
    matched = expr.test(instant)
    logger.debug("%r at %s -> %s", expr, instant, matched)
    print("match" if matched else "no match")
    return EXIT_MATCH if matched else EXIT_NO_MATCH


def cmd_compile(args: argparse.Namespace, config: AppConfig) -> int:
    compiled = compile_expression(args.expression)
    print(json.dumps(compiled.to_dict(), indent=2))
    return EXIT_MATCH


def cmd_check(args: argparse.Namespace, config: AppConfig) -> int:
    if not config.schedules:
        print("No schedules configured.")
        return EXIT_NO_MATCH

    book = ScheduleBook(config.schedules, tz=config.cron.effective_timezone)
    due = book.due(_instant(args))
    for name in due:
        print(name)
    return EXIT_MATCH if due else EXIT_NO_MATCH


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="cronmatch",
        description="cronmatch -- test instants against cron expressions",
    )
    parser.add_argument("--config", "-c", type=str, default=None, help="Path to config.yaml")
    parser.add_argument("--env", type=str, default=None, help="Path to .env file")
    parser.add_argument("--log-level", type=str, default=None, help="Override logging level")

    sub = parser.add_subparsers(dest="command")

    # test
    test_parser = sub.add_parser("test", help="Check whether an instant matches an expression")
    test_parser.add_argument("expression", type=str, help="Cron expression or @name")
    test_parser.add_argument("--at", type=str, default=None, help="ISO-8601 instant (default: now)")
    test_parser.add_argument("--tz", type=str, default=None, help="Time zone name, e.g. Europe/Paris")
    test_parser.add_argument("--utc", action="store_true", help="Evaluate in UTC")

    # compile
    compile_parser = sub.add_parser("compile", help="Show the compiled field values")
    compile_parser.add_argument("expression", type=str, help="Cron expression or @name")

    # check
    check_parser = sub.add_parser("check", help="List configured schedules due at an instant")
    check_parser.add_argument("--at", type=str, default=None, help="ISO-8601 instant (default: now)")

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_MATCH

    config = load_config(config_path=args.config, env_path=args.env)
    setup_logging(args.log_level or config.logging.level)

    commands = {
        "test": cmd_test,
        "compile": cmd_compile,
        "check": cmd_check,
    }

    try:
        return commands[args.command](args, config)
    except CronError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
