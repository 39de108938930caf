"""Command-line entry point."""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Sequence

from . import __version__
from .app import InteractiveApp, ViewOptions, run_once
from .config import Settings, describe_config, load_settings, save_config
from .context import AppContext
from .errors import ConfigError, LiigaError, TerminalError
from .logging import configure_logging, logger
from .terminal import Terminal
from .utils.datetime_utils import parse_api_date

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1


def _date_arg(value: str) -> str:
    try:
        parse_api_date(value)
    except LiigaError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc
    return value


def _positive_seconds(value: str) -> float:
    try:
        seconds = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not a number: {value}") from exc
    if seconds <= 0:
        raise argparse.ArgumentTypeError("must be greater than zero")
    return seconds


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="liiga-teletext",
        description="Liiga results as a teletext page (page 221).",
    )
    parser.add_argument("-o", "--once", action="store_true", help="print the page once and exit")
    parser.add_argument("-p", "--plain", action="store_true", help="no clickable video links")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("-c", "--compact", action="store_true", help="one line per game")
    mode.add_argument("-w", "--wide", action="store_true", help="two columns on wide terminals")
    parser.add_argument("-d", "--date", type=_date_arg, help="show games for YYYY-MM-DD")
    parser.add_argument(
        "--config", nargs="?", const="", metavar="DOMAIN", help="set the API domain (prompts when omitted)"
    )
    parser.add_argument("--set-log-file", metavar="PATH", help="store a custom log file path")
    parser.add_argument("--clear-log-file", action="store_true", help="go back to the default log file")
    parser.add_argument("-l", "--list-config", action="store_true", help="show the current configuration")
    parser.add_argument("--debug", action="store_true", help="debug logging; the screen is not cleared")
    parser.add_argument("--log-file", metavar="PATH", help="log file for this run")
    parser.add_argument(
        "--min-refresh-interval",
        type=_positive_seconds,
        metavar="SECONDS",
        help="shortest automatic refresh interval for games about to start",
    )
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def handle_config_commands(args: argparse.Namespace) -> bool:
    """Run the config maintenance flags; True when one of them ran."""
    handled = False
    if args.config is not None or args.set_log_file is not None or args.clear_log_file:
        domain = args.config
        if domain == "":
            domain = input("API domain: ").strip()
        path = save_config(
            api_domain=domain,
            log_file_path=args.set_log_file,
            clear_log_file=args.clear_log_file,
        )
        print(f"Config saved to {path}")
        handled = True
    if args.list_config:
        print("\n".join(describe_config()))
        handled = True
    return handled


async def _run(options: ViewOptions, once: bool, settings: Settings) -> int:
    context = AppContext.create(settings)
    try:
        if once:
            return await run_once(context, options)
        return await InteractiveApp(context, options, Terminal()).run()
    finally:
        await context.aclose()


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        if handle_config_commands(args):
            return EXIT_OK
        overrides: dict[str, object] = {}
        if args.log_file:
            overrides["log_file_path"] = args.log_file
        if args.debug:
            overrides["debug"] = True
        settings = load_settings(**overrides)
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        print("Run 'liiga-teletext --config' to set the API domain.", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    configure_logging(settings.resolved_log_file, debug=settings.debug)
    logger.info("app_started", version=__version__, once=args.once, date=args.date)

    options = ViewOptions(
        date=args.date,
        compact=args.compact,
        wide=args.wide,
        disable_video_links=args.plain,
        min_refresh_interval=args.min_refresh_interval,
    )
    try:
        return asyncio.run(_run(options, args.once, settings))
    except TerminalError as exc:
        print(f"Terminal error: {exc}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    except KeyboardInterrupt:
        return EXIT_OK
