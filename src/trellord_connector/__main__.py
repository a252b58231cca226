"""CLI entry point for Trellord Connector.

Usage:
    python -m trellord_connector [options]
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import logging.config
import sys
from typing import NoReturn

from pydantic import ValidationError

from trellord_connector import __version__
from trellord_connector.config import (
    BoardConfig,
    ConfigError,
    Settings,
    clear_settings_cache,
    get_settings,
)
from trellord_connector.pipeline import Pipeline
from trellord_connector.shutdown import GracefulShutdown

# Application info
APP_NAME = "Trellord Connector"
APP_VERSION = __version__

# Exit codes
EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_CONFIG_ERROR = 2
EXIT_INTERRUPTED = 130


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="trellord-connector",
        description="Relay Trello board activity to Discord webhooks.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m trellord_connector                    Run the relay
  python -m trellord_connector --config-check     Validate config and exit
  python -m trellord_connector --dry-run          Log messages instead of posting
  python -m trellord_connector --log-level DEBUG  Enable debug logging
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {APP_VERSION}",
    )

    parser.add_argument(
        "--config-check",
        action="store_true",
        help="Validate settings and board file, then exit",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Override logging level (default: from settings)",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Log messages instead of posting them to Discord",
    )

    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Override the HTTP port (default: from settings)",
    )

    return parser


def configure_logging(level: str) -> None:
    """Configure logging for the application.

    Args:
        level: Logging level string (DEBUG, INFO, etc.)
    """
    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "detailed": {
                "format": (
                    "%(asctime)s [%(levelname)s] %(name)s (%(filename)s:%(lineno)d): %(message)s"
                ),
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "detailed" if level == "DEBUG" else "standard",
                "stream": "ext://sys.stdout",
            },
        },
        "root": {
            "level": level,
            "handlers": ["console"],
        },
        # Quieter logging for noisy libraries
        "loggers": {
            "httpx": {"level": "WARNING"},
            "httpcore": {"level": "WARNING"},
            "aiohttp.access": {"level": "WARNING"},
        },
    }
    logging.config.dictConfig(config)


def print_banner() -> None:
    """Print the application startup banner."""
    print(f"\n{APP_NAME} v{APP_VERSION}\n")


def print_config_summary(
    settings: Settings,
    boards: list[BoardConfig],
    dry_run: bool,
) -> None:
    """Print a summary of the configuration with secrets redacted."""
    summary = settings.redacted_summary()
    print("Configuration:")
    print(f"  Trello API: {summary['trello_api_url']}")
    print(f"  Trello key: {summary['trello_api_key']}")
    print(f"  Trello token: {summary['trello_token']}")
    print(f"  Boards file: {summary['config_path']}")
    print(f"  Language: {summary['language']}")
    print(f"  Port: {summary['port']}")
    print(f"  Log Level: {summary['log_level']}")
    print(f"  Dry Run: {dry_run}")
    print(f"  Boards: {len(boards)}")
    for board in boards:
        print(
            f"    - {board.board_name} ({board.board_id}): "
            f"poll every {board.poll_interval_seconds:g}s, "
            f"send every {board.dispatch_interval_seconds:g}s -> "
            f"{Settings.redact_webhook_url(board.discord.webhook_url)}"
        )
    print()


def validate_config() -> tuple[Settings, list[BoardConfig]] | None:
    """Validate and load settings and the board file.

    Returns:
        Settings and boards if valid, None if invalid.
    """
    try:
        clear_settings_cache()
        settings = get_settings()
        boards = settings.load_boards()
    except ValidationError as e:
        print("Configuration validation failed:", file=sys.stderr)
        for error in e.errors():
            field = ".".join(str(loc) for loc in error["loc"])
            msg = error["msg"]
            print(f"  {field}: {msg}", file=sys.stderr)
        return None
    except ConfigError as e:
        print(f"Configuration validation failed: {e}", file=sys.stderr)
        return None
    return settings, boards


def run_config_check(settings: Settings, boards: list[BoardConfig]) -> int:
    """Print the validated configuration and return the exit code."""
    print("Configuration is valid!")
    print()
    print_config_summary(settings, boards, dry_run=settings.dry_run)
    print("All checks passed. Ready to run.")
    return EXIT_SUCCESS


async def run_relay(
    settings: Settings,
    boards: list[BoardConfig],
    dry_run: bool,
) -> int:
    """Run the relay until a shutdown signal arrives.

    Returns:
        Exit code.
    """
    logger = logging.getLogger(__name__)

    try:
        async with GracefulShutdown() as shutdown:
            pipeline = Pipeline(settings, boards, dry_run=dry_run)
            shutdown.register_cleanup(pipeline.stop)

            await pipeline.start()
            logger.info("Relay running. Press Ctrl+C to stop.")

            await shutdown.wait()
            logger.info("Shutdown signal received, stopping relay...")

        return EXIT_SUCCESS
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return EXIT_INTERRUPTED
    except Exception as e:
        logger.exception("Relay failed: %s", e)
        return EXIT_ERROR


def main(argv: list[str] | None = None) -> NoReturn:
    """Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:]).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    loaded = validate_config()
    if loaded is None:
        sys.exit(EXIT_CONFIG_ERROR)
    settings, boards = loaded

    if args.port is not None:
        settings = settings.model_copy(update={"port": args.port})

    configure_logging(args.log_level or settings.log_level)
    print_banner()

    if args.config_check:
        sys.exit(run_config_check(settings, boards))

    dry_run = args.dry_run or settings.dry_run
    print_config_summary(settings, boards, dry_run)

    exit_code = asyncio.run(run_relay(settings, boards, dry_run))
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
