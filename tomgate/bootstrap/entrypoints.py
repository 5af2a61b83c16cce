"""
bootstrap/entrypoints.py - Application entry points

Logging setup and the tomgate command line.
"""

from __future__ import annotations
from typing import List, Optional
import argparse
import json
import logging
import sys

from tomgate.bootstrap.config import DEFAULT_LOG_FORMAT, load_config
from tomgate.bootstrap.loader import load_effective_config
from tomgate.cli.commands import build_registry
from tomgate.cli.core import CLIContext, OutputFormat, format_output
from tomgate.errors import TomGateError

logger = logging.getLogger("bootstrap.entrypoints")


class JSONFormatter(logging.Formatter):
    def format(self, record):
        return json.dumps({
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        })


def setup_logging(
    level: str = "INFO",
    log_file: str = None,
    json_format: bool = False,
    log_format: str = DEFAULT_LOG_FORMAT,
) -> None:
    """
    Configure application logging.

    Handlers installed by an earlier call are replaced, so repeated
    calls do not duplicate output.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional log file path
        json_format: Use JSON format for logs
        log_format: logging.Formatter format string for plain-text logs
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    if json_format:
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(log_format)

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if getattr(handler, "_tomgate", False):
            root_logger.removeHandler(handler)
            handler.close()

    # Console handler; stdout is reserved for command output
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)
    console_handler._tomgate = True

    root_logger.setLevel(log_level)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        file_handler.setLevel(log_level)
        file_handler._tomgate = True
        root_logger.addHandler(file_handler)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="TOM lifecycle phase derivation and governance gating",
        prog="tomgate",
    )

    parser.add_argument(
        "-c", "--config",
        help="TOM configuration file (.json, .yaml, .yml)",
        default=None,
    )
    parser.add_argument(
        "--settings",
        help="Path to tomgate settings file",
        default=None,
    )
    parser.add_argument(
        "--preset",
        help="Pin the active preset",
        default=None,
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Log level",
    )
    parser.add_argument(
        "--log-file",
        help="Log file path",
        default=None,
    )
    output = parser.add_mutually_exclusive_group()
    output.add_argument(
        "--json",
        action="store_true",
        help="Output in JSON format",
    )
    output.add_argument(
        "--table",
        action="store_true",
        help="Output lists as a table",
    )

    registry = build_registry()
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True
    for command in registry.get_all().values():
        sub = subparsers.add_parser(
            command.name,
            help=command.description,
            aliases=command.aliases,
        )
        command.configure_parser(sub)

    return parser


def cli_main(args: Optional[List[str]] = None) -> int:
    """
    CLI entry point.

    Args:
        args: Command line arguments (defaults to sys.argv)

    Returns:
        Exit code
    """
    parser = build_parser()
    parsed = parser.parse_args(args)

    try:
        settings = load_config(parsed.settings)
    except TomGateError as e:
        logger.error(f"Could not load settings: {e}")
        return 1

    if parsed.config:
        settings.engine.tom_config_path = parsed.config
    if parsed.preset:
        settings.engine.preset = parsed.preset

    log_level = "DEBUG" if parsed.verbose else (parsed.log_level or settings.logging.level)
    setup_logging(
        level=log_level,
        log_file=parsed.log_file or settings.logging.log_file,
        json_format=settings.logging.json_logs,
        log_format=settings.logging.format,
    )

    try:
        effective = load_effective_config(settings.engine)
    except TomGateError as e:
        logger.error(f"Could not load TOM configuration: {e}")
        return 1

    if parsed.json:
        output_format = OutputFormat.JSON
    elif parsed.table:
        output_format = OutputFormat.TABLE
    else:
        output_format = OutputFormat.TEXT

    ctx = CLIContext(config=effective, output_format=output_format)

    command = build_registry().get(parsed.command)
    result = command.execute(ctx, parsed)
    print(format_output(result, ctx.output_format))
    return result.exit_code
