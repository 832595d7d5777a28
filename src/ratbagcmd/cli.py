# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Command-line entry point for ratbag-command.

Usage:
    ratbag-command [--verbose[=raw]] <command> [args...] /dev/input/eventX
    ratbag-command --help
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .commands import CommandHandler, format_usage
from .const import HISTORY_FILE, PROGRAM_NAME, RAW, ExitCode, Verbosity
from .context import Context
from .device import DeviceService
from .simulator import FileDeviceService

logger = logging.getLogger(__name__)

LOG_LEVELS = {
    Verbosity.NORMAL: logging.WARNING,
    Verbosity.VERBOSE: logging.DEBUG,
    Verbosity.VERBOSE_RAW: RAW,
}


class CommandLineParser(argparse.ArgumentParser):
    """Argument parser that reports option errors with the full command tree."""

    def __init__(self, *args, usage_text: str = "", **kwargs):
        super().__init__(*args, **kwargs)
        self.usage_text = usage_text

    def error(self, message):
        print(f"Error: {message}", file=sys.stderr)
        if self.usage_text:
            print(self.usage_text, file=sys.stderr)
        self.exit(ExitCode.USAGE)


def build_parser(usage_text: str = "") -> argparse.ArgumentParser:
    parser = CommandLineParser(
        prog=PROGRAM_NAME,
        add_help=False,
        allow_abbrev=False,
        usage_text=usage_text,
    )
    # The raw level is only selected by the attached form, so a separate
    # word after --verbose is always the command
    parser.add_argument(
        "--verbose", "-v",
        dest="verbosity",
        action="store_const",
        const=Verbosity.VERBOSE,
        help="Print debugging output",
    )
    parser.add_argument(
        "--verbose=raw",
        dest="verbosity",
        action="store_const",
        const=Verbosity.VERBOSE_RAW,
        help="Print debugging output with protocol output",
    )
    parser.add_argument(
        "--help", "-h",
        action="store_true",
        help="Print this help",
    )
    parser.add_argument(
        "--history",
        metavar="FILE",
        default=str(HISTORY_FILE),
        help=f"Shell history file path, or 'none' to disable (default: {HISTORY_FILE})",
    )
    parser.add_argument(
        "command",
        nargs=argparse.REMAINDER,
        help="Command, its arguments and the device path",
    )
    parser.set_defaults(verbosity=Verbosity.NORMAL)
    return parser


def parse_command_line(argv: list[str], usage_text: str = "") -> argparse.Namespace:
    """Parse options; everything from the first command word on is kept as is.

    Option errors print `usage_text` and exit with the usage exit code.
    """
    return build_parser(usage_text).parse_args(argv)


def configure_logging(verbosity: Verbosity) -> None:
    logging.addLevelName(RAW, "RAW")
    logging.basicConfig(
        level=LOG_LEVELS[verbosity],
        format="%(asctime)s [%(levelname)s] %(message)s",
    )


def run(argv: Optional[list[str]] = None, service: Optional[DeviceService] = None) -> int:
    """Run one command line and return the process exit code.

    Args:
        argv: Arguments without the program name; defaults to sys.argv[1:]
        service: Device service to open devices with; defaults to the
                 file-backed simulator service
    """
    handler = CommandHandler()
    options = parse_command_line(
        sys.argv[1:] if argv is None else argv, usage_text=format_usage(handler.root)
    )
    configure_logging(options.verbosity)

    if options.history.lower() == "none":
        handler.history_file = None
    else:
        handler.history_file = Path(options.history)

    if options.help:
        print(format_usage(handler.root))
        return ExitCode.SUCCESS

    if not options.command:
        print(format_usage(handler.root), file=sys.stderr)
        return ExitCode.USAGE

    with Context(service or FileDeviceService(), options.verbosity) as ctx:
        result = handler.execute(ctx, options.command)

    if result.success:
        if result.message:
            print(result.message)
    else:
        logger.debug(f"Command failed with exit code {int(result.code)}")
        print(f"Error: {result.message}", file=sys.stderr)
        if result.code == ExitCode.USAGE:
            print(format_usage(handler.root), file=sys.stderr)

    return int(result.code)


def main():
    """Console script entry point."""
    sys.exit(run())
