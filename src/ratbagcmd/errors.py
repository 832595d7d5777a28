# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Error taxonomy for command dispatch.

Every error maps to a process exit code. Handlers and the resource resolver
raise these; the dispatcher's caller turns them into a result.
"""

from .const import ExitCode


class CommandError(Exception):
    """Base class for errors that end a command with a non-zero exit code."""

    exit_code: ExitCode = ExitCode.DEVICE

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class UsageError(CommandError):
    """The command line is malformed (unknown subcommand, wrong arguments)."""

    exit_code = ExitCode.USAGE


class UnsupportedError(CommandError):
    """The device or resource cannot satisfy a well-formed request."""

    exit_code = ExitCode.UNSUPPORTED


class DeviceError(CommandError):
    """Talking to the device failed, or the device violated its own model."""

    exit_code = ExitCode.DEVICE
