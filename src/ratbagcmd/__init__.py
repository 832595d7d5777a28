# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Command-line configuration of gaming mice through a device service.

Commands form a tree; the device, profile and resolution a command needs are
resolved from the trailing device path before its handler runs.

Example usage:
    ratbag-command info /dev/input/event5
    ratbag-command profile 1 resolution 2 dpi set 800 /dev/input/event5

    # Or use programmatically
    from ratbagcmd import CommandHandler, Context
    from ratbagcmd.simulator import FileDeviceService

    handler = CommandHandler()
    with Context(FileDeviceService()) as ctx:
        result = handler.execute(ctx, ["dpi", "get", "mouse.json"])
"""

from .commands import CommandHandler, CommandNode, CommandResult
from .const import ExitCode, Requirement, Verbosity
from .context import Context
from .errors import CommandError, DeviceError, UnsupportedError, UsageError

__all__ = [
    "CommandError",
    "CommandHandler",
    "CommandNode",
    "CommandResult",
    "Context",
    "DeviceError",
    "ExitCode",
    "Requirement",
    "UnsupportedError",
    "UsageError",
    "Verbosity",
]
