# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Resolution selection and dpi commands."""

from contextlib import closing

from ..context import Context
from ..device import Capability
from ..errors import DeviceError, UnsupportedError, UsageError
from .base import CommandNode, CommandResult, parse_args
from .dispatcher import dispatch_next, parse_index
from .resolver import find_active_index, get_active_resolution


class ResolutionCommandsMixin:
    """Mixin providing the resolution router, active and dpi commands."""

    def resolution(self, node: CommandNode, ctx: Context, args: list[str]) -> CommandResult:
        """Select a resolution by index, or the active one, then dispatch."""
        if not args:
            raise UsageError("Missing resolution command")

        index = parse_index(args[0])
        if index is not None:
            resolution = ctx.profile.get_resolution(index)
            if resolution is None:
                raise UnsupportedError(f"Unable to retrieve resolution {index}")
            args = args[1:]
        else:
            resolution = get_active_resolution(ctx.profile)

        ctx.set_resolution(resolution)
        return dispatch_next(node, ctx, args)

    def resolution_active_get(
        self, node: CommandNode, ctx: Context, args: list[str]
    ) -> CommandResult:
        """Print the index of the profile's active resolution."""
        active = find_active_index(ctx.profile.resolutions())
        if active is None:
            raise DeviceError("Failed to retrieve the active resolution")
        return CommandResult(str(active), data={"active": active})

    def resolution_active_set(
        self, node: CommandNode, ctx: Context, args: list[str]
    ) -> CommandResult:
        """Make resolution M the profile's active resolution."""
        (index,) = parse_args(args, node.arg_specs, node.name)
        device, profile = ctx.device, ctx.profile

        if not device.has_capability(Capability.SWITCHABLE_RESOLUTION):
            raise UnsupportedError(f"Device '{device.name}' has no switchable resolution")

        resolution = profile.get_resolution(index)
        if resolution is None:
            raise UnsupportedError(f"'{index}' is not a valid resolution")

        with closing(resolution):
            if resolution.is_active:
                return CommandResult(f"Resolution '{index}' is already active")
            resolution.set_active()

        return CommandResult(
            f"Switched profile '{profile.index}' to resolution '{index}'",
            data={"active": index},
        )

    def dpi_get(self, node: CommandNode, ctx: Context, args: list[str]) -> CommandResult:
        """Print the selected resolution's dpi."""
        dpi = ctx.resolution.dpi
        return CommandResult(str(dpi), data={"dpi": dpi})

    def dpi_set(self, node: CommandNode, ctx: Context, args: list[str]) -> CommandResult:
        """Write a new dpi value to the selected resolution."""
        (dpi,) = parse_args(args, node.arg_specs, node.name)
        device, resolution = ctx.device, ctx.resolution

        if not device.has_capability(Capability.SWITCHABLE_RESOLUTION):
            raise UnsupportedError(f"Device '{device.name}' has no switchable resolution")

        try:
            resolution.set_dpi(dpi)
        except DeviceError as e:
            raise DeviceError(f"Failed to change the dpi: {e.message}") from e

        return CommandResult(data={"dpi": dpi})
