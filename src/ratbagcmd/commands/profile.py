# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Profile selection and switching commands."""

from contextlib import closing

from ..context import Context
from ..device import Capability
from ..errors import DeviceError, UnsupportedError, UsageError
from .base import CommandNode, CommandResult, parse_args
from .dispatcher import dispatch_next, parse_index
from .resolver import find_active_index, get_active_profile


class ProfileCommandsMixin:
    """Mixin providing the profile router and profile commands."""

    def profile(self, node: CommandNode, ctx: Context, args: list[str]) -> CommandResult:
        """Select a profile by index, or the active one, then dispatch."""
        if not args:
            raise UsageError("Missing profile command")

        index = parse_index(args[0])
        if index is not None:
            profile = ctx.device.get_profile(index)
            if profile is None:
                raise UnsupportedError(f"Unable to find profile {index}")
            args = args[1:]
        else:
            profile = get_active_profile(ctx.device)

        ctx.set_profile(profile)
        return dispatch_next(node, ctx, args)

    def profile_active_get(
        self, node: CommandNode, ctx: Context, args: list[str]
    ) -> CommandResult:
        """Print the index of the active profile."""
        device = ctx.device
        if not device.has_capability(Capability.SWITCHABLE_PROFILE) or device.num_profiles <= 1:
            return CommandResult("0", data={"active": 0})

        active = find_active_index(device.profiles())
        if active is None:
            raise DeviceError("Unable to find active profile, this is a bug.")
        return CommandResult(str(active), data={"active": active})

    def profile_active_set(
        self, node: CommandNode, ctx: Context, args: list[str]
    ) -> CommandResult:
        """Make profile N the active profile."""
        (index,) = parse_args(args, node.arg_specs, node.name)
        device = ctx.device

        if not device.has_capability(Capability.SWITCHABLE_PROFILE):
            raise UnsupportedError(f"Device '{device.name}' has no switchable profiles")

        profile = device.get_profile(index) if index < device.num_profiles else None
        if profile is None:
            raise UnsupportedError(f"'{index}' is not a valid profile")

        with closing(profile):
            if profile.is_active:
                return CommandResult(f"'{device.name}' is already in profile '{index}'")
            profile.set_active()

        return CommandResult(f"Switched '{device.name}' to profile '{index}'", data={"active": index})
