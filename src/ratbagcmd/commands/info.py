# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Device information and discovery commands."""

import logging
from contextlib import closing

from ..const import DEVICE_NODE_PREFIX
from ..context import Context
from ..device import ActionType, Button, Capability, Profile, ResolutionCapability
from ..errors import UsageError
from ..keycodes import key_name
from .base import CommandNode, CommandResult

logger = logging.getLogger(__name__)

# Short names printed on the Capabilities line, in display order
CAPABILITY_TOKENS = (
    (Capability.SWITCHABLE_RESOLUTION, "res"),
    (Capability.SWITCHABLE_PROFILE, "profile"),
    (Capability.BUTTON_KEY, "btn-key"),
    (Capability.BUTTON_MACROS, "btn-macros"),
)


def describe_action(button: Button) -> str:
    """Human-readable form of a button's current mapping."""
    action = button.action_type
    if action == ActionType.NONE:
        return "none"
    if action == ActionType.BUTTON:
        return f"button {button.button}"
    if action == ActionType.KEY:
        return f"key {key_name(button.key)}"
    if action == ActionType.SPECIAL:
        return f"special {button.special.value}"
    if action == ActionType.MACRO:
        macro = button.macro
        return f"macro {macro.name}" if macro else "macro"
    return "unknown"


def _flags(active: bool, default: bool) -> str:
    return f"{' (active)' if active else ''}{' (default)' if default else ''}"


class InfoCommandsMixin:
    """Mixin providing info and list commands."""

    def _describe_profile(self, profile: Profile, num_buttons: int) -> list[str]:
        lines = [f"  Profile {profile.index}{_flags(profile.is_active, profile.is_default)}"]
        lines.append("    Resolutions:")
        for res in profile.resolutions():
            with closing(res):
                flags = _flags(res.is_active, res.is_default)
                if res.dpi == 0:
                    lines.append(f"      {res.index}: <disabled>")
                elif res.has_capability(ResolutionCapability.SEPARATE_XY_RESOLUTION):
                    lines.append(
                        f"      {res.index}: {res.dpi_x}x{res.dpi_y}dpi @ {res.report_rate}Hz{flags}"
                    )
                else:
                    lines.append(f"      {res.index}: {res.dpi}dpi @ {res.report_rate}Hz{flags}")

        for b in range(num_buttons):
            button = profile.get_button(b)
            if button is None:
                continue
            with closing(button):
                lines.append(
                    f"    Button: {b} type {button.type.value} "
                    f"is mapped to '{describe_action(button)}'"
                )
        return lines

    def info(self, node: CommandNode, ctx: Context, args: list[str]) -> CommandResult:
        """Show the device's capabilities, profiles, resolutions and buttons."""
        device = ctx.device
        capabilities = [token for cap, token in CAPABILITY_TOKENS if device.has_capability(cap)]

        lines = [
            f"Device '{device.name}'",
            "Capabilities:" + "".join(f" {token}" for token in capabilities),
            f"Number of buttons: {device.num_buttons}",
            f"Profiles supported: {device.num_profiles}",
        ]
        for profile in device.profiles():
            with closing(profile):
                lines.extend(self._describe_profile(profile, device.num_buttons))

        data = {
            "name": device.name,
            "capabilities": capabilities,
            "buttons": device.num_buttons,
            "profiles": device.num_profiles,
        }
        return CommandResult("\n".join(lines), data=data)

    def list_devices(self, node: CommandNode, ctx: Context, args: list[str]) -> CommandResult:
        """List every supported device node in the device directory."""
        if args:
            raise UsageError(f"Unexpected argument: {args[0]}")

        try:
            candidates = sorted(
                entry for entry in ctx.device_dir.iterdir()
                if entry.name.startswith(DEVICE_NODE_PREFIX)
            )
        except OSError as e:
            logger.warning(f"Unable to scan {ctx.device_dir}: {e}")
            return CommandResult()

        lines = []
        supported = []
        for path in candidates:
            device = ctx.service.open_device(str(path))
            if device is None:
                continue
            with closing(device):
                lines.append(f"{path}:\t{device.name}")
                supported.append(str(path))

        if not supported:
            return CommandResult("No supported devices found", data={"devices": []})
        return CommandResult("\n".join(lines), data={"devices": supported})
