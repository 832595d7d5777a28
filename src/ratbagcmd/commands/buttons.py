# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Button remapping commands."""

from contextlib import closing
from typing import Any, Optional

from ..context import Context
from ..device import ActionType, Button, Capability, Macro, MacroEventType, SpecialAction
from ..errors import DeviceError, UnsupportedError, UsageError
from ..keycodes import KEY_VOLUMEDOWN, KEY_VOLUMEUP, key_code_from_name
from .base import ArgSpec, CommandNode, CommandResult, parse_arg, parse_args
from .dispatcher import dispatch_next, parse_index
from .info import describe_action

ACTION_KINDS = ("button", "key", "special", "macro")

SPECIAL_ACTION_NAMES = tuple(s.value for s in SpecialAction if s != SpecialAction.UNKNOWN)

_BUTTON_NUMBER = ArgSpec("number", "int", min_value=0)


def parse_macro(value: str) -> Optional[Macro]:
    """Parse 'name:KEY_A,KEY_B,...' into a macro pressing and releasing each key.

    Returns None if the text is malformed or names an unknown key.
    """
    name, sep, keys = value.partition(":")
    if not sep or not name or not keys:
        return None

    macro = Macro(name)
    for key in keys.split(","):
        code = key_code_from_name(key.strip())
        if code is None:
            return None
        macro.events.append((MacroEventType.KEY_PRESSED, code))
        macro.events.append((MacroEventType.KEY_RELEASED, code))
    return macro


def parse_action(kind: str, value: str) -> tuple[ActionType, Any]:
    """Turn an action kind and its argument into (action type, payload).

    Raises:
        UsageError: if the kind or its argument is invalid
    """
    if kind == "button":
        number, error = parse_arg(value, _BUTTON_NUMBER)
        if error:
            raise UsageError(f"Invalid button number: {error}")
        return ActionType.BUTTON, number

    elif kind == "key":
        code = key_code_from_name(value)
        if code is None:
            raise UsageError(f"Failed to resolve key {value}")
        return ActionType.KEY, code

    elif kind == "special":
        if value not in SPECIAL_ACTION_NAMES:
            raise UsageError(f"Invalid special command '{value}'")
        return ActionType.SPECIAL, SpecialAction(value)

    elif kind == "macro":
        macro = parse_macro(value)
        if macro is None:
            raise UsageError(f"Invalid macro '{value}'")
        return ActionType.MACRO, macro

    raise UsageError(f"Invalid action '{kind}'. Choose from: {', '.join(ACTION_KINDS)}")


class ButtonCommandsMixin:
    """Mixin providing button router and remapping commands."""

    def _get_button(self, ctx: Context, index: int) -> Button:
        button = ctx.profile.get_button(index)
        if button is None:
            raise UnsupportedError(f"Invalid button number {index}")
        return button

    def _selected_button_index(self, ctx: Context) -> int:
        if ctx.button_index is None:
            raise UsageError("Missing button number")
        return ctx.button_index

    def _commit_profile(self, ctx: Context) -> None:
        try:
            ctx.profile.set_active()
        except DeviceError as e:
            raise DeviceError(f"Unable to apply the current profile: {e.message}") from e

    def _remap(self, ctx: Context, index: int, kind: str, value: str) -> CommandResult:
        """Apply a mapping to button `index` of the selected profile and commit."""
        action_type, payload = parse_action(kind, value)
        device = ctx.device

        if not device.has_capability(Capability.BUTTON_KEY):
            raise UnsupportedError(f"Device '{device.name}' has no programmable buttons")
        if action_type == ActionType.MACRO and not device.has_capability(Capability.BUTTON_MACROS):
            raise UnsupportedError(f"Device '{device.name}' does not support macros")

        with closing(self._get_button(ctx, index)) as button:
            try:
                if action_type == ActionType.BUTTON:
                    button.set_button(payload)
                elif action_type == ActionType.KEY:
                    button.set_key(payload)
                elif action_type == ActionType.SPECIAL:
                    button.set_special(payload)
                elif action_type == ActionType.MACRO:
                    button.set_macro(payload)
                else:
                    raise AssertionError(f"unhandled button action type {action_type}")
            except DeviceError as e:
                raise UnsupportedError(
                    f"Unable to perform button {index} mapping {kind} {value}"
                ) from e

        self._commit_profile(ctx)
        return CommandResult(data={"button": index, "action": kind, "value": value})

    def change_button(self, node: CommandNode, ctx: Context, args: list[str]) -> CommandResult:
        """Remap button X of the active profile."""
        index, kind, value = parse_args(args, node.arg_specs, node.name)
        return self._remap(ctx, index, kind, value)

    def button(self, node: CommandNode, ctx: Context, args: list[str]) -> CommandResult:
        """Consume an optional button number, then dispatch."""
        if args:
            index = parse_index(args[0])
            if index is not None:
                ctx.button_index = index
                args = args[1:]
        return dispatch_next(node, ctx, args)

    def button_get(self, node: CommandNode, ctx: Context, args: list[str]) -> CommandResult:
        """Show the selected button's mapping."""
        index = self._selected_button_index(ctx)
        with closing(self._get_button(ctx, index)) as button:
            action = describe_action(button)
            return CommandResult(
                f"Button: {index} type {button.type.value} is mapped to '{action}'",
                data={"button": index, "type": button.type.value, "action": action},
            )

    def button_set(self, node: CommandNode, ctx: Context, args: list[str]) -> CommandResult:
        """Remap the selected button."""
        index = self._selected_button_index(ctx)
        kind, value = parse_args(args, node.arg_specs, node.name)
        return self._remap(ctx, index, kind, value)

    def button_disable(self, node: CommandNode, ctx: Context, args: list[str]) -> CommandResult:
        """Disable the selected button."""
        index = self._selected_button_index(ctx)
        if args:
            raise UsageError(f"Unexpected argument: {args[0]}")
        if not ctx.device.has_capability(Capability.BUTTON_KEY):
            raise UnsupportedError(f"Device '{ctx.device.name}' has no programmable buttons")

        with closing(self._get_button(ctx, index)) as button:
            button.disable()
        self._commit_profile(ctx)
        return CommandResult(f"Button {index} disabled", data={"button": index})

    def switch_etekcity(self, node: CommandNode, ctx: Context, args: list[str]) -> CommandResult:
        """Toggle whether buttons 6 and 7 send the volume keys."""
        device = ctx.device
        if not device.has_capability(Capability.SWITCHABLE_PROFILE):
            raise UnsupportedError(f"Device '{device.name}' has no switchable profiles")

        disabled = changed = False
        with closing(self._get_button(ctx, 6)) as button_6, \
                closing(self._get_button(ctx, 7)) as button_7:
            if button_6.key == KEY_VOLUMEUP and button_7.key == KEY_VOLUMEDOWN:
                button_6.disable()
                button_7.disable()
                disabled = changed = True
            elif (button_6.action_type == ActionType.NONE
                  and button_7.action_type == ActionType.NONE):
                button_6.set_key(KEY_VOLUMEUP)
                button_7.set_key(KEY_VOLUMEDOWN)
                changed = True

        if changed:
            self._commit_profile(ctx)

        return CommandResult(
            f"Switched the current profile of '{device.name}' to "
            f"{'not ' if disabled else ''}report the volume keys",
            data={"volume_keys": not disabled},
        )
