# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""State dataclasses for simulated devices.

A simulated device is described by a JSON document; these dataclasses hold
the parsed document and convert it back for writing.
"""

from dataclasses import dataclass, field
from typing import Optional

from ..const import (
    FIELD_ACTION,
    FIELD_ACTIVE,
    FIELD_BUTTON,
    FIELD_BUTTONS,
    FIELD_CAPABILITIES,
    FIELD_DEFAULT,
    FIELD_DPI,
    FIELD_DPI_Y,
    FIELD_EVENTS,
    FIELD_KEY,
    FIELD_MAX_DPI,
    FIELD_MODIFIERS,
    FIELD_NAME,
    FIELD_NUM_BUTTONS,
    FIELD_PROFILES,
    FIELD_RATE,
    FIELD_RESOLUTIONS,
    FIELD_SEPARATE_XY,
    FIELD_SPECIAL,
    FIELD_TYPE,
)
from ..device import ActionType, ButtonType, Capability, Macro, MacroEventType, SpecialAction


def _require(data, key: str, kind: type, where: str):
    if not isinstance(data, dict):
        raise ValueError(f"{where} must be an object")
    if key not in data:
        raise ValueError(f"{where} is missing '{key}'")
    value = data[key]
    # bool is an int subclass but never a valid count or code
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise ValueError(f"{where} field '{key}' has the wrong type")
    return value


def _optional_int(data: dict, key: str, default: Optional[int], where: str) -> Optional[int]:
    if data.get(key) is None:
        return default
    return _require(data, key, int, where)


@dataclass
class ResolutionState:
    """One resolution slot of a profile."""

    dpi: int = 800
    dpi_y: Optional[int] = None
    rate: int = 1000
    active: bool = False
    default: bool = False
    separate_xy: bool = False
    # Highest dpi the sensor accepts
    max_dpi: int = 16000

    def to_dict(self) -> dict:
        result = {
            FIELD_DPI: self.dpi,
            FIELD_RATE: self.rate,
            FIELD_ACTIVE: self.active,
            FIELD_DEFAULT: self.default,
            FIELD_MAX_DPI: self.max_dpi,
        }
        if self.separate_xy:
            result[FIELD_SEPARATE_XY] = True
            result[FIELD_DPI_Y] = self.dpi if self.dpi_y is None else self.dpi_y
        return result

    @classmethod
    def from_dict(cls, data: dict) -> "ResolutionState":
        return cls(
            dpi=_require(data, FIELD_DPI, int, "resolution"),
            dpi_y=_optional_int(data, FIELD_DPI_Y, None, "resolution"),
            rate=_optional_int(data, FIELD_RATE, 1000, "resolution"),
            active=bool(data.get(FIELD_ACTIVE, False)),
            default=bool(data.get(FIELD_DEFAULT, False)),
            separate_xy=bool(data.get(FIELD_SEPARATE_XY, False)),
            max_dpi=_optional_int(data, FIELD_MAX_DPI, 16000, "resolution"),
        )


@dataclass
class ButtonState:
    """A button and its current mapping.

    Only the payload belonging to `action` is meaningful: `button` for
    BUTTON, `key`/`modifiers` for KEY, `special` for SPECIAL, `macro` for
    MACRO.
    """

    type: ButtonType = ButtonType.UNKNOWN
    action: ActionType = ActionType.NONE
    button: int = 0
    key: int = 0
    modifiers: list = field(default_factory=list)
    special: SpecialAction = SpecialAction.UNKNOWN
    macro: Optional[Macro] = None

    def clear(self) -> None:
        """Reset the mapping to no action."""
        self.action = ActionType.NONE
        self.button = 0
        self.key = 0
        self.modifiers = []
        self.special = SpecialAction.UNKNOWN
        self.macro = None

    def action_to_dict(self) -> dict:
        result = {FIELD_TYPE: self.action.value}
        if self.action == ActionType.BUTTON:
            result[FIELD_BUTTON] = self.button
        elif self.action == ActionType.KEY:
            result[FIELD_KEY] = self.key
            if self.modifiers:
                result[FIELD_MODIFIERS] = list(self.modifiers)
        elif self.action == ActionType.SPECIAL:
            result[FIELD_SPECIAL] = self.special.value
        elif self.action == ActionType.MACRO and self.macro is not None:
            result[FIELD_NAME] = self.macro.name
            result[FIELD_EVENTS] = [[event.value, data] for event, data in self.macro.events]
        return result

    def to_dict(self) -> dict:
        return {FIELD_TYPE: self.type.value, FIELD_ACTION: self.action_to_dict()}

    @classmethod
    def from_dict(cls, data: dict) -> "ButtonState":
        """Create from the file format.

        Raises:
            ValueError: on unknown button types, action types or specials
        """
        if not isinstance(data, dict):
            raise ValueError("button must be an object")
        state = cls(type=ButtonType(data.get(FIELD_TYPE, ButtonType.UNKNOWN.value)))

        action = data.get(FIELD_ACTION) or {}
        if not isinstance(action, dict):
            raise ValueError("button field 'action' must be an object")
        state.action = ActionType(action.get(FIELD_TYPE, ActionType.NONE.value))
        if state.action == ActionType.BUTTON:
            state.button = _require(action, FIELD_BUTTON, int, "button action")
        elif state.action == ActionType.KEY:
            state.key = _require(action, FIELD_KEY, int, "key action")
            state.modifiers = list(action.get(FIELD_MODIFIERS, []))
        elif state.action == ActionType.SPECIAL:
            state.special = SpecialAction(_require(action, FIELD_SPECIAL, str, "special action"))
        elif state.action == ActionType.MACRO:
            events = [
                (MacroEventType(event), int(value))
                for event, value in action.get(FIELD_EVENTS, [])
            ]
            state.macro = Macro(action.get(FIELD_NAME, ""), events)
        return state


@dataclass
class ProfileState:
    """A profile with its resolutions and buttons."""

    active: bool = False
    default: bool = False
    resolutions: list[ResolutionState] = field(default_factory=list)
    buttons: list[ButtonState] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            FIELD_ACTIVE: self.active,
            FIELD_DEFAULT: self.default,
            FIELD_RESOLUTIONS: [res.to_dict() for res in self.resolutions],
            FIELD_BUTTONS: [button.to_dict() for button in self.buttons],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ProfileState":
        if not isinstance(data, dict):
            raise ValueError("profile must be an object")
        return cls(
            active=bool(data.get(FIELD_ACTIVE, False)),
            default=bool(data.get(FIELD_DEFAULT, False)),
            resolutions=[
                ResolutionState.from_dict(res) for res in data.get(FIELD_RESOLUTIONS, [])
            ],
            buttons=[ButtonState.from_dict(button) for button in data.get(FIELD_BUTTONS, [])],
        )


@dataclass
class DeviceState:
    """Everything stored in a simulated device file."""

    name: str
    capabilities: set[Capability] = field(default_factory=set)
    num_buttons: int = 0
    profiles: list[ProfileState] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            FIELD_NAME: self.name,
            # Keep declaration order so rewritten files stay stable
            FIELD_CAPABILITIES: [cap.value for cap in Capability if cap in self.capabilities],
            FIELD_NUM_BUTTONS: self.num_buttons,
            FIELD_PROFILES: [profile.to_dict() for profile in self.profiles],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DeviceState":
        """Create from the file format.

        Raises:
            ValueError: if the document does not describe a device
        """
        name = _require(data, FIELD_NAME, str, "device")
        profiles = _require(data, FIELD_PROFILES, list, "device")
        capabilities = data.get(FIELD_CAPABILITIES, [])
        if not isinstance(capabilities, list):
            raise ValueError("device field 'capabilities' has the wrong type")

        state = cls(
            name=name,
            capabilities={Capability(cap) for cap in capabilities},
            profiles=[ProfileState.from_dict(profile) for profile in profiles],
        )
        state.num_buttons = _optional_int(
            data, FIELD_NUM_BUTTONS, max((len(p.buttons) for p in state.profiles), default=0), "device"
        )
        return state
