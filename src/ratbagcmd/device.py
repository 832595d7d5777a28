# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Abstract device-service interface consumed by the commands.

A concrete backend (see ratbagcmd.simulator) supplies a DeviceService that
opens devices by path. Devices expose profiles, profiles expose resolutions
and buttons. Mutating calls raise DeviceError when the device rejects the
change or cannot be written.
"""

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Iterator, Optional


class Capability(enum.Enum):
    """Optional device features."""

    SWITCHABLE_RESOLUTION = "switchable-resolution"
    SWITCHABLE_PROFILE = "switchable-profile"
    BUTTON_KEY = "button-key"
    BUTTON_MACROS = "button-macros"


class ResolutionCapability(enum.Enum):
    """Optional resolution features."""

    SEPARATE_XY_RESOLUTION = "separate-xy"


class ButtonType(enum.Enum):
    """Physical button kinds."""

    UNKNOWN = "unknown"
    LEFT = "left"
    MIDDLE = "middle"
    RIGHT = "right"
    THUMB = "thumb"
    THUMB2 = "thumb2"
    THUMB3 = "thumb3"
    THUMB4 = "thumb4"
    WHEEL_LEFT = "wheel-left"
    WHEEL_RIGHT = "wheel-right"
    WHEEL_CLICK = "wheel-click"
    WHEEL_UP = "wheel-up"
    WHEEL_DOWN = "wheel-down"
    WHEEL_RATCHET_MODE_SWITCH = "wheel-ratchet-mode-switch"
    EXTRA = "extra"
    SIDE = "side"
    FORWARD = "forward"
    BACK = "back"
    TASK = "task"
    RESOLUTION_CYCLE_UP = "resolution-cycle-up"
    RESOLUTION_UP = "resolution-up"
    RESOLUTION_DOWN = "resolution-down"
    RESOLUTION_ALTERNATE = "resolution-alternate"
    RESOLUTION_DEFAULT = "resolution-default"
    PROFILE_CYCLE_UP = "profile-cycle-up"
    PROFILE_UP = "profile-up"
    PROFILE_DOWN = "profile-down"


class ActionType(enum.Enum):
    """What a button does when pressed."""

    NONE = "none"
    BUTTON = "button"
    KEY = "key"
    SPECIAL = "special"
    MACRO = "macro"
    UNKNOWN = "unknown"


class SpecialAction(enum.Enum):
    """Device-interpreted button actions."""

    UNKNOWN = "unknown"
    DOUBLECLICK = "doubleclick"
    WHEEL_LEFT = "wheel-left"
    WHEEL_RIGHT = "wheel-right"
    WHEEL_UP = "wheel-up"
    WHEEL_DOWN = "wheel-down"
    RATCHET_MODE_SWITCH = "ratchet-mode-switch"
    RESOLUTION_CYCLE_UP = "resolution-cycle-up"
    RESOLUTION_CYCLE_DOWN = "resolution-cycle-down"
    RESOLUTION_UP = "resolution-up"
    RESOLUTION_DOWN = "resolution-down"
    RESOLUTION_ALTERNATE = "resolution-alternate"
    RESOLUTION_DEFAULT = "resolution-default"
    PROFILE_CYCLE_UP = "profile-cycle-up"
    PROFILE_CYCLE_DOWN = "profile-cycle-down"
    PROFILE_UP = "profile-up"
    PROFILE_DOWN = "profile-down"
    SECOND_MODE = "second-mode"
    BATTERY_LEVEL = "battery-level"


class MacroEventType(enum.Enum):
    """Macro step kinds."""

    NONE = "none"
    KEY_PRESSED = "pressed"
    KEY_RELEASED = "released"
    WAIT = "wait"


@dataclass
class Macro:
    """A named sequence of key events.

    Each event is (type, data) where data is a key code, or milliseconds for
    WAIT events.
    """

    name: str
    events: list[tuple[MacroEventType, int]] = field(default_factory=list)


class Handle(ABC):
    """Something the Context owns and must release exactly once."""

    def close(self) -> None:
        """Release the handle. The default does nothing."""


class Resolution(Handle):
    """One sensor resolution/report-rate setting of a profile."""

    index: int

    @property
    @abstractmethod
    def dpi(self) -> int:
        """Resolution in dpi, 0 if disabled. The x value for separate x/y."""

    @property
    @abstractmethod
    def dpi_x(self) -> int: ...

    @property
    @abstractmethod
    def dpi_y(self) -> int: ...

    @property
    @abstractmethod
    def report_rate(self) -> int: ...

    @property
    @abstractmethod
    def is_active(self) -> bool: ...

    @property
    @abstractmethod
    def is_default(self) -> bool: ...

    @abstractmethod
    def has_capability(self, capability: ResolutionCapability) -> bool: ...

    @abstractmethod
    def set_dpi(self, dpi: int) -> None:
        """Write a new dpi value to the device."""

    @abstractmethod
    def set_active(self) -> None:
        """Make this the profile's active resolution and write it."""


class Button(Handle):
    """A programmable button within a profile."""

    index: int

    @property
    @abstractmethod
    def type(self) -> ButtonType: ...

    @property
    @abstractmethod
    def action_type(self) -> ActionType: ...

    @property
    @abstractmethod
    def button(self) -> int:
        """Mapped button number, 0 unless action_type is BUTTON."""

    @property
    @abstractmethod
    def key(self) -> int:
        """Mapped key code, 0 unless action_type is KEY."""

    @property
    @abstractmethod
    def special(self) -> SpecialAction: ...

    @property
    @abstractmethod
    def macro(self) -> Optional[Macro]: ...

    @abstractmethod
    def set_button(self, button: int) -> None: ...

    @abstractmethod
    def set_key(self, key: int, modifiers: tuple[int, ...] = ()) -> None: ...

    @abstractmethod
    def set_special(self, special: SpecialAction) -> None: ...

    @abstractmethod
    def set_macro(self, macro: Macro) -> None: ...

    @abstractmethod
    def disable(self) -> None: ...


class Profile(Handle):
    """A configuration set stored on the device."""

    index: int

    @property
    @abstractmethod
    def is_active(self) -> bool: ...

    @property
    @abstractmethod
    def is_default(self) -> bool: ...

    @property
    @abstractmethod
    def num_resolutions(self) -> int: ...

    @abstractmethod
    def get_resolution(self, index: int) -> Optional[Resolution]:
        """Return resolution `index`, or None if it does not exist."""

    @abstractmethod
    def get_button(self, index: int) -> Optional[Button]:
        """Return button `index`, or None if it does not exist."""

    @abstractmethod
    def set_active(self) -> None:
        """Make this the active profile and commit pending changes."""

    def resolutions(self) -> Iterator[Resolution]:
        """Iterate resolutions in index order."""
        for i in range(self.num_resolutions):
            resolution = self.get_resolution(i)
            if resolution is not None:
                yield resolution


class Device(Handle):
    """An opened device."""

    path: str

    @property
    @abstractmethod
    def name(self) -> str: ...

    @property
    @abstractmethod
    def num_buttons(self) -> int: ...

    @property
    @abstractmethod
    def num_profiles(self) -> int: ...

    @abstractmethod
    def has_capability(self, capability: Capability) -> bool: ...

    @abstractmethod
    def get_profile(self, index: int) -> Optional[Profile]:
        """Return profile `index`, or None if it does not exist."""

    @abstractmethod
    def commit(self) -> None:
        """Write all pending changes to the device."""

    def profiles(self) -> Iterator[Profile]:
        """Iterate profiles in index order."""
        for i in range(self.num_profiles):
            profile = self.get_profile(i)
            if profile is not None:
                yield profile


class DeviceService(ABC):
    """Opens devices by path."""

    @abstractmethod
    def open_device(self, path: str) -> Optional[Device]:
        """Open `path`, returning None if it is not a supported device."""
