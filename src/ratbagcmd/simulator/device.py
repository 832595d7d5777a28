# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""File-backed device service.

Each device is a JSON file describing its profiles, resolutions and
buttons. Mapping changes stay in memory until the profile is committed;
dpi and active resolution changes are written immediately, as a real
device applies them.
"""

import json
import logging
from pathlib import Path
from typing import Optional

from ..const import RAW
from ..device import (
    ActionType,
    Button,
    ButtonType,
    Capability,
    Device,
    DeviceService,
    Macro,
    Profile,
    Resolution,
    ResolutionCapability,
    SpecialAction,
)
from ..errors import DeviceError
from .state import ButtonState, DeviceState, ProfileState, ResolutionState

logger = logging.getLogger(__name__)


class SimulatedResolution(Resolution):
    """A resolution slot of a simulated profile."""

    def __init__(self, device: "SimulatedDevice", profile: ProfileState, index: int):
        self._device = device
        self._profile = profile
        self._state: ResolutionState = profile.resolutions[index]
        self.index = index

    @property
    def dpi(self) -> int:
        return self._state.dpi

    @property
    def dpi_x(self) -> int:
        return self._state.dpi

    @property
    def dpi_y(self) -> int:
        return self._state.dpi if self._state.dpi_y is None else self._state.dpi_y

    @property
    def report_rate(self) -> int:
        return self._state.rate

    @property
    def is_active(self) -> bool:
        return self._state.active

    @property
    def is_default(self) -> bool:
        return self._state.default

    def has_capability(self, capability: ResolutionCapability) -> bool:
        if capability == ResolutionCapability.SEPARATE_XY_RESOLUTION:
            return self._state.separate_xy
        return False

    def set_dpi(self, dpi: int) -> None:
        if dpi <= 0 or dpi > self._state.max_dpi:
            raise DeviceError(f"{dpi}dpi is out of range (1-{self._state.max_dpi})")
        self._state.dpi = dpi
        if self._state.separate_xy:
            self._state.dpi_y = dpi
        self._device.commit()

    def set_active(self) -> None:
        for res in self._profile.resolutions:
            res.active = res is self._state
        self._device.commit()


class SimulatedButton(Button):
    """A button of a simulated profile."""

    def __init__(self, state: ButtonState, index: int):
        self._state = state
        self.index = index

    @property
    def type(self) -> ButtonType:
        return self._state.type

    @property
    def action_type(self) -> ActionType:
        return self._state.action

    @property
    def button(self) -> int:
        return self._state.button if self._state.action == ActionType.BUTTON else 0

    @property
    def key(self) -> int:
        return self._state.key if self._state.action == ActionType.KEY else 0

    @property
    def special(self) -> SpecialAction:
        return self._state.special

    @property
    def macro(self) -> Optional[Macro]:
        return self._state.macro

    def set_button(self, button: int) -> None:
        if button <= 0:
            raise DeviceError(f"Invalid button number {button}")
        self._state.clear()
        self._state.action = ActionType.BUTTON
        self._state.button = button

    def set_key(self, key: int, modifiers: tuple[int, ...] = ()) -> None:
        if key <= 0:
            raise DeviceError(f"Invalid key code {key}")
        self._state.clear()
        self._state.action = ActionType.KEY
        self._state.key = key
        self._state.modifiers = list(modifiers)

    def set_special(self, special: SpecialAction) -> None:
        if special == SpecialAction.UNKNOWN:
            raise DeviceError("Invalid special action")
        self._state.clear()
        self._state.action = ActionType.SPECIAL
        self._state.special = special

    def set_macro(self, macro: Macro) -> None:
        if not macro.events:
            raise DeviceError(f"Macro '{macro.name}' has no events")
        self._state.clear()
        self._state.action = ActionType.MACRO
        self._state.macro = Macro(macro.name, list(macro.events))

    def disable(self) -> None:
        self._state.clear()


class SimulatedProfile(Profile):
    """A profile of a simulated device."""

    def __init__(self, device: "SimulatedDevice", index: int):
        self._device = device
        self._state: ProfileState = device.state.profiles[index]
        self.index = index

    @property
    def is_active(self) -> bool:
        return self._state.active

    @property
    def is_default(self) -> bool:
        return self._state.default

    @property
    def num_resolutions(self) -> int:
        return len(self._state.resolutions)

    def get_resolution(self, index: int) -> Optional[Resolution]:
        if not 0 <= index < len(self._state.resolutions):
            return None
        return SimulatedResolution(self._device, self._state, index)

    def get_button(self, index: int) -> Optional[Button]:
        if not 0 <= index < min(len(self._state.buttons), self._device.num_buttons):
            return None
        return SimulatedButton(self._state.buttons[index], index)

    def set_active(self) -> None:
        for profile in self._device.state.profiles:
            profile.active = profile is self._state
        self._device.commit()


class SimulatedDevice(Device):
    """A device whose state lives in a JSON file."""

    def __init__(self, path: str, state: DeviceState):
        self.path = path
        self.state = state

    @property
    def name(self) -> str:
        return self.state.name

    @property
    def num_buttons(self) -> int:
        return self.state.num_buttons

    @property
    def num_profiles(self) -> int:
        return len(self.state.profiles)

    def has_capability(self, capability: Capability) -> bool:
        return capability in self.state.capabilities

    def get_profile(self, index: int) -> Optional[Profile]:
        if not 0 <= index < len(self.state.profiles):
            return None
        return SimulatedProfile(self, index)

    def commit(self) -> None:
        """Write the device state back to its file.

        Raises:
            DeviceError: if the file cannot be written
        """
        payload = json.dumps(self.state.to_dict(), indent=2)
        logger.log(RAW, f"Writing {self.path}: {payload}")
        try:
            Path(self.path).write_text(payload + "\n")
        except OSError as e:
            raise DeviceError(f"Unable to write {self.path}: {e.strerror or e}") from e
        logger.debug(f"Committed '{self.name}' to {self.path}")

    def close(self) -> None:
        logger.debug(f"Closed device at {self.path}")


class FileDeviceService(DeviceService):
    """Opens JSON device description files."""

    def open_device(self, path: str) -> Optional[Device]:
        file = Path(path)
        # Character devices would block on read
        if not file.is_file():
            logger.debug(f"{path} is not a device description file")
            return None

        try:
            payload = file.read_bytes()
        except OSError as e:
            logger.debug(f"Unable to read {path}: {e}")
            return None
        logger.log(RAW, f"Read {path}: {payload.decode(errors='replace')}")

        # Undecodable bytes raise UnicodeDecodeError, a ValueError
        try:
            state = DeviceState.from_dict(json.loads(payload))
        except (ValueError, TypeError) as e:
            logger.debug(f"{path} does not describe a device: {e}")
            return None

        return SimulatedDevice(str(path), state)
