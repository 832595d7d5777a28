# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Simulated devices backed by JSON description files.

Lets every command run without hardware:

    ratbag-command info ./mouse.json
"""

from .device import (
    FileDeviceService,
    SimulatedButton,
    SimulatedDevice,
    SimulatedProfile,
    SimulatedResolution,
)
from .state import ButtonState, DeviceState, ProfileState, ResolutionState

__all__ = [
    "ButtonState",
    "DeviceState",
    "FileDeviceService",
    "ProfileState",
    "ResolutionState",
    "SimulatedButton",
    "SimulatedDevice",
    "SimulatedProfile",
    "SimulatedResolution",
]
