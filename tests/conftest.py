# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Pytest configuration and fixtures for ratbag-command tests."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Optional

import pytest

from ratbagcmd.commands import CommandHandler, CommandResult
from ratbagcmd.context import Context
from ratbagcmd.device import Handle
from ratbagcmd.simulator import FileDeviceService


ALL_CAPABILITIES = (
    "switchable-resolution",
    "switchable-profile",
    "button-key",
    "button-macros",
)

BUTTON_TYPES = ("left", "right", "middle", "thumb", "thumb2", "wheel-up", "wheel-down", "extra")


# ============================================================================
# Device Descriptions
# ============================================================================

def build_device_data(
    name: str = "Test Mouse",
    capabilities: tuple[str, ...] = ALL_CAPABILITIES,
    num_profiles: int = 2,
    num_buttons: int = 4,
    active_profile: Optional[int] = 0,
    resolutions: tuple[int, ...] = (800, 1600, 3200),
    active_resolution: Optional[int] = 1,
) -> dict[str, Any]:
    """Build a simulated device document.

    Every profile gets the same resolutions and buttons; button b is mapped
    to mouse button b + 1.
    """
    profiles = []
    for p in range(num_profiles):
        profiles.append({
            "active": p == active_profile,
            "default": p == 0,
            "resolutions": [
                {"dpi": dpi, "rate": 1000, "active": r == active_resolution, "default": r == 0}
                for r, dpi in enumerate(resolutions)
            ],
            "buttons": [
                {
                    "type": BUTTON_TYPES[b % len(BUTTON_TYPES)],
                    "action": {"type": "button", "button": b + 1},
                }
                for b in range(num_buttons)
            ],
        })
    return {
        "name": name,
        "capabilities": list(capabilities),
        "num_buttons": num_buttons,
        "profiles": profiles,
    }


def load_device(path: str | Path) -> dict[str, Any]:
    """Read a simulated device document back from disk."""
    return json.loads(Path(path).read_text())


@pytest.fixture
def device_data() -> Callable[..., dict[str, Any]]:
    """Builder for device documents, for tests that tweak them before writing."""
    return build_device_data


@pytest.fixture
def read_device() -> Callable[[str | Path], dict[str, Any]]:
    return load_device


@pytest.fixture
def make_device(tmp_path) -> Callable[..., str]:
    """Factory writing a device file under tmp_path and returning its path."""

    def _make(filename: str = "mouse.json", data: Optional[dict] = None, **kwargs) -> str:
        path = tmp_path / filename
        path.write_text(json.dumps(data if data is not None else build_device_data(**kwargs)))
        return str(path)

    return _make


@pytest.fixture
def device_path(make_device) -> str:
    """Path of the default two-profile, four-button test device."""
    return make_device()


# ============================================================================
# Recording Context and Service
# ============================================================================

class RecordingContext(Context):
    """Context that records the order handles are acquired and released."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.events: list[tuple[str, str]] = []

    def _acquire(self, field: str, handle: Handle) -> None:
        self.events.append(("acquire", field))
        super()._acquire(field, handle)

    def _release(self, field: str, handle: Handle) -> None:
        self.events.append(("release", field))
        super()._release(field, handle)


class CountingService(FileDeviceService):
    """File device service that counts how often devices are opened."""

    def __init__(self):
        self.opened: list[str] = []

    def open_device(self, path: str):
        self.opened.append(path)
        return super().open_device(path)


@pytest.fixture
def service() -> CountingService:
    return CountingService()


@pytest.fixture
def ctx(service):
    """A recording context, closed after the test."""
    context = RecordingContext(service)
    yield context
    context.close()


@pytest.fixture
def handler() -> CommandHandler:
    """Command handler with in-memory shell history."""
    return CommandHandler(history_file=None)


@pytest.fixture
def run_command(handler, service) -> Callable[[str], CommandResult]:
    """Run one command line in a fresh context, as the CLI does."""

    def _run(line: str, **context_kwargs) -> CommandResult:
        with Context(service, **context_kwargs) as context:
            return handler.execute(context, line.split())

    return _run
