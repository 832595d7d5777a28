# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Per-invocation state threaded through command dispatch."""

import logging
from contextlib import ExitStack
from pathlib import Path
from typing import Optional

from .const import DEVICE_DIR, Verbosity
from .device import Device, DeviceService, Handle, Profile, Resolution

logger = logging.getLogger(__name__)


class Context:
    """Resources selected for one command line.

    Each handle is set at most once and is owned by the context from then
    on. close() releases owned handles in reverse acquisition order and is
    safe to call more than once. Use as a context manager so release also
    happens on error paths:

        with Context(service) as ctx:
            dispatcher.dispatch(argv[0], root, ctx, argv)
    """

    def __init__(
        self,
        service: DeviceService,
        verbosity: Verbosity = Verbosity.NORMAL,
        device_dir: Path | str = DEVICE_DIR,
    ):
        self.service = service
        self.verbosity = verbosity
        self.device_dir = Path(device_dir)
        self.device: Optional[Device] = None
        self.profile: Optional[Profile] = None
        self.resolution: Optional[Resolution] = None
        self.button_index: Optional[int] = None
        self._releases = ExitStack()

    def __enter__(self) -> "Context":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def set_device(self, device: Device) -> None:
        self._acquire("device", device)

    def set_profile(self, profile: Profile) -> None:
        self._acquire("profile", profile)

    def set_resolution(self, resolution: Resolution) -> None:
        self._acquire("resolution", resolution)

    def derive(self) -> "Context":
        """Create a fresh context that borrows this context's device.

        The derived context never releases the device; it owns only the
        profile and resolution it selects itself.
        """
        child = Context(self.service, self.verbosity, self.device_dir)
        child.device = self.device
        return child

    def close(self) -> None:
        """Release every owned handle, newest first."""
        self._releases.close()

    def _acquire(self, field: str, handle: Handle) -> None:
        if getattr(self, field) is not None:
            raise RuntimeError(f"Context {field} is already set")
        setattr(self, field, handle)
        self._releases.callback(self._release, field, handle)

    def _release(self, field: str, handle: Handle) -> None:
        logger.debug(f"Releasing {field}")
        setattr(self, field, None)
        handle.close()
