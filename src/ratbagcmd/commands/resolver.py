# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Lazy resolution of the device, profile and resolution a command needs."""

import logging
from contextlib import closing

from ..const import ANY_RESOURCE, Requirement
from ..context import Context
from ..device import Device, Profile, Resolution
from ..errors import DeviceError

logger = logging.getLogger(__name__)


def get_active_profile(device: Device) -> Profile:
    """Return the device's active profile.

    Raises:
        DeviceError: if no profile is flagged active
    """
    for profile in device.profiles():
        if profile.is_active:
            return profile
        profile.close()
    raise DeviceError("Failed to retrieve the active profile")


def get_active_resolution(profile: Profile) -> Resolution:
    """Return the profile's active resolution.

    Raises:
        DeviceError: if no resolution is flagged active
    """
    for resolution in profile.resolutions():
        if resolution.is_active:
            return resolution
        resolution.close()
    raise DeviceError("Failed to retrieve the active resolution")


def open_device_from_args(ctx: Context, args: list[str]) -> tuple[Device, list[str]]:
    """Open the device named by the last argument.

    Returns:
        (device, remaining_args) with the path removed from the arguments
    """
    if not args:
        raise DeviceError("Missing device path")
    path = args[-1]
    device = ctx.service.open_device(path)
    if device is None:
        raise DeviceError(f"Device '{path}' is not supported")
    return device, args[:-1]


def resolve(ctx: Context, requirements: Requirement, args: list[str]) -> list[str]:
    """Fill in the context fields `requirements` asks for.

    Runs device, profile, resolution in that order, skipping anything the
    context already holds. At most one argument (the trailing device path)
    is consumed.

    Returns:
        The arguments left after the device path was taken

    Raises:
        DeviceError: if a stage fails; later stages are not attempted
    """
    if requirements & ANY_RESOURCE and ctx.device is None:
        device, args = open_device_from_args(ctx, args)
        logger.debug(f"Opened device '{device.name}' at {device.path}")
        ctx.set_device(device)

    if requirements & (Requirement.PROFILE | Requirement.RESOLUTION) and ctx.profile is None:
        profile = get_active_profile(ctx.device)
        logger.debug(f"Selected active profile {profile.index}")
        ctx.set_profile(profile)

    if requirements & Requirement.RESOLUTION and ctx.resolution is None:
        resolution = get_active_resolution(ctx.profile)
        logger.debug(f"Selected active resolution {resolution.index}")
        ctx.set_resolution(resolution)

    return args


def find_active_index(handles) -> int | None:
    """Return the index of the first active handle, closing every handle."""
    active = None
    for handle in handles:
        with closing(handle):
            if active is None and handle.is_active:
                active = handle.index
    return active
