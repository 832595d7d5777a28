# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Recursive matching of command-line words against the command tree."""

import logging
import re
from typing import Optional

from ..context import Context
from ..errors import UsageError
from .base import CommandNode, CommandResult
from .resolver import resolve

logger = logging.getLogger(__name__)

_INDEX_RE = re.compile(r"[0-9]+")


def parse_index(token: str) -> Optional[int]:
    """Parse a resource index.

    The whole token must be a non-negative decimal number, so "7x" is not
    an index.
    """
    if _INDEX_RE.fullmatch(token):
        return int(token)
    return None


def dispatch(
    command: str, node: CommandNode, ctx: Context, args: list[str]
) -> CommandResult:
    """Run the child of `node` called `command`.

    `args` starts with the command word itself. The matched child's
    requirements are resolved first, then its handler is called with the
    command word and any consumed device path stripped.

    Raises:
        UsageError: if there are no arguments or no child matches
        DeviceError: if a required resource cannot be resolved
    """
    if not args:
        raise UsageError(f"Missing subcommand for '{node.name}'")

    child = node.find_child(command)
    if child is None:
        raise UsageError(f"Invalid subcommand '{command}'")

    remaining = resolve(ctx, child.requirements, args[1:])
    logger.debug(f"Running '{child.name}' with arguments {remaining}")
    return child.handler(child, ctx, remaining)


def dispatch_next(node: CommandNode, ctx: Context, args: list[str]) -> CommandResult:
    """Dispatch the first remaining word against the children of `node`."""
    if not args:
        raise UsageError(f"Missing subcommand for '{node.name}'")
    return dispatch(args[0], node, ctx, args)
