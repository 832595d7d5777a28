# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Command tree, dispatch and command implementations.

The command handler is split into category-specific mixins:
- InfoCommandsMixin: Device information and discovery (info, list)
- ProfileCommandsMixin: Profile router and active profile get/set
- ResolutionCommandsMixin: Resolution router, active resolution and dpi
- ButtonCommandsMixin: Button router and remapping
- ShellCommandsMixin: Interactive shell
"""

from .base import (
    ArgSpec,
    CommandNode,
    CommandResult,
    parse_arg,
    parse_args,
)
from .dispatcher import dispatch, dispatch_next, parse_index
from .handler import CommandHandler, check_tree
from .help import format_usage, iter_help_lines
from .resolver import resolve

__all__ = [
    "ArgSpec",
    "CommandHandler",
    "CommandNode",
    "CommandResult",
    "check_tree",
    "dispatch",
    "dispatch_next",
    "format_usage",
    "iter_help_lines",
    "parse_arg",
    "parse_args",
    "parse_index",
    "resolve",
]
