# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Usage text generated from the command tree."""

from typing import Iterator

from ..const import HELP_FILLER, HELP_INDENT, HELP_MIN_FILL, HELP_WIDTH, PROGRAM_NAME
from .base import CommandNode


def _with_args(name: str, args: str | None) -> str:
    return f"{name} {args}" if args else name


def iter_help_lines(node: CommandNode, prefix: str = "") -> Iterator[str]:
    """Yield one usage line per described command below `node`.

    Walks depth-first in declaration order. Every line carries the full
    command path, so subcommands of routers without help still show where
    they live.
    """
    node_prefix = f"{prefix}{_with_args(node.name, node.args)} "
    for child in node.children:
        if child.help:
            entry = node_prefix + _with_args(child.name, child.args)
            fill = max(HELP_WIDTH - len(entry), HELP_MIN_FILL)
            yield f"{HELP_INDENT}{entry} {HELP_FILLER * fill} {child.help}"
        yield from iter_help_lines(child, node_prefix)


def format_usage(root: CommandNode, program: str = PROGRAM_NAME) -> str:
    """Full program usage including the recursive command listing."""
    lines = [
        f"Usage: {program} [options] [command] /dev/input/eventX",
        "/path/to/device ..... Open the given device only",
        "",
        "Commands:",
    ]
    lines.extend(iter_help_lines(root))
    lines.extend(
        [
            "",
            "Options:",
            "    --verbose[=raw] ....... Print debugging output, with protocol output if requested.",
            "    --history FILE ........ Shell history file, or 'none' to disable.",
            "    --help .......... Print this help.",
        ]
    )
    return "\n".join(lines)
