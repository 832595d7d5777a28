# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Base infrastructure for command handling.

This module provides the command tree node type, the result type returned
by handlers, and the argument specifications used to validate leaf
arguments.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Optional

from ..const import ExitCode, Requirement
from ..errors import UsageError

if TYPE_CHECKING:
    from ..context import Context


@dataclass
class CommandResult:
    """Result of executing a command."""

    message: str = ""
    code: ExitCode = ExitCode.SUCCESS
    data: Optional[dict] = None

    @property
    def success(self) -> bool:
        return self.code == ExitCode.SUCCESS


@dataclass(frozen=True)
class ArgSpec:
    """Specification for a command argument.

    Attributes:
        name: Argument name for error messages and usage
        arg_type: Type of argument (string, int, choice)
        required: Whether the argument is required
        default: Default value when not provided
        choices: Valid choices for "choice" type
        description: Help text describing this argument
        min_value: Minimum value for int types
        max_value: Maximum value for int types
    """

    name: str
    arg_type: str  # "string", "int", "choice"
    required: bool = True
    default: Any = None
    choices: Optional[tuple[str, ...]] = None
    description: str = ""
    min_value: Optional[int] = None
    max_value: Optional[int] = None

    def generate_usage(self) -> str:
        """Generate usage string for this argument."""
        if self.arg_type == "choice" and self.choices:
            inner = "|".join(self.choices)
        else:
            inner = self.name

        if self.required:
            return f"<{inner}>"
        else:
            return f"[{inner}]"


def parse_arg(value: str, spec: ArgSpec) -> tuple[Any, Optional[str]]:
    """Parse and validate an argument value.

    Returns:
        (parsed_value, error_message) - error_message is None on success
    """
    if spec.arg_type == "string":
        return value, None

    elif spec.arg_type == "int":
        try:
            parsed = int(value)
        except ValueError:
            return None, f"'{value}' is not a valid integer"
        if spec.min_value is not None and parsed < spec.min_value:
            return None, f"'{value}' is below minimum ({spec.min_value})"
        if spec.max_value is not None and parsed > spec.max_value:
            return None, f"'{value}' is above maximum ({spec.max_value})"
        return parsed, None

    elif spec.arg_type == "choice":
        v = value.lower()
        for c in spec.choices or ():
            if c.lower() == v:
                return c, None
        choices_str = ", ".join(spec.choices) if spec.choices else "none"
        return None, f"'{value}' is not valid. Choose from: {choices_str}"

    else:
        return value, None


def parse_args(args: list[str], specs: tuple[ArgSpec, ...], cmd_path: str) -> list:
    """Parse positional arguments according to their specs.

    Raises:
        UsageError: on a missing, surplus or invalid argument
    """
    usage = " ".join(spec.generate_usage() for spec in specs)
    if len(args) > len(specs):
        raise UsageError(
            f"Unexpected argument: {args[len(specs)]}\nUsage: {cmd_path} {usage}".rstrip()
        )

    parsed = []
    for i, spec in enumerate(specs):
        if i < len(args):
            value, error = parse_arg(args[i], spec)
            if error:
                raise UsageError(f"{error}\nUsage: {cmd_path} {usage}")
            parsed.append(value)
        elif spec.required:
            raise UsageError(f"Missing required argument: {spec.name}\nUsage: {cmd_path} {usage}")
        else:
            parsed.append(spec.default)
    return parsed


Handler = Callable[["CommandNode", "Context", list[str]], CommandResult]


@dataclass(frozen=True)
class CommandNode:
    """One command in the command tree.

    Nodes are immutable. A node without children is a leaf and must have a
    handler. A node with children may have a handler that consumes leading
    arguments before dispatching to one of its children; nodes without help
    text are routers that are not listed on their own.

    Attributes:
        name: Command name, unique among siblings
        handler: Called as handler(node, context, args) when this node matches
        args: Usage placeholder for arguments this node consumes; generated
              from arg_specs when not given
        help: One-line description
        requirements: Resources resolved before the handler runs
        children: Subcommands in declaration order
        arg_specs: Positional arguments of a leaf
    """

    name: str
    handler: Optional[Handler] = None
    args: Optional[str] = None
    help: Optional[str] = None
    requirements: Requirement = Requirement.NONE
    children: tuple["CommandNode", ...] = ()
    arg_specs: tuple[ArgSpec, ...] = field(default=())

    def __post_init__(self):
        # Accept lists for convenience; store tuples so the tree stays read-only
        object.__setattr__(self, "children", tuple(self.children))
        object.__setattr__(self, "arg_specs", tuple(self.arg_specs))

        seen = set()
        for child in self.children:
            if child.name in seen:
                raise ValueError(f"Duplicate subcommand '{child.name}' in '{self.name}'")
            seen.add(child.name)

        if not self.children and self.handler is None:
            raise ValueError(f"Leaf command '{self.name}' has no handler")

        if self.args is None and self.arg_specs:
            usage = " ".join(spec.generate_usage() for spec in self.arg_specs)
            object.__setattr__(self, "args", usage)

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def find_child(self, name: str) -> Optional["CommandNode"]:
        """Return the first child called `name`, or None."""
        for child in self.children:
            if child.name == name:
                return child
        return None
