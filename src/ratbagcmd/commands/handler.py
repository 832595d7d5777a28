# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Command handler that combines all command mixins into one command tree."""

import logging
from pathlib import Path
from typing import Optional

from ..const import HISTORY_FILE, PROGRAM_NAME, ExitCode, Requirement
from ..context import Context
from ..errors import CommandError
from ..shell import ShellCommandsMixin
from .base import ArgSpec, CommandNode, CommandResult
from .buttons import ACTION_KINDS, ButtonCommandsMixin
from .dispatcher import dispatch, dispatch_next
from .info import InfoCommandsMixin
from .profile import ProfileCommandsMixin
from .resolution import ResolutionCommandsMixin

logger = logging.getLogger(__name__)

D = Requirement.DEVICE
DP = Requirement.DEVICE | Requirement.PROFILE
DPR = Requirement.DEVICE | Requirement.PROFILE | Requirement.RESOLUTION


def implied_requirements(requirements: Requirement) -> Requirement:
    """Expand a requirement set with the resources it depends on."""
    if requirements & Requirement.RESOLUTION:
        requirements |= Requirement.PROFILE
    if requirements & Requirement.PROFILE:
        requirements |= Requirement.DEVICE
    return requirements


def check_tree(node: CommandNode, inherited: Requirement = Requirement.NONE) -> None:
    """Verify requirements never shrink from a node to its children.

    Raises:
        ValueError: naming the first offending command
    """
    own = implied_requirements(node.requirements)
    if inherited & ~own:
        raise ValueError(
            f"Command '{node.name}' requires less than its parent ({own} < {inherited})"
        )
    for child in node.children:
        check_tree(child, own)


class CommandHandler(
    InfoCommandsMixin,
    ProfileCommandsMixin,
    ResolutionCommandsMixin,
    ButtonCommandsMixin,
    ShellCommandsMixin,
):
    """Owns the command tree and runs command lines against it.

    The tree is built once from this handler's bound methods and is
    read-only afterwards:

        handler = CommandHandler()
        with Context(service) as ctx:
            result = handler.execute(ctx, ["info", "/dev/input/event5"])
    """

    def __init__(self, program: str = PROGRAM_NAME, history_file: Optional[Path] = HISTORY_FILE):
        """Initialize the command handler.

        Args:
            program: Name of the root command, shown in usage lines
            history_file: Interactive shell history file, or None for in-memory history
        """
        self.program = program
        self.history_file = history_file
        self.root = self.build_tree()
        check_tree(self.root)

    def route(self, node: CommandNode, ctx: Context, args: list[str]) -> CommandResult:
        """Router that consumes nothing and dispatches to a child."""
        return dispatch_next(node, ctx, args)

    def build_tree(self) -> CommandNode:
        """Assemble the static command tree.

        Declaration order is the matching and help order. Nodes shared by
        several parents (resolution, button, dpi) are the same object.
        """
        profile_index = ArgSpec("N", "int", min_value=0, description="Profile index")
        resolution_index = ArgSpec("M", "int", min_value=0, description="Resolution index")
        action_kind = ArgSpec(
            "action", "choice", choices=ACTION_KINDS, description="Kind of mapping"
        )
        action_value = ArgSpec(
            "value", "string", description="Button number, KEY_* name, special action or macro"
        )

        dpi = CommandNode(
            "dpi",
            self.route,
            requirements=DPR,
            children=[
                CommandNode("get", self.dpi_get, help="Get the resolution in dpi", requirements=DPR),
                CommandNode(
                    "set",
                    self.dpi_set,
                    args="<dpi>",
                    help="Set the resolution in dpi",
                    requirements=DPR,
                    arg_specs=[ArgSpec("dpi", "int", min_value=1, description="Resolution in dpi")],
                ),
            ],
        )

        resolution = CommandNode(
            "resolution",
            self.resolution,
            args="N",
            requirements=DP,
            children=[
                CommandNode(
                    "active",
                    self.route,
                    requirements=DP,
                    children=[
                        CommandNode(
                            "get",
                            self.resolution_active_get,
                            help="Get the active resolution number",
                            requirements=DP,
                        ),
                        CommandNode(
                            "set",
                            self.resolution_active_set,
                            args="M",
                            help="Set the active resolution number",
                            requirements=DP,
                            arg_specs=[resolution_index],
                        ),
                    ],
                ),
                dpi,
            ],
        )

        button = CommandNode(
            "button",
            self.button,
            args="[N]",
            requirements=DP,
            children=[
                CommandNode(
                    "get", self.button_get, help="Show the button mapping", requirements=DP
                ),
                CommandNode(
                    "set",
                    self.button_set,
                    args="<button|key|special|macro> <value>",
                    help="Remap the button to the given action",
                    requirements=DP,
                    arg_specs=[action_kind, action_value],
                ),
                CommandNode(
                    "disable", self.button_disable, help="Disable the button", requirements=DP
                ),
            ],
        )

        profile = CommandNode(
            "profile",
            self.profile,
            args="<idx>",
            requirements=D,
            children=[
                CommandNode(
                    "active",
                    self.route,
                    requirements=D,
                    children=[
                        CommandNode(
                            "get",
                            self.profile_active_get,
                            help="Get the active profile number",
                            requirements=D,
                        ),
                        CommandNode(
                            "set",
                            self.profile_active_set,
                            args="N",
                            help="Set the active profile number",
                            requirements=D,
                            arg_specs=[profile_index],
                        ),
                    ],
                ),
                resolution,
                button,
            ],
        )

        return CommandNode(
            self.program,
            children=[
                CommandNode(
                    "info",
                    self.info,
                    help="Show information about the device's capabilities",
                    requirements=D,
                ),
                CommandNode("list", self.list_devices, help="List the available devices"),
                CommandNode(
                    "change-button",
                    self.change_button,
                    args="X <button|key|special|macro> "
                         "<number|KEY_FOO|special|macro name:KEY_FOO,KEY_BAR,...>",
                    help="Remap button X to the given action in the active profile",
                    requirements=DP,
                    arg_specs=[
                        ArgSpec("X", "int", min_value=0, description="Button index"),
                        action_kind,
                        action_value,
                    ],
                ),
                CommandNode(
                    "switch-etekcity",
                    self.switch_etekcity,
                    help="Switch the Etekcity mouse active profile",
                    requirements=DP,
                ),
                button,
                resolution,
                profile,
                dpi,
                CommandNode(
                    "shell",
                    self.shell,
                    help="Run commands interactively against the device",
                    requirements=D,
                ),
            ],
        )

    def execute(self, ctx: Context, argv: list[str]) -> CommandResult:
        """Dispatch a full command line and return the result.

        Command errors become a failed result carrying their exit code.
        Releasing resources is up to the owner of `ctx`.
        """
        if not argv:
            return CommandResult("Missing command", ExitCode.USAGE)

        try:
            return dispatch(argv[0], self.root, ctx, list(argv))
        except CommandError as e:
            logger.debug(f"'{argv[0]}' failed: {e.message}")
            return CommandResult(e.message, e.exit_code)
