# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Constants shared across the ratbag command tool."""

import enum
from pathlib import Path


class ExitCode(enum.IntEnum):
    """Process exit codes."""

    SUCCESS = 0
    UNSUPPORTED = 1  # device lacks the function, or an index exceeds the device
    USAGE = 2  # invalid command line
    DEVICE = 3  # invalid/missing device or the command failed


class Requirement(enum.Flag):
    """Resources a command needs resolved before its handler runs."""

    NONE = 0
    DEVICE = enum.auto()
    PROFILE = enum.auto()
    RESOLUTION = enum.auto()


ANY_RESOURCE = Requirement.DEVICE | Requirement.PROFILE | Requirement.RESOLUTION


class Verbosity(enum.Enum):
    """Diagnostic output level selected by --verbose."""

    NORMAL = "normal"
    VERBOSE = "verbose"
    VERBOSE_RAW = "raw"


# Log level for raw protocol payloads, below DEBUG
RAW = 5

PROGRAM_NAME = "ratbag-command"

# Help layout
HELP_WIDTH = 40
HELP_MIN_FILL = 4
HELP_FILLER = "."
HELP_INDENT = "    "

# Device discovery
DEVICE_DIR = Path("/dev/input")
DEVICE_NODE_PREFIX = "event"

# Interactive shell
HISTORY_FILE = Path.home() / ".ratbag_command_history"
SHELL_EXIT_WORDS = ("exit", "quit", "q")

# Simulated device file fields
FIELD_NAME = "name"
FIELD_CAPABILITIES = "capabilities"
FIELD_NUM_BUTTONS = "num_buttons"
FIELD_PROFILES = "profiles"
FIELD_ACTIVE = "active"
FIELD_DEFAULT = "default"
FIELD_RESOLUTIONS = "resolutions"
FIELD_BUTTONS = "buttons"
FIELD_DPI = "dpi"
FIELD_DPI_Y = "dpi_y"
FIELD_RATE = "rate"
FIELD_SEPARATE_XY = "separate_xy"
FIELD_MAX_DPI = "max_dpi"
FIELD_TYPE = "type"
FIELD_ACTION = "action"
FIELD_BUTTON = "button"
FIELD_KEY = "key"
FIELD_MODIFIERS = "modifiers"
FIELD_SPECIAL = "special"
FIELD_EVENTS = "events"
