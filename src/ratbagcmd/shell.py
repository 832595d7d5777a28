# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Interactive prompt for running several commands against one device.

Provides syntax highlighting and tab completion driven by the command tree,
and the ShellCommandsMixin implementing the `shell` command.
"""

import logging
import shlex
import sys
from pathlib import Path
from typing import Iterator, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.auto_suggest import AutoSuggestFromHistory
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import FileHistory, InMemoryHistory
from prompt_toolkit.lexers import Lexer
from prompt_toolkit.styles import Style

from .commands.base import CommandNode, CommandResult
from .commands.dispatcher import parse_index
from .commands.help import iter_help_lines
from .const import HISTORY_FILE, SHELL_EXIT_WORDS, ExitCode
from .context import Context
from .errors import UsageError

logger = logging.getLogger(__name__)

SHELL_STYLE = Style.from_dict(
    {
        "command": "#00aa00 bold",  # Green for top-level commands
        "subcommand": "#0088ff",  # Blue for subcommands
        "number": "#aa00aa",  # Purple for indices and values
        "prompt": "#ffffff bold",
    }
)

HELP_WORDS = ("help", "?")


def walk_words(root: CommandNode, words: list[str]) -> tuple[CommandNode, int]:
    """Follow `words` down the tree as far as they match.

    Numeric words directly after a router are skipped as resource indices.

    Returns:
        (node, depth) - the deepest matched node and how many words matched
    """
    node = root
    depth = 0
    for word in words:
        child = node.find_child(word)
        if child is not None:
            node = child
            depth += 1
        elif node is not root and node.children and parse_index(word) is not None:
            depth += 1
        else:
            break
    return node, depth


class CommandLexer(Lexer):
    """Highlight the command path and numbers of an input line."""

    def __init__(self, root: CommandNode):
        self.root = root

    def lex_document(self, document):
        def get_line_tokens(line_number):
            line = document.lines[line_number]
            words = line.split()
            _, depth = walk_words(self.root, words)
            tokens = []
            pos = 0
            for i, word in enumerate(words):
                start = line.find(word, pos)
                if start > pos:
                    tokens.append(("", line[pos:start]))
                if parse_index(word) is not None:
                    tokens.append(("class:number", word))
                elif i == 0 and depth > 0:
                    tokens.append(("class:command", word))
                elif i < depth:
                    tokens.append(("class:subcommand", word))
                else:
                    tokens.append(("", word))
                pos = start + len(word)
            if pos < len(line):
                tokens.append(("", line[pos:]))
            return tokens

        return get_line_tokens


class CommandCompleter(Completer):
    """Tab completion for subcommands and choice arguments."""

    def __init__(self, root: CommandNode):
        self.root = root

    def _candidates(self, words: list[str]) -> list[tuple[str, str]]:
        node, depth = walk_words(self.root, words)
        if depth < len(words) and not node.arg_specs:
            return []

        if node.children:
            return [(child.name, child.help or "") for child in node.children]

        # Leaf: offer the choices of the argument being typed
        position = len(words) - depth
        if position < len(node.arg_specs):
            spec = node.arg_specs[position]
            return [(choice, spec.description) for choice in spec.choices or ()]
        return []

    def get_completions(self, document, complete_event):
        """Generate completions for the current input."""
        text = document.text_before_cursor
        words = text.split()

        if not text or text.endswith(" "):
            word_before = ""
            completed_words = words
        else:
            word_before = words[-1]
            completed_words = words[:-1]

        for name, meta in self._candidates(completed_words):
            if name.startswith(word_before):
                yield Completion(name, start_position=-len(word_before), display_meta=meta)


class InteractiveSession:
    """A prompt_toolkit session with history, completion and highlighting."""

    def __init__(
        self,
        root: CommandNode,
        history_file: Optional[str | Path] = None,
        prompt_text: str = "> ",
    ):
        """Initialize the interactive session.

        Args:
            root: Command tree used for completion and highlighting
            history_file: Path to history file, or None for in-memory history
            prompt_text: Prompt shown before each line
        """
        self.prompt_text = prompt_text
        history = InMemoryHistory() if history_file is None else FileHistory(str(history_file))
        self._session = PromptSession(
            history=history,
            completer=CommandCompleter(root),
            complete_while_typing=False,
            lexer=CommandLexer(root),
            style=SHELL_STYLE,
            auto_suggest=AutoSuggestFromHistory(),
            enable_history_search=True,
        )

    def input_loop(self) -> Iterator[str]:
        """Yield stripped, non-empty input lines until EOF or an exit word."""
        while True:
            try:
                line = self._session.prompt([("class:prompt", self.prompt_text)])
            except EOFError:
                break
            except KeyboardInterrupt:
                continue

            line = line.strip()
            if not line:
                continue
            if line.lower() in SHELL_EXIT_WORDS:
                break
            yield line


class ShellCommandsMixin:
    """Mixin providing the interactive shell command."""

    root: CommandNode
    _in_shell: bool = False
    history_file: Optional[Path] = HISTORY_FILE

    def run_line(self, ctx: Context, line: str) -> CommandResult:
        """Run one shell line against the device held by `ctx`."""
        try:
            argv = shlex.split(line)
        except ValueError as e:
            return CommandResult(f"Invalid input: {e}", ExitCode.USAGE)

        if not argv:
            return CommandResult()
        if argv[0].lower() in HELP_WORDS:
            return CommandResult("\n".join(iter_help_lines(self.root)))

        with ctx.derive() as line_ctx:
            return self.execute(line_ctx, argv)

    def shell(self, node: CommandNode, ctx: Context, args: list[str]) -> CommandResult:
        """Prompt for commands until EOF or exit."""
        if args:
            raise UsageError(f"Unexpected argument: {args[0]}")
        if self._in_shell:
            raise UsageError("Already in an interactive shell")

        session = InteractiveSession(
            self.root,
            history_file=self.history_file,
            prompt_text=f"{ctx.device.name}> ",
        )
        print(f"Connected to '{ctx.device.name}' at {ctx.device.path}")
        print("Type 'help' for commands, 'exit' to quit")

        self._in_shell = True
        try:
            for line in session.input_loop():
                result = self.run_line(ctx, line)
                if result.success:
                    if result.message:
                        print(result.message)
                else:
                    logger.debug(f"'{line}' failed with exit code {int(result.code)}")
                    print(f"Error: {result.message}", file=sys.stderr)
        finally:
            self._in_shell = False

        return CommandResult()
