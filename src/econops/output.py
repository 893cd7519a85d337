"""Terminal output for the econops CLI.

API results are data and go to stdout; everything else (status lines,
warnings, errors, debug traces and the interactive prompt) goes to stderr,
so ``econops call ... | jq`` always sees clean JSON.

Results are syntax-highlighted when stdout is a terminal and colour is
allowed. Colour is off when ``--no-color`` is passed, ``NO_COLOR`` is set
or ``TERM=dumb``.

:class:`OutputManager` holds the settings for one CLI invocation. The root
callback in :mod:`econops.app` installs it with :func:`set_output`; library
code such as :class:`~econops.client.Client` reaches it through
:func:`get_output` or the module-level shortcuts.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, NamedTuple, Optional

from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax


class OutputFormat(str, Enum):
    """How API results are rendered on stdout."""

    AUTO = "auto"
    JSON = "json"
    RICH = "rich"


class _Style(NamedTuple):
    prefix: str
    color: str
    quiet_hides: bool


_STYLES = {
    "info": _Style("", "", True),
    "success": _Style("", "green", True),
    "warning": _Style("Warning: ", "yellow", False),
    "error": _Style("Error: ", "bold red", False),
    "debug": _Style("[debug] ", "dim", False),
}


class OutputManager:
    """Output settings and consoles for one CLI invocation.

    Args:
        format: Result format. ``AUTO`` picks ``RICH`` on a colour-capable
            terminal and ``JSON`` otherwise.
        no_color: Never emit ANSI colour or markup.
        quiet: Hide info and success messages.
        verbose: Show debug messages.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose
        self._format = self._resolve_format(format)

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=self._format == OutputFormat.RICH,
        )
        self._stderr = Console(file=sys.stderr, stderr=True, no_color=self._no_color)

    def _resolve_format(self, requested: OutputFormat) -> OutputFormat:
        if requested != OutputFormat.AUTO:
            return requested
        if _is_tty() and not self._no_color:
            return OutputFormat.RICH
        return OutputFormat.JSON

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def is_quiet(self) -> bool:
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        return self._verbose

    # ------------------------------------------------------------------ #
    # stdout
    # ------------------------------------------------------------------ #

    def format_response(self, data: Any) -> None:
        """Print an API result as indented JSON.

        A string that parses as JSON is re-indented; any other string is
        printed as-is.
        """
        if isinstance(data, str):
            try:
                data = json.loads(data)
            except json.JSONDecodeError:
                self.print_data(data)
                return

        text = json.dumps(data, indent=2, ensure_ascii=False, default=str)
        if self._format == OutputFormat.RICH:
            self._stdout.print(Syntax(text, "json", theme="monokai", word_wrap=True))
        else:
            self.print_data(text)

    def print_data(self, text: str) -> None:
        print(text, file=sys.stdout, flush=True)

    # ------------------------------------------------------------------ #
    # stderr
    # ------------------------------------------------------------------ #

    def _emit(self, kind: str, message: str) -> None:
        prefix, color, quiet_hides = _STYLES[kind]
        if quiet_hides and self._quiet:
            return
        if self._no_color:
            print(f"{prefix}{message}", file=sys.stderr, flush=True)
            return

        text = escape(message)
        if not color:
            self._stderr.print(text)
        elif kind in ("warning", "error"):
            self._stderr.print(f"[{color}]{prefix.strip()}[/{color}] {text}")
        else:
            self._stderr.print(f"[{color}]{escape(prefix)}{text}[/{color}]")

    def info(self, message: str) -> None:
        self._emit("info", message)

    def success(self, message: str) -> None:
        self._emit("success", message)

    def warning(self, message: str) -> None:
        """Warnings are shown even with ``--quiet``."""
        self._emit("warning", message)

    def error(self, message: str) -> None:
        """Errors are always shown."""
        self._emit("error", message)

    def debug(self, message: str) -> None:
        """Debug lines appear only with ``--verbose``."""
        if self._verbose:
            self._emit("debug", message)

    def prompt(self, text: str) -> None:
        """Write an input prompt to stderr without a trailing newline."""
        sys.stderr.write(text)
        sys.stderr.flush()


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set to anything or ``TERM`` is ``dumb``."""
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


# ------------------------------------------------------------------ #
# Process-wide instance
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager so the next call builds a fresh one."""
    global _output
    _output = None


def format_response(data: Any) -> None:
    get_output().format_response(data)


def print_data(text: str) -> None:
    get_output().print_data(text)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)
