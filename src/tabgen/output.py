"""Terminal output for tabgen.

Two kinds of text leave the process:

* **Data on stdout** -- generated scripts and setup snippets (written byte for
  byte so they can be redirected into a file or ``eval``-ed), the ``inspect``
  listing, and the ``--json`` summaries.
* **Diagnostics on stderr** -- progress, skipped-command warnings, errors and
  next-step hints. A script printed by ``tabgen show`` never contains them.

Rich styling is used only when stdout is a terminal and colour is not
disabled by ``--no-color``, ``NO_COLOR`` or ``TERM=dumb``. Diagnostics are
rendered as :class:`rich.text.Text`, so command ids and help text containing
square brackets are never read as Rich markup.

:func:`~tabgen.app.main_callback` installs one :class:`OutputManager` per
invocation; the rest of the code reaches it through the module-level
functions.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, NamedTuple, Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text


class OutputFormat(str, Enum):
    """How stdout data is rendered. ``AUTO`` picks ``RICH`` on a colour TTY."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class _Style(NamedTuple):
    prefix: str
    style: Optional[str]
    quiet_hides: bool


_DIAGNOSTICS: dict[str, _Style] = {
    "info": _Style("", None, True),
    "success": _Style("", "green", True),
    "suggest": _Style("→ ", "dim", True),
    "warning": _Style("Warning: ", "yellow", False),
    "error": _Style("Error: ", "bold red", False),
    "debug": _Style("[debug] ", "dim", False),
}


class OutputManager:
    """Routes scripts, listings and diagnostics to the right stream.

    Args:
        format: Rendering of stdout data; ``AUTO`` is resolved at
            construction time.
        no_color: Never style anything.
        quiet: Hide info, success and suggestion lines.
        verbose: Show debug lines.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._plain_text = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose
        if format == OutputFormat.AUTO:
            format = OutputFormat.RICH if _is_tty() and not self._plain_text else OutputFormat.PLAIN
        self._format = format

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def wants_json(self) -> bool:
        return self._format == OutputFormat.JSON

    # -- stdout --------------------------------------------------------- #

    def print_script(self, text: str) -> None:
        """Write *text* unchanged, ending in exactly one newline."""
        sys.stdout.write(text.rstrip("\n") + "\n")
        sys.stdout.flush()

    def print_json(self, data: Any) -> None:  # noqa: ANN401
        self.print_script(json.dumps(data, indent=2, ensure_ascii=False))

    def print_rows(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Render a listing: objects keyed by header in JSON, TSV in plain
        mode, a :class:`~rich.table.Table` otherwise (the only place *title*
        appears).
        """
        if self._format == OutputFormat.JSON:
            self.print_json([dict(zip(headers, row)) for row in rows])
            return
        if self._format == OutputFormat.PLAIN:
            self.print_script("\n".join("\t".join(line) for line in [headers, *rows]))
            return

        table = Table(title=title, header_style="bold cyan")
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*(Text(cell) for cell in row))
        Console(file=sys.stdout, force_terminal=True, no_color=self._plain_text).print(table)

    # -- stderr --------------------------------------------------------- #

    def _emit(self, kind: str, message: str) -> None:
        style = _DIAGNOSTICS[kind]
        if style.quiet_hides and self._quiet:
            return
        if kind == "debug" and not self._verbose:
            return
        line = style.prefix + message
        if self._plain_text or style.style is None:
            print(line, file=sys.stderr, flush=True)
        else:
            Console(file=sys.stderr).print(Text(line, style=style.style))

    def info(self, message: str) -> None:
        self._emit("info", message)

    def success(self, message: str) -> None:
        self._emit("success", message)

    def suggest(self, message: str) -> None:
        self._emit("suggest", message)

    def warning(self, message: str) -> None:
        self._emit("warning", message)

    def error(self, message: str) -> None:
        self._emit("error", message)

    def debug(self, message: str) -> None:
        self._emit("debug", message)


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """``NO_COLOR`` (any value, even empty) or ``TERM=dumb``."""
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


# -- process-wide instance --------------------------------------------- #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager; the next call builds a default one."""
    global _output
    _output = None


def print_script(text: str) -> None:
    get_output().print_script(text)


def print_json(data: Any) -> None:  # noqa: ANN401
    get_output().print_json(data)


def print_rows(headers: list[str], rows: list[list[str]], title: Optional[str] = None) -> None:
    get_output().print_rows(headers, rows, title)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def suggest(message: str) -> None:
    get_output().suggest(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)
