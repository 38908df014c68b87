"""Console output for swagts.

Resolved documents and tables are data: they go to stdout (or to the
``-o`` file) so an emitter or ``jq`` can read them from a pipe. Everything
else (progress notes, diagnostics about unresolved references, errors) goes
to stderr as one line per message.

Colour follows ``NO_COLOR``, ``TERM=dumb`` and ``--no-color``. ``AUTO``
format becomes ``RICH`` on an interactive terminal and ``PLAIN`` elsewhere.

:func:`~swagts.app.main_callback` installs one :class:`OutputManager`;
commands use the module-level helpers that delegate to it.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, NamedTuple, Optional

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text


class OutputFormat(str, Enum):
    """How documents and tables are rendered."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class _Level(NamedTuple):
    prefix: str
    prefix_style: str
    text_style: str
    quiet_hides: bool


_LEVELS: dict[str, _Level] = {
    "debug": _Level("[debug] ", "dim", "dim", False),
    "info": _Level("", "", "", True),
    "success": _Level("", "", "green", True),
    "warning": _Level("Warning: ", "yellow", "", False),
    "error": _Level("Error: ", "bold red", "", False),
}


class OutputManager:
    """Renders documents, tables and diagnostics for one CLI invocation.

    Args:
        format: Requested format. ``AUTO`` may later be narrowed by the
            user's configured default, see :meth:`use_default_format`.
        no_color: Disable colour and markup.
        quiet: Hide info and success lines.
        verbose: Show debug lines.
        output_file: Write data to this path instead of stdout.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
        output_file: Optional[str] = None,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose
        self._output_file = output_file
        self._explicit = format != OutputFormat.AUTO
        self._set_format(format)
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    def _set_format(self, format: OutputFormat) -> None:
        if format == OutputFormat.AUTO:
            interactive = _is_tty() and not self._no_color
            format = OutputFormat.RICH if interactive else OutputFormat.PLAIN
        self._format = format
        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=format == OutputFormat.RICH,
        )

    @property
    def format(self) -> OutputFormat:
        return self._format

    def use_default_format(self, configured: str) -> None:
        """Apply ``output.format`` from config unless ``--json``/``--plain`` was given.

        Unknown values are ignored and leave the detected format in place.
        """
        if self._explicit:
            return
        try:
            self._set_format(OutputFormat(configured))
        except ValueError:
            self.debug(f"Ignoring unknown output format {configured!r}")

    # ------------------------------------------------------------------ #
    # Data (stdout or -o file)
    # ------------------------------------------------------------------ #

    def print_json(self, data: Any) -> None:
        """Write *data* as indented JSON; highlighted only on a rich terminal."""
        text = json.dumps(data, indent=2, ensure_ascii=False, default=str)
        if self._format == OutputFormat.RICH and not self._output_file:
            self._stdout.print(Syntax(text, "json", theme="monokai", word_wrap=True))
        else:
            self._write(text)

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Write rows as records (JSON), TSV (plain) or a rich table."""
        if self._format == OutputFormat.JSON:
            self._write(json.dumps([dict(zip(headers, row)) for row in rows], indent=2))
            return
        if self._format == OutputFormat.PLAIN:
            self._write("\n".join("\t".join(line) for line in [headers, *rows]))
            return

        table = Table(title=title, show_header=True, header_style="bold cyan")
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*row)
        self._stdout.print(table)

    def _write(self, text: str) -> None:
        if not text.endswith("\n"):
            text += "\n"
        if self._output_file:
            with open(self._output_file, "w", encoding="utf-8") as f:
                f.write(text)
        else:
            sys.stdout.write(text)
            sys.stdout.flush()

    # ------------------------------------------------------------------ #
    # Messages (stderr)
    # ------------------------------------------------------------------ #

    def message(self, level: str, text: str) -> None:
        """Write one stderr line at *level* (``debug`` … ``error``)."""
        spec = _LEVELS[level]
        if level == "debug" and not self._verbose:
            return
        if self._quiet and spec.quiet_hides:
            return

        if self._no_color:
            print(f"{spec.prefix}{text}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(
                Text.assemble((spec.prefix, spec.prefix_style), (text, spec.text_style))
            )

    def info(self, text: str) -> None:
        self.message("info", text)

    def success(self, text: str) -> None:
        self.message("success", text)

    def warning(self, text: str) -> None:
        self.message("warning", text)

    def error(self, text: str) -> None:
        self.message("error", text)

    def debug(self, text: str) -> None:
        self.message("debug", text)


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set (any value) or ``TERM=dumb``."""
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


# ------------------------------------------------------------------ #
# Global instance
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed manager, creating a default one on first use."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the installed manager (tests swap stdout/stderr between runs)."""
    global _output
    _output = None


def print_json(data: Any) -> None:
    get_output().print_json(data)


def print_table(
    headers: list[str],
    rows: list[list[str]],
    title: Optional[str] = None,
) -> None:
    get_output().print_table(headers, rows, title)


def info(text: str) -> None:
    get_output().info(text)


def success(text: str) -> None:
    get_output().success(text)


def warning(text: str) -> None:
    get_output().warning(text)


def error(text: str) -> None:
    get_output().error(text)


def debug(text: str) -> None:
    get_output().debug(text)
