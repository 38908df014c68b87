"""Root ``swagts`` command.

The callback turns global flags into logging and output settings; the
sub-commands live in :mod:`swagts.commands` and are attached lazily by
:func:`register_commands`. :func:`main` is the console script and maps
escaping errors to exit codes.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any, NoReturn, Optional

import typer

from swagts import __version__
from swagts.config import get_data_dir
from swagts.exceptions import SwagtsError
from swagts.exit_codes import EXIT_GENERIC_FAILURE
from swagts.output import OutputFormat, OutputManager, error, set_output


app = typer.Typer(
    name="swagts",
    help="Resolve OpenAPI 3 documents into a typed model/method IR.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"swagts {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    """Route library log records to stderr at WARNING, or DEBUG with ``--verbose``."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Skip confirmations."
    ),
    output_file: Optional[str] = typer.Option(
        None, "-o", "--output", help="Output file path."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises logging and the global :class:`~swagts.output.OutputManager`
    from CLI flags, and stores ``--force`` in ``ctx.obj`` for
    ``config reset``.

    Args:
        ctx: Typer invocation context.
        version: If ``True``, print the version string and exit.
        json_output: Force JSON output format.
        plain_output: Force plain-text output format.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential diagnostic output.
        verbose: Enable debug-level diagnostic output and log records.
        force: Skip interactive confirmations.
        output_file: Redirect primary data output to a file path.
    """
    _configure_logging(verbose)

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(
        OutputManager(
            format=fmt,
            no_color=no_color,
            quiet=quiet,
            verbose=verbose,
            output_file=output_file,
        )
    )

    ctx.ensure_object(dict)
    ctx.obj["force"] = force


def register_commands() -> None:
    """Attach the built-in sub-commands to :data:`app`.

    Safe to call more than once; commands are only registered the first time.
    """
    if getattr(app, "_swagts_registered", False):
        return

    from swagts.commands.config import config_app
    from swagts.commands.convert import convert_command
    from swagts.commands.inspect import inspect_app

    app.command("convert")(convert_command)
    app.add_typer(inspect_app, name="inspect", help="Inspect resolved models and methods.")
    app.add_typer(config_app, name="config", help="Configuration management.")
    app._swagts_registered = True  # type: ignore[attr-defined]


def _cancelled(*_: Any) -> NoReturn:
    sys.stderr.write("\nCancelled.\n")
    sys.exit(130)


def _setup_signal_handlers() -> None:
    signal.signal(signal.SIGINT, _cancelled)


def _write_crash_log(exc: BaseException) -> Path:
    """Save the traceback, with version and command line, under ``<data>/logs``."""
    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / f"crash-{datetime.now():%Y%m%d-%H%M%S}.log"
    log_path.write_text(
        f"swagts {__version__}\n"
        f"argv: {' '.join(sys.argv)}\n\n"
        + "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
        encoding="utf-8",
    )
    return log_path


def main() -> None:
    """Entry point of the ``swagts`` console script.

    A :class:`~swagts.exceptions.SwagtsError` that escapes a command exits
    with its own code. Anything else is a bug: the traceback goes to a crash
    log and the process exits with :data:`~swagts.exit_codes.EXIT_GENERIC_FAILURE`.
    """
    _setup_signal_handlers()
    try:
        register_commands()
        app()
    except KeyboardInterrupt:
        _cancelled()
    except SwagtsError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception as exc:
        error(f"Unexpected error. Debug log: {_write_crash_log(exc)}")
        sys.exit(EXIT_GENERIC_FAILURE)
