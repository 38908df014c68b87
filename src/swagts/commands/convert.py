"""Convert command -- resolve an OpenAPI document into the model/method IR.

Implements the ``swagts convert`` top-level command: load a document from a
file or stdin, resolve it with the effective configuration (see
:func:`~swagts.config.resolve_config`), and print the resulting
:class:`~swagts.models.Document` as JSON. Unresolved references and
skipped operations are reported on stderr.
"""

from __future__ import annotations

import re
from typing import Optional

import typer

from swagts.exceptions import InvalidUsageError, SwagtsError
from swagts.models import Diagnostics, Document, GlobalConfig
from swagts.output import debug, error, get_output, print_json, warning

_SEGMENT = re.compile(r"[A-Za-z0-9]+")


def _check_segments(segments: Optional[list[str]]) -> None:
    """Reject segments that can never equal a split path segment."""
    for segment in segments or []:
        if not _SEGMENT.fullmatch(segment):
            raise InvalidUsageError(
                f"Invalid --ignore-segment '{segment}': path segments are "
                "matched after splitting on non-alphanumeric characters"
            )


def resolve_spec(
    spec: str, ignore_segment: Optional[list[str]] = None
) -> tuple[Document, Diagnostics, GlobalConfig]:
    """Load *spec* and resolve it into a document.

    Shared by ``convert`` and the ``inspect`` commands.

    Args:
        spec: File path, or ``-`` for stdin.
        ignore_segment: CLI override for ignored path segments. ``None``
            (or an empty list) defers to env/project/user config.

    Returns:
        A ``(Document, Diagnostics, GlobalConfig)`` tuple.

    Raises:
        typer.Exit: With the error's exit code when an ignored segment is
            unusable, the config is invalid, or the document cannot be
            loaded or resolved.
    """
    from swagts.config import resolve_config
    from swagts.parser import load_spec
    from swagts.resolver import build_document

    try:
        _check_segments(ignore_segment)
        config = resolve_config(cli_ignored_segments=ignore_segment or None)
        get_output().use_default_format(config.output.format)
        debug(f"Ignored path segments: {config.naming.ignored_segments}")
        raw = load_spec(spec)
        diagnostics = Diagnostics()
        document = build_document(raw, config.naming.ignored_segments, diagnostics)
    except SwagtsError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    return document, diagnostics, config


def report_diagnostics(diagnostics: Diagnostics) -> None:
    """Print one stderr warning per diagnostics entry."""
    for ref in diagnostics.unresolved:
        warning(f"Unresolved reference {ref.pointer} at {ref.context}")
    for op in diagnostics.operation_errors:
        where = f"{op.method.upper()} {op.path}" if op.method else op.path
        warning(f"Skipped {where}: {op.message}")


def convert_command(
    spec: str = typer.Argument(
        help="OpenAPI document file path (use '-' for stdin)."
    ),
    ignore_segment: Optional[list[str]] = typer.Option(
        None,
        "--ignore-segment",
        "-i",
        help="Path segment to drop from method names (repeatable).",
    ),
    with_diagnostics: bool = typer.Option(
        False,
        "--with-diagnostics",
        help="Wrap output as {document, diagnostics}.",
    ),
) -> None:
    """Resolve an OpenAPI document and print the IR as JSON.

    Example::

        swagts convert openapi.json
        swagts convert openapi.yaml -i api -i v1 -o ir.json
        cat openapi.json | swagts convert - --with-diagnostics
    """
    document, diagnostics, config = resolve_spec(spec, ignore_segment)
    by_alias = config.output.by_alias

    report_diagnostics(diagnostics)

    data = document.model_dump(mode="json", by_alias=by_alias)
    if with_diagnostics:
        data = {
            "document": data,
            "diagnostics": diagnostics.model_dump(mode="json", by_alias=by_alias),
        }
    print_json(data)
