"""Inspect commands -- tabular views of a resolved document.

Provides the ``swagts inspect`` sub-command group with read-only commands
for checking what the resolver made of a document before handing it to an
emitter: the resolved models, the resolved methods, and the diagnostics
report (unresolved references and skipped operations).
"""

from __future__ import annotations

from typing import Optional

import typer

from swagts.commands.convert import resolve_spec
from swagts.models import Model
from swagts.output import info, print_table, success


inspect_app = typer.Typer(no_args_is_help=True)

_SPEC_ARGUMENT = typer.Argument(help="OpenAPI document file path (use '-' for stdin).")
_IGNORE_OPTION = typer.Option(
    None,
    "--ignore-segment",
    "-i",
    help="Path segment to drop from method names (repeatable).",
)


def _model_label(model: Optional[Model], is_array: bool = False) -> str:
    if model is None:
        return "-"
    return f"{model.name}[]" if is_array else model.name


@inspect_app.command("models")
def inspect_models(
    spec: str = _SPEC_ARGUMENT,
    ignore_segment: Optional[list[str]] = _IGNORE_OPTION,
) -> None:
    """List resolved models.

    Shows each model's derived name, original key, kind and up to five
    property names (or enum values).

    Example::

        swagts inspect models openapi.json
    """
    document, _, _ = resolve_spec(spec, ignore_segment)

    if not document.models:
        info("No schemas defined in this document.")
        return

    headers = ["Model", "Schema", "Kind", "Members"]
    rows: list[list[str]] = []
    for model in document.models:
        if model.enum_values is not None:
            members = list(model.enum_values)
        elif model.properties is not None:
            members = [prop.name for prop in model.properties]
        elif model.array_item_model is not None:
            members = [f"{model.array_item_model.name}[]"]
        else:
            members = []
        label = ", ".join(members[:5])
        if len(members) > 5:
            label += "..."
        rows.append([model.name, model.original_name, model.kind.value, label or "-"])

    title = document.title or "Document"
    print_table(headers, rows, title=f"{title} -- Models ({len(rows)})")


@inspect_app.command("methods")
def inspect_methods(
    spec: str = _SPEC_ARGUMENT,
    ignore_segment: Optional[list[str]] = _IGNORE_OPTION,
) -> None:
    """List resolved methods.

    Shows each method's HTTP verb, path, derived name, body model, success
    model and error statuses.

    Example::

        swagts inspect methods openapi.json -i api
    """
    document, _, _ = resolve_spec(spec, ignore_segment)

    if not document.methods:
        info("No operations defined in this document.")
        return

    headers = ["Method", "Path", "Name", "Body", "Success", "Errors"]
    rows: list[list[str]] = []
    for method in document.methods:
        success_response = method.success_response
        rows.append([
            method.http_method.value.upper(),
            method.path,
            method.name,
            _model_label(method.body.model),
            "-" if success_response is None else (
                f"{success_response.status} "
                f"{_model_label(success_response.model, success_response.is_array)}"
            ),
            ", ".join(r.status for r in method.error_responses) or "-",
        ])

    title = document.title or "Document"
    print_table(headers, rows, title=f"{title} -- Methods ({len(rows)})")


@inspect_app.command("diagnostics")
def inspect_diagnostics(
    spec: str = _SPEC_ARGUMENT,
    ignore_segment: Optional[list[str]] = _IGNORE_OPTION,
) -> None:
    """List unresolved references and skipped operations.

    Exits with code 1 when anything was reported, so the command can gate
    a CI step.

    Example::

        swagts inspect diagnostics openapi.json
    """
    _, diagnostics, _ = resolve_spec(spec, ignore_segment)

    if diagnostics.is_clean:
        success("All references resolved; no operations skipped.")
        return

    headers = ["Problem", "Where", "Detail"]
    rows: list[list[str]] = []
    for ref in diagnostics.unresolved:
        rows.append(["unresolved", ref.context, ref.pointer])
    for op in diagnostics.operation_errors:
        where = f"{op.method.upper()} {op.path}" if op.method else op.path
        rows.append(["skipped", where, op.message])

    print_table(headers, rows, title=f"Diagnostics ({len(rows)})")
    raise typer.Exit(code=1)
