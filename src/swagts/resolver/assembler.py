"""Assemble a :class:`~swagts.models.Document` from a raw OpenAPI document.

This is the only entry point the collaborator layer (CLI, HTTP wrapper,
emitter) needs. Resolution runs strictly in order:

1. :func:`~swagts.parser.document.parse_document` validates the
   document-level structure.
2. :func:`~swagts.resolver.schemas.resolve_models` resolves every entry of
   ``components.schemas`` in key order.
3. :func:`~swagts.resolver.methods.resolve_methods` resolves every operation
   against that finished model list.

Two surfaces are offered:

* :func:`assemble` returns the document, or ``None`` when the
  document-level structure is unusable (missing schema dictionary, malformed
  ``paths``). The failure is logged, not raised, so that callers can tell
  "malformed input" (``None``) from "valid but empty" (a document with no
  models or methods).
* :func:`convert` takes the wrapper envelope ``{"json": <document>}`` and
  always returns a :data:`~swagts.models.ConversionResult` -- either a
  success carrying the document and diagnostics, or a failure carrying a
  typed :class:`~swagts.models.ConversionError`.

Each call is independent: no state is shared between conversions.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any, Optional

from swagts.exceptions import MissingSchemaDictionaryError, SpecParseError
from swagts.models import (
    ConversionError,
    ConversionErrorKind,
    ConversionFailure,
    ConversionResult,
    ConversionSuccess,
    Diagnostics,
    Document,
)
from swagts.parser.document import parse_document
from swagts.resolver.methods import resolve_methods
from swagts.resolver.naming import DEFAULT_IGNORED_SEGMENTS
from swagts.resolver.schemas import resolve_models

logger = logging.getLogger(__name__)


def build_document(
    raw: Any,
    ignored_segments: Iterable[str] = DEFAULT_IGNORED_SEGMENTS,
    diagnostics: Optional[Diagnostics] = None,
) -> Document:
    """Resolve *raw* into a :class:`~swagts.models.Document`, raising on failure.

    Args:
        raw: The parsed OpenAPI document.
        ignored_segments: Path segments dropped from method names.
        diagnostics: Collector for unresolved references and skipped
            operations.

    Raises:
        MissingSchemaDictionaryError: If ``components.schemas`` is absent or
            not an object.
        SpecParseError: If the document-level structure is otherwise
            malformed.
    """
    if diagnostics is None:
        diagnostics = Diagnostics()

    document = parse_document(raw)
    models = resolve_models(document, diagnostics)
    methods = resolve_methods(document, models, ignored_segments, diagnostics)

    logger.debug(
        "Resolved %d models and %d methods from '%s'",
        len(models),
        len(methods),
        document.title or "untitled document",
    )
    return Document(title=document.title, methods=methods, models=models)


def assemble(
    raw: Any,
    ignored_segments: Iterable[str] = DEFAULT_IGNORED_SEGMENTS,
    diagnostics: Optional[Diagnostics] = None,
) -> Optional[Document]:
    """Resolve *raw* into a document, or ``None`` if it is structurally unusable.

    Example::

        doc = assemble(load_spec("openapi.json"))
        if doc is None:
            ...  # malformed input, already logged
    """
    try:
        return build_document(raw, ignored_segments, diagnostics)
    except SpecParseError as exc:
        logger.error("Cannot assemble document: %s", exc)
        return None


def convert(
    payload: Any,
    ignored_segments: Iterable[str] = DEFAULT_IGNORED_SEGMENTS,
) -> ConversionResult:
    """Convert a wrapper request body ``{"json": <document>}`` into a result.

    An absent, null, blank or zero ``json`` field is ``missing_input``;
    ``{}`` and ``[]`` are input. A document without a schema dictionary is
    ``missing_schema_dictionary`` and any other document-level problem is
    ``malformed_document``.

    Example::

        result = convert({"json": raw})
        if result.status == "ok":
            emit(result.document)
        else:
            reply(400, result.error.model_dump())
    """
    diagnostics = Diagnostics()

    raw = payload.get("json") if isinstance(payload, dict) else None
    if _is_missing(raw):
        return ConversionFailure(
            error=ConversionError(
                kind=ConversionErrorKind.MISSING_INPUT,
                message="Request body has no 'json' document",
            ),
            diagnostics=diagnostics,
        )

    try:
        document = build_document(raw, ignored_segments, diagnostics)
    except MissingSchemaDictionaryError as exc:
        logger.error("Cannot assemble document: %s", exc)
        kind = ConversionErrorKind.MISSING_SCHEMA_DICTIONARY
        message = str(exc)
    except SpecParseError as exc:
        logger.error("Cannot assemble document: %s", exc)
        kind = ConversionErrorKind.MALFORMED_DOCUMENT
        message = str(exc)
    else:
        return ConversionSuccess(document=document, diagnostics=diagnostics)

    return ConversionFailure(
        error=ConversionError(kind=kind, message=message),
        diagnostics=diagnostics,
    )


def _is_missing(raw: Any) -> bool:
    # Empty containers are input; they fail later on their structure.
    if raw is None or raw == "":
        return True
    return isinstance(raw, (int, float)) and not raw
