"""Typed intermediate parse of the OpenAPI subset the resolvers consume.

Resolution never walks the raw dictionary directly. The document-level
structure is validated up front by :func:`parse_document`, and every
operation object is validated on its own by :func:`parse_operation` right
before the method resolver uses it. Failures become explicit exceptions from
:mod:`swagts.exceptions` instead of ``KeyError``/``TypeError`` deep inside a
recursive walk:

* ``components.schemas`` absent or not a mapping
  -> :class:`~swagts.exceptions.MissingSchemaDictionaryError`
* a schema entry or the ``paths`` container malformed
  -> :class:`~swagts.exceptions.SpecParseError`
* an operation lacking ``responses`` or with ill-typed fields
  -> :class:`~swagts.exceptions.MalformedOperationError`
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from swagts.exceptions import (
    MalformedOperationError,
    MissingSchemaDictionaryError,
    SpecParseError,
)
from swagts.models import RawDocument, RawOperation

_M = TypeVar("_M", bound=BaseModel)


def _first_error(exc: ValidationError) -> str:
    """Render the first validation error as ``loc: message``."""
    errors = exc.errors()
    if not errors:
        return str(exc)
    first = errors[0]
    loc = ".".join(str(part) for part in first.get("loc", ()))
    msg = first.get("msg", "invalid value")
    more = f" (+{len(errors) - 1} more)" if len(errors) > 1 else ""
    return f"{loc}: {msg}{more}" if loc else f"{msg}{more}"


def parse_document(raw: Any) -> RawDocument:
    """Validate the top-level structure of *raw* and return a :class:`RawDocument`.

    Args:
        raw: The parsed JSON/YAML value of an OpenAPI document.

    Returns:
        The typed document with every entry of ``components.schemas``
        validated as a :class:`~swagts.models.RawSchema`.

    Raises:
        MissingSchemaDictionaryError: If ``components.schemas`` is absent or
            not a mapping.
        SpecParseError: If *raw* is not a mapping, ``paths`` is not a
            mapping, or a schema entry fails validation.
    """
    if not isinstance(raw, dict):
        raise SpecParseError(
            f"OpenAPI document must be an object (got {type(raw).__name__})"
        )

    components = raw.get("components")
    schemas = components.get("schemas") if isinstance(components, dict) else None
    if schemas is None:
        raise MissingSchemaDictionaryError(
            "Document has no 'components.schemas' dictionary"
        )
    if not isinstance(schemas, dict):
        raise MissingSchemaDictionaryError(
            "'components.schemas' must be an object "
            f"(got {type(schemas).__name__})"
        )

    paths = raw.get("paths")
    if paths is None:
        paths = {}
    elif not isinstance(paths, dict):
        raise SpecParseError(
            f"'paths' must be an object (got {type(paths).__name__})"
        )

    info = raw.get("info")
    title = info.get("title") if isinstance(info, dict) else None

    try:
        return RawDocument.model_validate(
            {
                "title": title if title is None else str(title),
                "schemas": schemas,
                "paths": paths,
                "source": raw,
            }
        )
    except ValidationError as exc:
        raise SpecParseError(f"Malformed schema dictionary: {_first_error(exc)}") from exc


def parse_operation(raw: Any, path: str = "", method: str | None = None) -> RawOperation:
    """Validate a single operation object.

    Raises:
        MalformedOperationError: If *raw* is not an object or fails
            :class:`~swagts.models.RawOperation` validation (most commonly a
            missing ``responses`` map).
    """
    if not isinstance(raw, dict):
        raise MalformedOperationError(
            f"Operation must be an object (got {type(raw).__name__})",
            path=path,
            method=method,
        )
    return validate_part(RawOperation, raw, path=path, method=method)


def validate_part(
    model: type[_M], raw: Any, path: str = "", method: str | None = None
) -> _M:
    """Validate one piece of an operation (parameter, body, response).

    Any failure is scoped to the enclosing operation.

    Raises:
        MalformedOperationError: If *raw* does not validate as *model*.
    """
    try:
        return model.model_validate(raw)
    except ValidationError as exc:
        raise MalformedOperationError(
            f"Invalid {model.__name__}: {_first_error(exc)}",
            path=path,
            method=method,
        ) from exc
