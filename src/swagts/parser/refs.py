"""Translate between ``$ref`` JSON Reference strings and schema keys.

OpenAPI documents use ``$ref`` pointers (e.g.,
``{"$ref": "#/components/schemas/Pet"}``) to avoid repetition. The resolvers
never inline those pointers; instead they:

* derive the schema key a pointer names (:func:`ref_key`) and look it up in
  ``components.schemas``,
* build the canonical pointer of a named schema (:func:`schema_pointer`) so
  that method bodies and responses can be matched against resolved models by
  plain string comparison,
* follow arbitrary internal pointers into ``components`` for parameters,
  request bodies and responses (:func:`resolve_pointer`).

Only **internal** references (those starting with ``#/``) are followed.
"""

from __future__ import annotations

from typing import Any, Optional

from swagts.exceptions import SpecParseError

SCHEMAS_PREFIX = "#/components/schemas/"


def _unescape(segment: str) -> str:
    # RFC 6901: "~1" is "/", "~0" is "~"
    return segment.replace("~1", "/").replace("~0", "~")


def _escape(segment: str) -> str:
    return segment.replace("~", "~0").replace("/", "~1")


def schema_pointer(key: str) -> str:
    """Return the canonical pointer of the named schema *key*.

    Example::

        schema_pointer("Pet")  # "#/components/schemas/Pet"
    """
    return SCHEMAS_PREFIX + _escape(key)


def ref_key(ref: Optional[str]) -> Optional[str]:
    """Return the schema key named by *ref*, or ``None`` if it names no schema.

    The key is the last pointer segment, unescaped. External references and
    pointers outside ``#/components/schemas/`` yield ``None``.

    Example::

        ref_key("#/components/schemas/Pet")  # "Pet"
        ref_key("other.yaml#/Pet")           # None
    """
    if not ref or not ref.startswith(SCHEMAS_PREFIX):
        return None
    remainder = ref[len(SCHEMAS_PREFIX):]
    if not remainder or "/" in remainder:
        return None
    return _unescape(remainder)


def resolve_pointer(ref: str, root: dict[str, Any]) -> Any:
    """Resolve a single ``$ref`` string against the root document.

    Parses JSON Pointer references like ``#/components/responses/NotFound``
    and navigates the root dict to locate the referenced value.

    Args:
        ref: The ``$ref`` string.
        root: The root document dictionary to resolve against.

    Returns:
        The value found at the referenced path.

    Raises:
        SpecParseError: If the reference is external (does not start with
            ``#/``), or if any segment in the pointer path does not exist
            in the document.
    """
    if not ref.startswith("#/"):
        raise SpecParseError(
            f"External $ref not supported: {ref}. "
            "Only internal references (#/...) are handled."
        )

    current: Any = root
    for segment in ref[2:].split("/"):
        segment = _unescape(segment)

        if isinstance(current, dict):
            if segment not in current:
                raise SpecParseError(
                    f"Cannot resolve $ref '{ref}': "
                    f"key '{segment}' not found at path"
                )
            current = current[segment]
        elif isinstance(current, list):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError) as exc:
                raise SpecParseError(
                    f"Cannot resolve $ref '{ref}': "
                    f"invalid array index '{segment}'"
                ) from exc
        else:
            raise SpecParseError(
                f"Cannot resolve $ref '{ref}': "
                f"cannot navigate into {type(current).__name__}"
            )

    return current


def deref(obj: Any, root: dict[str, Any], limit: int = 16) -> Any:
    """Follow ``$ref`` indirections on *obj* until a non-reference is reached.

    Used for component-level objects (parameters, request bodies, responses),
    which are plain indirections rather than named models.

    Raises:
        SpecParseError: If a pointer cannot be resolved or the chain does
            not end within *limit* hops (a reference cycle).
    """
    hops = 0
    while isinstance(obj, dict) and isinstance(obj.get("$ref"), str):
        if hops >= limit:
            raise SpecParseError(f"Reference chain too deep at '{obj['$ref']}'")
        obj = resolve_pointer(obj["$ref"], root)
        hops += 1
    return obj
