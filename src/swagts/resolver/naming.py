"""Derive canonical identifiers for models and methods.

Every function here is pure: the same inputs always yield the same name.

Model names follow the TypeScript conventions of the emitter:

* interfaces get an ``I`` prefix -- ``pet`` -> ``IPet``
* enums get an ``E`` prefix unless the key already starts with an ``e`` --
  ``status`` -> ``EStatus``, ``EColor`` -> ``EColor``, ``ethnicity`` ->
  ``Ethnicity``
* anonymous (inline) shapes have an empty name

Method names are the camel-cased path and verb with template placeholders
replaced by ``id`` -- ``GET /users/{id}`` -> ``usersIdGet``. Segments listed
in :attr:`~swagts.models.NamingConfig.ignored_segments` are dropped first.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Any

DEFAULT_IGNORED_SEGMENTS: tuple[str, ...] = ("api",)

_SEGMENT_SPLIT = re.compile(r"[-/]")
_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")


def capitalize(value: Any) -> str:
    """Upper-case the first character of *value*, leaving the rest untouched.

    Non-string input yields ``""``.
    """
    if not isinstance(value, str):
        return ""
    return value[:1].upper() + value[1:]


def model_name(key: str, is_enum: bool) -> str:
    """Return the interface/enum name for the schema stored under *key*.

    Example::

        model_name("pet", is_enum=False)       # "IPet"
        model_name("status", is_enum=True)     # "EStatus"
        model_name("ethnicity", is_enum=True)  # "Ethnicity"
        model_name("", is_enum=False)          # ""
    """
    if not key:
        return ""
    if is_enum:
        prefix = "" if key.lower().startswith("e") else "E"
        return prefix + capitalize(key)
    return "I" + capitalize(key)


def method_name(
    path: str,
    verb: str,
    ignored_segments: Iterable[str] = DEFAULT_IGNORED_SEGMENTS,
) -> str:
    """Derive a camelCase method name from an API path and HTTP verb.

    The path and verb are joined with ``-`` and split on ``/`` and ``-``.
    Segments containing ``{`` become ``id``; every remaining
    non-alphanumeric character splits further. Ignored segments are dropped,
    then the first two segments are lower-cased and the rest capitalized.
    Empty segments (e.g. from the leading ``/``) keep their position.

    Example::

        method_name("/users/{id}", "get")            # "usersIdGet"
        method_name("/api/pets", "post")             # "petsPost"
        method_name("/v1/acme/orders", "get", ["acme"])  # "v1OrdersGet"
    """
    ignored = set(ignored_segments)
    segments = [
        "id" if "{" in segment else segment
        for segment in _SEGMENT_SPLIT.split(f"{path}-{verb}")
    ]
    parts = _NON_ALNUM.sub("-", "/".join(segments)).split("-")
    parts = [part for part in parts if part not in ignored]
    return "".join(
        capitalize(part) if index > 1 else part.lower()
        for index, part in enumerate(parts)
    )


def error_type_name(name: str) -> str:
    """Return the error union type name for method *name*.

    Example::

        error_type_name("usersIdGet")  # "TUsersIdGetError"
    """
    return "T" + capitalize(f"{name}Error")
