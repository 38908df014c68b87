"""Read an OpenAPI document from disk or stdin into a plain dict.

The file suffix picks the parser (``.json`` or ``.yaml``/``.yml``). Any
other suffix, and stdin, try JSON first and then YAML. Remote documents
are the caller's business; pass the parsed dict to
:func:`~swagts.resolver.assembler.assemble` directly.

YAML keeps unquoted response codes as integers (``200:``); the method
resolver stringifies them, so the loader leaves them alone.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Callable, Sequence

import yaml

from swagts.exceptions import SpecParseError

STDIN = "-"

_PARSERS: dict[str, tuple[Callable[[str], Any], type[Exception]]] = {
    "json": (json.loads, json.JSONDecodeError),
    "yaml": (yaml.safe_load, yaml.YAMLError),
}

_SUFFIX_FORMATS: dict[str, tuple[str, ...]] = {
    ".json": ("json",),
    ".yaml": ("yaml",),
    ".yml": ("yaml",),
}

_ANY_FORMAT = ("json", "yaml")


def load_spec(source: str) -> dict[str, Any]:
    """Load the document at *source*, a file path or ``-`` for stdin.

    Raises:
        SpecParseError: If the source is missing, unreadable, not UTF-8,
            blank, unparseable, or does not hold an object.
    """
    if source == STDIN:
        label, formats = "stdin", _ANY_FORMAT
        text = _read(sys.stdin.read, label)
    else:
        path = Path(source)
        if not path.is_file():
            raise SpecParseError(f"Spec file not found: {source}")
        label = source
        formats = _SUFFIX_FORMATS.get(path.suffix.lower(), _ANY_FORMAT)
        text = _read(lambda: path.read_text(encoding="utf-8"), label)

    if not text.strip():
        raise SpecParseError(f"No document in {label}: input is blank")
    return parse_content(text, formats, label)


def _read(reader: Callable[[], str], label: str) -> str:
    try:
        return reader()
    except UnicodeDecodeError as exc:
        raise SpecParseError(f"{label} is not valid UTF-8: {exc}") from exc
    except OSError as exc:
        raise SpecParseError(f"Cannot read {label}: {exc}") from exc


def parse_content(
    text: str,
    formats: Sequence[str] = _ANY_FORMAT,
    label: str = "document",
) -> dict[str, Any]:
    """Parse *text* with each format in turn and return the first object.

    A format that parses but yields a non-object stops the search: the text
    was well-formed, just not a document.

    Example::

        parse_content("openapi: 3.0.3\\npaths: {}")   # YAML fallback
        parse_content("[1]", ("json",))              # SpecParseError

    Raises:
        SpecParseError: If no format parses, or the result is not a dict.
    """
    failures: list[str] = []
    for fmt in formats:
        loads, decode_error = _PARSERS[fmt]
        try:
            data = loads(text)
        except decode_error as exc:
            failures.append(f"{fmt.upper()} error: {exc}")
            continue

        if not isinstance(data, dict):
            got = "empty document" if data is None else type(data).__name__
            raise SpecParseError(f"{label} must hold a JSON/YAML object (got {got})")
        return data

    tried = " or ".join(fmt.upper() for fmt in formats)
    raise SpecParseError(f"Cannot parse {label} as {tried}\n  " + "\n  ".join(failures))
