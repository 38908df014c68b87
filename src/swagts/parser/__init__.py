"""OpenAPI input handling -- load documents, parse them into typed views, follow ``$ref`` pointers.

Typical usage::

    from swagts.parser import load_spec, parse_document

    raw = load_spec("openapi.yaml")
    doc = parse_document(raw)
    print(sorted(doc.schemas))

Sub-modules:

* :mod:`~swagts.parser.loader` -- I/O layer (file, stdin) plus JSON/YAML
  format detection.
* :mod:`~swagts.parser.document` -- Typed intermediate parse of the
  document, schemas and operations.
* :mod:`~swagts.parser.refs` -- ``$ref`` pointer <-> schema key conversion
  and JSON-pointer lookup.
"""

from swagts.parser.document import parse_document, parse_operation
from swagts.parser.loader import load_spec

__all__ = ["load_spec", "parse_document", "parse_operation"]
