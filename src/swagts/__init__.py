"""swagts -- Resolve OpenAPI 3 documents into a typed model/method IR.

This package walks a parsed OpenAPI document and produces a
:class:`~swagts.models.Document`: one :class:`~swagts.models.Model` per
reusable schema under ``components.schemas`` and one
:class:`~swagts.models.Method` per path + HTTP verb pair. The document is the
input to a TypeScript emitter that renders interfaces and client methods.

Typical workflow::

    swagts convert openapi.json          # print the IR as JSON
    swagts inspect models openapi.json   # tabular overview

Modules:
    app: Typer application factory and CLI entry point.
    models: Pydantic models shared across the entire package.
    config: XDG-aware configuration and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
    parser: Loading, typed parsing and ``$ref`` pointer handling.
    resolver: Model, method and document resolution.
"""

__version__ = "0.1.0"
