"""Exception hierarchy for swagts.

All exceptions inherit from :class:`SwagtsError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`swagts.exit_codes`.
The top-level error handler in :func:`swagts.app.main` catches
``SwagtsError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    SwagtsError (exit 1)
    +-- InvalidUsageError                 (exit 2)
    +-- SpecParseError                    (exit 7)
    |   +-- MissingSchemaDictionaryError  (exit 7)
    |   +-- MalformedOperationError       (exit 7)
    +-- ConfigError                       (exit 1)

Unresolved ``$ref`` pointers are deliberately *not* represented here: they
leave an absent model in the result and are reported through
:class:`~swagts.models.Diagnostics`.
"""

from __future__ import annotations

from swagts.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_SPEC_PARSE_ERROR,
)


class SwagtsError(Exception):
    """Base exception for all swagts errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`swagts.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SwagtsError):
    """Raised for invalid CLI arguments or a missing input payload."""

    exit_code = EXIT_INVALID_USAGE


class SpecParseError(SwagtsError):
    """Raised when the OpenAPI document cannot be loaded or its top-level structure is malformed."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class MissingSchemaDictionaryError(SpecParseError):
    """Raised when ``components.schemas`` is absent or is not a mapping."""


class MalformedOperationError(SpecParseError):
    """Raised when a single operation object lacks required fields (e.g. ``responses``).

    The method resolver catches this per operation, records it in the
    diagnostics and carries on with the rest of the document.

    Args:
        message: Human-readable error description.
        path: The path key the operation lives under.
        method: The HTTP verb key of the operation, if known.
    """

    def __init__(self, message: str, path: str = "", method: str | None = None):
        super().__init__(message)
        self.path = path
        self.method = method


class ConfigError(SwagtsError):
    """Raised for configuration problems (invalid JSON, failed validation)."""

    exit_code = EXIT_GENERIC_FAILURE
