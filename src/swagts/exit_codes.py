"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~swagts.exceptions.SwagtsError` subclass.
Shell scripts and CI jobs can inspect the exit code to tell a malformed
input document from a usage mistake without parsing stderr.

Example::

    $ swagts convert broken.json
    $ echo $?
    7   # EXIT_SPEC_PARSE_ERROR -- the document could not be resolved
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_SPEC_PARSE_ERROR = 7
"""The OpenAPI document could not be loaded, parsed or resolved."""
