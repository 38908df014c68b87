"""Built-in CLI sub-commands for swagts.

This package groups all Typer sub-command modules that form the CLI's
top-level command tree:

* :mod:`~swagts.commands.convert` -- resolve a document and print the IR.
* :mod:`~swagts.commands.inspect` -- tabular views of models, methods and
  diagnostics.
* :mod:`~swagts.commands.config` -- view and modify global settings.

Each module either exports a :class:`typer.Typer` sub-application (for
multi-command groups like ``inspect`` and ``config``) or a plain callback
function registered directly on the root app (for single commands like
``convert``).
"""
