"""Resolvers -- turn a parsed OpenAPI document into models and methods.

Typical usage::

    from swagts.resolver import assemble

    doc = assemble(raw)
    for model in doc.models:
        print(model.name, [p.name for p in model.properties or []])

Sub-modules:

* :mod:`~swagts.resolver.naming` -- Pure name derivation for models, methods
  and error types.
* :mod:`~swagts.resolver.schemas` -- Recursive schema -> model resolution
  with cycle cutting.
* :mod:`~swagts.resolver.methods` -- Path/verb -> method resolution and
  response classification.
* :mod:`~swagts.resolver.assembler` -- Orchestration and the result
  envelope used by the collaborator layer.
"""

from swagts.resolver.assembler import assemble, build_document, convert
from swagts.resolver.methods import resolve_methods
from swagts.resolver.schemas import resolve_model, resolve_models

__all__ = [
    "assemble",
    "build_document",
    "convert",
    "resolve_methods",
    "resolve_model",
    "resolve_models",
]
