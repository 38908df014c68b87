"""Resolve ``components.schemas`` entries into :class:`~swagts.models.Model` trees.

The resolver is a recursive walk over typed :class:`~swagts.models.RawSchema`
objects. For every schema it derives a name (see
:mod:`swagts.resolver.naming`), classifies its shape, resolves each property
and, for arrays, the item model.

Rules worth knowing when reading the output:

* ``schema_pointer`` is only set when the key is a direct entry of
  ``components.schemas``; inline shapes reached through a property have none.
* ``$ref`` pointers are followed by key into ``components.schemas``. A
  pointer that names no schema leaves the sub-model absent and is recorded
  in :class:`~swagts.models.Diagnostics`.
* There is no memoisation. Each reference site gets its own, independently
  resolved :class:`~swagts.models.Model`.
* A schema already being expanded on the current chain is not expanded
  again; a *back-reference* model (name + pointer, ``back_reference=True``)
  is returned instead, so self-referential schemas terminate.

Enum properties are the one place where naming differs: an inline enum's
sub-model is named after the property's declared type (``string``), not
after the property key.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from swagts.models import (
    Diagnostics,
    Model,
    ModelKind,
    Property,
    RawDocument,
    RawSchema,
    SchemaKind,
)
from swagts.parser.refs import ref_key, schema_pointer
from swagts.resolver.naming import model_name

logger = logging.getLogger(__name__)

_MODEL_KINDS = {
    SchemaKind.OBJECT: ModelKind.OBJECT,
    SchemaKind.ARRAY: ModelKind.ARRAY,
    SchemaKind.ENUM: ModelKind.ENUM,
    SchemaKind.PRIMITIVE: ModelKind.PRIMITIVE,
    # A named alias of another schema carries no shape of its own
    SchemaKind.REFERENCE: ModelKind.OBJECT,
}


def _model_kind(schema: RawSchema) -> ModelKind:
    return _MODEL_KINDS[schema.kind]


def _enum_value(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _enum_values(values: Optional[list[Any]]) -> Optional[list[str]]:
    if values is None:
        return None
    return list(dict.fromkeys(_enum_value(v) for v in values))


class ModelResolver:
    """Resolve schemas of one document into models.

    Args:
        schemas: The validated ``components.schemas`` dictionary.
        diagnostics: Collector for unresolved references. A private one is
            created when omitted.
    """

    def __init__(
        self,
        schemas: dict[str, RawSchema],
        diagnostics: Optional[Diagnostics] = None,
    ) -> None:
        self._schemas = schemas
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()

    def resolve_all(self) -> list[Model]:
        """Resolve every named schema, in dictionary order."""
        return [self.resolve_model(schema, key) for key, schema in self._schemas.items()]

    def resolve_model(
        self,
        schema: RawSchema,
        key: str,
        seen: frozenset[str] = frozenset(),
        context: Optional[str] = None,
    ) -> Model:
        """Resolve *schema* stored under (or reached through) *key*.

        Args:
            schema: The schema to resolve.
            key: Schema key, property name, ``"items"`` or ``""`` for an
                anonymous shape. Drives the derived name.
            seen: Pointers of the named schemas currently being expanded on
                this chain.
            context: Dotted location used in diagnostics.

        Returns:
            The resolved :class:`~swagts.models.Model`.
        """
        context = context or key
        pointer = schema_pointer(key) if key and key in self._schemas else None
        if pointer is not None and self._schemas[key] is schema:
            seen = seen | {pointer}

        array_item_model: Optional[Model] = None
        items = schema.items
        if schema.type == "array" and items is not None and items.properties is None:
            if items.ref is not None:
                array_item_model = self._resolve_ref(items.ref, seen, f"{context}[]")

        properties_source = schema.properties
        if properties_source is None and items is not None:
            properties_source = items.properties

        properties: Optional[list[Property]] = None
        if properties_source is not None:
            properties = [
                self._resolve_property(schema, prop_key, prop_schema, seen, context)
                for prop_key, prop_schema in properties_source.items()
            ]

        return Model(
            name=model_name(key, schema.enum is not None),
            original_name=key,
            kind=_model_kind(schema),
            type=schema.type,
            schema_pointer=pointer,
            properties=properties,
            enum_values=_enum_values(schema.enum),
            array_item_model=array_item_model,
        )

    def resolve_property_model(
        self,
        schema: RawSchema,
        key: str,
        seen: frozenset[str] = frozenset(),
        context: Optional[str] = None,
    ) -> Optional[Model]:
        """Return the sub-model of a property schema, or ``None`` for plain primitives."""
        context = context or key
        kind = schema.kind

        if kind is SchemaKind.OBJECT:
            return self.resolve_model(schema, key, seen, context)

        if kind is SchemaKind.ARRAY:
            items = schema.items
            if items is None:
                return None
            if items.ref is not None:
                return self._resolve_ref(items.ref, seen, f"{context}[]")
            if items.type:
                if items.type == "object":
                    return self.resolve_model(items, "", seen, f"{context}[]")
                return Model(
                    name=items.type,
                    original_name=items.type,
                    kind=ModelKind.PRIMITIVE,
                    type=items.type,
                )
            return self.resolve_model(items, "items", seen, f"{context}[]")

        if kind is SchemaKind.ENUM:
            declared = schema.type or ""
            return Model(
                name=declared,
                original_name=declared,
                kind=ModelKind.ENUM,
                type="string",
                enum_values=_enum_values(schema.enum),
            )

        if kind is SchemaKind.REFERENCE:
            assert schema.ref is not None
            return self._resolve_ref(schema.ref, seen, context)

        return None

    def _resolve_property(
        self,
        parent: RawSchema,
        key: str,
        schema: RawSchema,
        seen: frozenset[str],
        context: str,
    ) -> Property:
        sub_model = self.resolve_property_model(schema, key, seen, f"{context}.{key}")
        if schema.type == "integer":
            prop_type: Optional[str] = "number"
        elif schema.type:
            prop_type = schema.type
        else:
            prop_type = sub_model.name if sub_model is not None else None
        return Property(
            name=key,
            type=prop_type,
            required=key in parent.required,
            sub_model=sub_model,
        )

    def _resolve_ref(
        self, ref: str, seen: frozenset[str], context: str
    ) -> Optional[Model]:
        key = ref_key(ref)
        target = self._schemas.get(key) if key is not None else None
        if key is None or target is None:
            logger.debug("Unresolved $ref '%s' at %s", ref, context)
            self.diagnostics.record_unresolved(ref, context)
            return None

        pointer = schema_pointer(key)
        if pointer in seen:
            logger.debug("Cycle through '%s' at %s, emitting back-reference", pointer, context)
            return Model(
                name=model_name(key, target.enum is not None),
                original_name=key,
                kind=_model_kind(target),
                type=target.type,
                schema_pointer=pointer,
                back_reference=True,
            )
        return self.resolve_model(target, key, seen, context)


def resolve_model(
    document: RawDocument,
    schema: RawSchema,
    key: str,
    diagnostics: Optional[Diagnostics] = None,
) -> Model:
    """Resolve a single *schema* of *document* under *key*.

    Example::

        doc = parse_document(raw)
        pet = resolve_model(doc, doc.schemas["Pet"], "Pet")
        pet.name  # "IPet"
    """
    return ModelResolver(document.schemas, diagnostics).resolve_model(schema, key)


def resolve_models(
    document: RawDocument, diagnostics: Optional[Diagnostics] = None
) -> list[Model]:
    """Resolve every entry of ``components.schemas``, preserving key order."""
    return ModelResolver(document.schemas, diagnostics).resolve_all()
