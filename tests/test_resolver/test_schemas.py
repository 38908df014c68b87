"""Tests for swagts.resolver.schemas -- schema -> model resolution."""

from __future__ import annotations

from typing import Any, Optional

import pytest

from swagts.models import Diagnostics, Model, ModelKind, Property, RawDocument, RawSchema
from swagts.parser.document import parse_document
from swagts.resolver.schemas import ModelResolver, resolve_model, resolve_models


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _document(schemas: dict[str, Any]) -> RawDocument:
    return parse_document({"components": {"schemas": schemas}})


def _by_name(models: list[Model]) -> dict[str, Model]:
    return {m.original_name: m for m in models}


def _prop(model: Model, name: str) -> Property:
    assert model.properties is not None
    for prop in model.properties:
        if prop.name == name:
            return prop
    raise AssertionError(f"{model.name} has no property {name!r}")


def _resolve(schemas: dict[str, Any], key: str, diagnostics: Optional[Diagnostics] = None) -> Model:
    doc = _document(schemas)
    return resolve_model(doc, doc.schemas[key], key, diagnostics)


# ---------------------------------------------------------------------------
# Petstore fixture
# ---------------------------------------------------------------------------


class TestResolvePetstore:
    """End-to-end resolution of the petstore schema dictionary."""

    @pytest.fixture
    def models(self, petstore_document: RawDocument) -> list[Model]:
        return resolve_models(petstore_document)

    def test_models_follow_dictionary_order(self, models: list[Model]) -> None:
        assert [m.name for m in models] == [
            "IPet",
            "ICategory",
            "ITag",
            "EPetStatus",
            "IError",
            "INode",
        ]

    def test_top_level_models_carry_pointer(self, models: list[Model]) -> None:
        for model in models:
            assert model.schema_pointer == f"#/components/schemas/{model.original_name}"

    def test_pet_shape(self, models: list[Model]) -> None:
        pet = _by_name(models)["Pet"]
        assert pet.kind is ModelKind.OBJECT
        assert pet.type == "object"
        assert [p.name for p in pet.properties or []] == [
            "id",
            "name",
            "status",
            "category",
            "tags",
            "photoUrls",
        ]

    def test_integer_property_normalised_to_number(self, models: list[Model]) -> None:
        prop = _prop(_by_name(models)["Pet"], "id")
        assert prop.type == "number"
        assert prop.sub_model is None

    def test_required_from_parent_list(self, models: list[Model]) -> None:
        pet = _by_name(models)["Pet"]
        assert _prop(pet, "id").required is True
        assert _prop(pet, "name").required is True
        assert _prop(pet, "category").required is False

    def test_inline_enum_named_after_declared_type(self, models: list[Model]) -> None:
        prop = _prop(_by_name(models)["Pet"], "status")
        assert prop.type == "string"
        assert prop.sub_model is not None
        assert prop.sub_model.name == "string"
        assert prop.sub_model.original_name == "string"
        assert prop.sub_model.kind is ModelKind.ENUM
        assert prop.sub_model.type == "string"
        assert prop.sub_model.enum_values == ["available", "pending", "sold"]

    def test_named_enum_uses_key_rule(self, models: list[Model]) -> None:
        status = _by_name(models)["PetStatus"]
        assert status.name == "EPetStatus"
        assert status.kind is ModelKind.ENUM
        assert status.enum_values == ["available", "pending", "sold"]
        assert status.properties is None

    def test_reference_property_takes_sub_model_name(self, models: list[Model]) -> None:
        prop = _prop(_by_name(models)["Pet"], "category")
        assert prop.type == "ICategory"
        assert prop.sub_model is not None
        assert prop.sub_model.schema_pointer == "#/components/schemas/Category"

    def test_reference_sites_resolve_independently(self, models: list[Model]) -> None:
        by_name = _by_name(models)
        sub_model = _prop(by_name["Pet"], "category").sub_model
        assert sub_model == by_name["Category"]
        assert sub_model is not by_name["Category"]

    def test_array_of_refs_property(self, models: list[Model]) -> None:
        prop = _prop(_by_name(models)["Pet"], "tags")
        assert prop.type == "array"
        assert prop.sub_model is not None
        assert prop.sub_model.name == "ITag"

    def test_array_of_primitives_property(self, models: list[Model]) -> None:
        prop = _prop(_by_name(models)["Pet"], "photoUrls")
        assert prop.type == "array"
        assert prop.sub_model == Model(
            name="string",
            original_name="string",
            kind=ModelKind.PRIMITIVE,
            type="string",
        )

    def test_self_reference_is_cut(self, models: list[Model]) -> None:
        node = _by_name(models)["Node"]
        parent = _prop(node, "parent")
        assert parent.type == "INode"
        assert parent.sub_model is not None
        assert parent.sub_model.back_reference is True
        assert parent.sub_model.schema_pointer == "#/components/schemas/Node"
        assert parent.sub_model.properties is None

        children = _prop(node, "children")
        assert children.type == "array"
        assert children.sub_model is not None
        assert children.sub_model.back_reference is True
        assert children.sub_model.name == "INode"

    def test_resolution_is_clean(self, petstore_document: RawDocument) -> None:
        diagnostics = Diagnostics()
        resolve_models(petstore_document, diagnostics)
        assert diagnostics.is_clean


# ---------------------------------------------------------------------------
# Arrays
# ---------------------------------------------------------------------------


class TestArrayModels:

    def test_array_of_ref_sets_item_model(self) -> None:
        model = _resolve(
            {
                "Pet": {"type": "object", "properties": {"id": {"type": "integer"}}},
                "Pets": {"type": "array", "items": {"$ref": "#/components/schemas/Pet"}},
            },
            "Pets",
        )
        assert model.kind is ModelKind.ARRAY
        assert model.properties is None
        assert model.array_item_model is not None
        assert model.array_item_model.name == "IPet"
        assert _prop(model.array_item_model, "id").type == "number"

    def test_array_of_inline_object_takes_item_properties(self) -> None:
        model = _resolve(
            {
                "Rows": {
                    "type": "array",
                    "required": ["id"],
                    "items": {
                        "type": "object",
                        "properties": {
                            "id": {"type": "integer"},
                            "label": {"type": "string"},
                        },
                    },
                }
            },
            "Rows",
        )
        assert model.array_item_model is None
        assert [p.name for p in model.properties or []] == ["id", "label"]
        assert _prop(model, "id").required is True
        assert _prop(model, "label").required is False

    def test_array_property_of_inline_objects_is_anonymous(self) -> None:
        model = _resolve(
            {
                "Owner": {
                    "type": "object",
                    "properties": {
                        "pets": {
                            "type": "array",
                            "items": {
                                "type": "object",
                                "properties": {"nick": {"type": "string"}},
                            },
                        }
                    },
                }
            },
            "Owner",
        )
        sub_model = _prop(model, "pets").sub_model
        assert sub_model is not None
        assert sub_model.name == ""
        assert sub_model.schema_pointer is None
        assert [p.name for p in sub_model.properties or []] == ["nick"]

    def test_array_property_of_untyped_items_uses_items_key(self) -> None:
        model = _resolve(
            {
                "Owner": {
                    "properties": {
                        "things": {
                            "type": "array",
                            "items": {"properties": {"n": {"type": "string"}}},
                        }
                    },
                }
            },
            "Owner",
        )
        sub_model = _prop(model, "things").sub_model
        assert sub_model is not None
        assert sub_model.name == "IItems"
        assert sub_model.original_name == "items"

    def test_array_property_without_items(self) -> None:
        model = _resolve(
            {"Owner": {"type": "object", "properties": {"raw": {"type": "array"}}}},
            "Owner",
        )
        prop = _prop(model, "raw")
        assert prop.type == "array"
        assert prop.sub_model is None


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------


class TestProperties:

    def test_inline_object_named_after_property_key(self) -> None:
        model = _resolve(
            {
                "Owner": {
                    "type": "object",
                    "properties": {
                        "address": {
                            "type": "object",
                            "required": ["city"],
                            "properties": {"city": {"type": "string"}},
                        }
                    },
                }
            },
            "Owner",
        )
        prop = _prop(model, "address")
        assert prop.type == "object"
        assert prop.sub_model is not None
        assert prop.sub_model.name == "IAddress"
        assert prop.sub_model.schema_pointer is None
        assert _prop(prop.sub_model, "city").required is True

    def test_plain_primitive_has_no_sub_model(self) -> None:
        model = _resolve(
            {"Owner": {"type": "object", "properties": {"since": {"type": "string", "format": "date"}}}},
            "Owner",
        )
        prop = _prop(model, "since")
        assert prop.type == "string"
        assert prop.sub_model is None

    def test_untyped_property_has_no_type(self) -> None:
        model = _resolve(
            {"Owner": {"type": "object", "properties": {"blob": {"description": "anything"}}}},
            "Owner",
        )
        prop = _prop(model, "blob")
        assert prop.type is None
        assert prop.sub_model is None

    def test_nullable_type_list_collapses(self) -> None:
        model = _resolve(
            {"Owner": {"type": "object", "properties": {"nick": {"type": ["string", "null"]}}}},
            "Owner",
        )
        assert _prop(model, "nick").type == "string"

    def test_no_properties_keyword(self) -> None:
        model = _resolve({"Free": {"type": "object"}}, "Free")
        assert model.properties is None


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class TestEnumModels:

    def test_enum_values_are_stringified_and_deduplicated(self) -> None:
        model = _resolve({"Level": {"enum": [1, 2, 2, True, None]}}, "Level")
        assert model.kind is ModelKind.ENUM
        assert model.enum_values == ["1", "2", "true", "null"]

    def test_enum_key_starting_with_e(self) -> None:
        model = _resolve({"ethnicity": {"type": "string", "enum": ["a"]}}, "ethnicity")
        assert model.name == "Ethnicity"

    def test_non_enum_has_no_values(self) -> None:
        model = _resolve({"Pet": {"type": "object"}}, "Pet")
        assert model.enum_values is None


# ---------------------------------------------------------------------------
# References
# ---------------------------------------------------------------------------


class TestReferences:

    def test_unresolved_reference_is_absent_and_reported(self) -> None:
        diagnostics = Diagnostics()
        model = _resolve(
            {"Owner": {"type": "object", "properties": {"pet": {"$ref": "#/components/schemas/Missing"}}}},
            "Owner",
            diagnostics,
        )
        prop = _prop(model, "pet")
        assert prop.sub_model is None
        assert prop.type is None
        assert len(diagnostics.unresolved) == 1
        assert diagnostics.unresolved[0].pointer == "#/components/schemas/Missing"
        assert diagnostics.unresolved[0].context == "Owner.pet"

    def test_external_reference_is_unresolved(self) -> None:
        diagnostics = Diagnostics()
        model = _resolve(
            {"Owner": {"type": "object", "properties": {"pet": {"$ref": "pets.yaml#/Pet"}}}},
            "Owner",
            diagnostics,
        )
        assert _prop(model, "pet").sub_model is None
        assert [u.pointer for u in diagnostics.unresolved] == ["pets.yaml#/Pet"]

    def test_escaped_key_is_followed(self) -> None:
        model = _resolve(
            {
                "a/b": {"type": "object", "properties": {"x": {"type": "string"}}},
                "Owner": {"type": "object", "properties": {"ab": {"$ref": "#/components/schemas/a~1b"}}},
            },
            "Owner",
        )
        sub_model = _prop(model, "ab").sub_model
        assert sub_model is not None
        assert sub_model.original_name == "a/b"
        assert sub_model.schema_pointer == "#/components/schemas/a~1b"

    def test_sibling_references_are_both_expanded(self) -> None:
        model = _resolve(
            {
                "Address": {"type": "object", "properties": {"city": {"type": "string"}}},
                "Order": {
                    "type": "object",
                    "properties": {
                        "from": {"$ref": "#/components/schemas/Address"},
                        "to": {"$ref": "#/components/schemas/Address"},
                    },
                },
            },
            "Order",
        )
        for key in ("from", "to"):
            sub_model = _prop(model, key).sub_model
            assert sub_model is not None
            assert sub_model.back_reference is False
            assert sub_model.properties is not None

    def test_mutual_recursion_terminates(self) -> None:
        schemas = {
            "A": {"type": "object", "properties": {"b": {"$ref": "#/components/schemas/B"}}},
            "B": {"type": "object", "properties": {"a": {"$ref": "#/components/schemas/A"}}},
        }
        a = _resolve(schemas, "A")
        b = _prop(a, "b").sub_model
        assert b is not None
        assert b.back_reference is False
        back = _prop(b, "a").sub_model
        assert back is not None
        assert back.back_reference is True
        assert back.name == "IA"

    def test_top_level_alias_model(self) -> None:
        model = _resolve(
            {
                "Pet": {"type": "object"},
                "Animal": {"$ref": "#/components/schemas/Pet"},
            },
            "Animal",
        )
        assert model.name == "IAnimal"
        assert model.kind is ModelKind.OBJECT
        assert model.properties is None


# ---------------------------------------------------------------------------
# Single-model entry point
# ---------------------------------------------------------------------------


class TestResolveModel:

    def test_single_named_schema(self, petstore_document: RawDocument) -> None:
        pet = resolve_model(petstore_document, petstore_document.schemas["Pet"], "Pet")
        assert pet.name == "IPet"
        assert pet.schema_pointer == "#/components/schemas/Pet"

    def test_anonymous_schema(self, petstore_document: RawDocument) -> None:
        model = resolve_model(petstore_document, RawSchema(type="object"), "")
        assert model.name == ""
        assert model.original_name == ""
        assert model.schema_pointer is None

    def test_top_level_alias_is_not_expanded(self) -> None:
        diagnostics = Diagnostics()
        resolver = ModelResolver(
            _document({"X": {"$ref": "#/components/schemas/Nope"}}).schemas,
            diagnostics,
        )
        resolver.resolve_all()
        assert resolver.diagnostics is diagnostics
        assert diagnostics.is_clean
