from __future__ import annotations

from typing import cast

from sdkgen.ir import (
    UNKNOWN,
    AllOfSchema,
    ArraySchema,
    BooleanSchema,
    EnumSchema,
    IntegerSchema,
    IRDiscriminator,
    IRField,
    NullSchema,
    NumberSchema,
    ObjectSchema,
    OneOfSchema,
    RefSchema,
    StringSchema,
    UnknownSchema,
)
from sdkgen.openapi import OpenAPIDocument
from sdkgen.schema_converter import SchemaConverter, schema_to_ir


def _converter(schemas: dict[str, object] | None = None, version: str = "3.0.3") -> SchemaConverter:
    return SchemaConverter(cast(OpenAPIDocument, {"openapi": version, "components": {"schemas": schemas or {}}}))


class TestPrimitives:
    def test_string_with_format(self) -> None:
        assert _converter().convert({"type": "string", "format": "date-time"}) == StringSchema(format="date-time")

    def test_numeric_kinds(self) -> None:
        converter = _converter()
        assert converter.convert({"type": "integer"}) == IntegerSchema()
        assert converter.convert({"type": "number"}) == NumberSchema()
        assert converter.convert({"type": "boolean"}) == BooleanSchema()

    def test_nullable_30(self) -> None:
        assert _converter().convert({"type": "string", "nullable": True}) == StringSchema(nullable=True)

    def test_nullable_31(self) -> None:
        converter = _converter(version="3.1.0")
        assert converter.convert({"type": ["integer", "null"]}) == IntegerSchema(nullable=True)

    def test_only_null(self) -> None:
        assert _converter(version="3.1.0").convert({"type": "null"}) == NullSchema()

    def test_multi_type_list_becomes_union(self) -> None:
        converted = _converter(version="3.1.0").convert({"type": ["string", "integer", "null"]})
        assert converted == OneOfSchema(variants=(StringSchema(), IntegerSchema()), nullable=True)

    def test_untyped_is_unknown(self) -> None:
        assert _converter().convert({"description": "anything"}) == UNKNOWN
        assert _converter().convert(None) == UNKNOWN


class TestReferences:
    def test_existing_component(self) -> None:
        assert _converter({"User": {"type": "object"}}).convert({"$ref": "#/components/schemas/User"}) == RefSchema(
            ref="User"
        )

    def test_missing_component_degrades(self) -> None:
        assert _converter().convert({"$ref": "#/components/schemas/Missing"}) == UNKNOWN

    def test_external_pointer_degrades(self) -> None:
        assert _converter({"User": {}}).convert({"$ref": "other.yaml#/components/schemas/User"}) == UNKNOWN


class TestComposites:
    def test_array(self) -> None:
        converted = _converter().convert({"type": "array", "items": {"type": "string"}})
        assert converted == ArraySchema(items=StringSchema())

    def test_array_without_items(self) -> None:
        assert _converter().convert({"type": "array"}) == ArraySchema(items=UNKNOWN)

    def test_object_properties_are_sorted(self) -> None:
        converted = _converter().convert(
            {
                "type": "object",
                "required": ["b"],
                "properties": {"b": {"type": "string"}, "a": {"type": "integer"}},
            }
        )
        assert isinstance(converted, ObjectSchema)
        assert [prop.name for prop in converted.properties] == ["a", "b"]
        assert converted.properties[1] == IRField(name="b", type=StringSchema(), required=True)
        assert converted.properties[0].required is False

    def test_properties_imply_object(self) -> None:
        converted = _converter().convert({"properties": {"id": {"type": "string"}}})
        assert isinstance(converted, ObjectSchema)

    def test_additional_properties(self) -> None:
        converter = _converter()
        mapped = converter.convert({"type": "object", "additionalProperties": {"type": "integer"}})
        assert mapped == ObjectSchema(additional_properties=IntegerSchema())
        free_form = converter.convert({"type": "object", "additionalProperties": True})
        assert free_form == ObjectSchema(additional_properties=UNKNOWN)

    def test_one_of_with_discriminator(self) -> None:
        converter = _converter({"Cat": {"type": "object"}, "Dog": {"type": "object"}})
        converted = converter.convert(
            {
                "oneOf": [{"$ref": "#/components/schemas/Cat"}, {"$ref": "#/components/schemas/Dog"}],
                "discriminator": {"propertyName": "kind"},
            }
        )
        assert converted == OneOfSchema(
            variants=(RefSchema(ref="Cat"), RefSchema(ref="Dog")),
            discriminator=IRDiscriminator(property_name="kind"),
        )

    def test_discriminator_mapping_is_hashable(self) -> None:
        converter = _converter({"Cat": {"type": "object"}, "Dog": {"type": "object"}})
        converted = converter.convert(
            {
                "oneOf": [{"$ref": "#/components/schemas/Cat"}, {"$ref": "#/components/schemas/Dog"}],
                "discriminator": {
                    "propertyName": "kind",
                    "mapping": {"cat": "#/components/schemas/Cat", "dog": "#/components/schemas/Dog"},
                },
            }
        )
        assert isinstance(converted, OneOfSchema)
        assert converted.discriminator == IRDiscriminator(
            property_name="kind",
            mapping=(("cat", "#/components/schemas/Cat"), ("dog", "#/components/schemas/Dog")),
        )
        assert hash(converted) == hash(converted)

    def test_any_of_is_union(self) -> None:
        converted = _converter().convert({"anyOf": [{"type": "string"}, {"type": "integer"}]})
        assert converted == OneOfSchema(variants=(StringSchema(), IntegerSchema()))

    def test_all_of(self) -> None:
        converted = _converter({"Base": {"type": "object"}}).convert(
            {"allOf": [{"$ref": "#/components/schemas/Base"}, {"type": "object", "properties": {}}]}
        )
        assert converted == AllOfSchema(parts=(RefSchema(ref="Base"), ObjectSchema()))

    def test_not_is_unknown(self) -> None:
        assert isinstance(_converter().convert({"not": {"type": "string"}}), UnknownSchema)


class TestEnums:
    def test_string_enum(self) -> None:
        converted = _converter().convert({"type": "string", "enum": ["a", "b"]})
        assert converted == EnumSchema(values=("a", "b"), base="string")

    def test_integer_enum_inferred(self) -> None:
        assert _converter().convert({"enum": [1, 2]}) == EnumSchema(values=(1, 2), base="integer")

    def test_null_member_makes_nullable(self) -> None:
        converted = _converter().convert({"type": "string", "enum": ["a", None]})
        assert converted == EnumSchema(values=("a",), base="string", nullable=True)

    def test_const(self) -> None:
        assert _converter(version="3.1.0").convert({"const": "fixed"}) == EnumSchema(values=("fixed",))


class TestAnnotations:
    def test_collects_metadata(self) -> None:
        annotations = _converter().annotations(
            {"type": "string", "title": "Name", "description": "desc", "deprecated": True, "example": "x"}
        )
        assert annotations.title == "Name"
        assert annotations.description == "desc"
        assert annotations.deprecated is True
        assert annotations.examples == ("x",)

    def test_references_have_no_annotations(self) -> None:
        annotations = _converter().annotations({"$ref": "#/components/schemas/A", "description": "ignored"})
        assert annotations.description is None


def test_schema_to_ir_helper() -> None:
    document = cast(OpenAPIDocument, {"openapi": "3.0.3"})
    assert schema_to_ir(document, {"type": "boolean"}) == BooleanSchema()
