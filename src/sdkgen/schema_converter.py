"""Conversion of OpenAPI schema objects into IR schemas.

References to component schemas are kept as ``RefSchema`` nodes carrying
the component name. A pointer that does not name an existing component
(external files, other sections, typos) degrades to ``UnknownSchema``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, cast

from .ir import (
    UNKNOWN,
    AllOfSchema,
    ArraySchema,
    BooleanSchema,
    EnumSchema,
    IntegerSchema,
    IRAnnotations,
    IRDiscriminator,
    IRField,
    IRSchema,
    NullSchema,
    NumberSchema,
    ObjectSchema,
    OneOfSchema,
    RefSchema,
    StringSchema,
    UnknownSchema,
)
from .nullability import base_type, is_nullable, schema_type
from .openapi import EnumValue, JsonValue, OpenAPIDocument, SchemaObject
from .resolver import ref_name

_PRIMITIVE_KINDS = {"string", "number", "integer", "boolean"}


@dataclass
class SchemaConverter:
    """Builds ``IRSchema`` trees from schema objects of one document.

    Example:
        >>> converter = SchemaConverter({"openapi": "3.1.0"})
        >>> converter.convert({"type": ["string", "null"]})
        StringSchema(format=None, nullable=True)
    """

    document: OpenAPIDocument

    def convert(self, node: object) -> IRSchema:
        if not isinstance(node, Mapping):
            return UNKNOWN
        schema = cast(SchemaObject, node)
        if "$ref" in schema:
            return self._convert_ref(schema)

        nullable = is_nullable(schema)
        discriminator = _discriminator(schema)

        one_of = schema.get("oneOf") or schema.get("anyOf")
        if isinstance(one_of, list) and one_of:
            return OneOfSchema(
                variants=tuple(self.convert(item) for item in one_of),
                discriminator=discriminator,
                nullable=nullable,
            )
        all_of = schema.get("allOf")
        if isinstance(all_of, list) and all_of:
            return AllOfSchema(parts=tuple(self.convert(item) for item in all_of), nullable=nullable)
        if "not" in schema:
            return UnknownSchema(nullable=nullable)

        if "const" in schema:
            return self._convert_enum(schema, [cast(EnumValue, schema["const"])], nullable)
        enum_values = schema.get("enum")
        if isinstance(enum_values, list) and enum_values:
            return self._convert_enum(schema, enum_values, nullable)

        types = schema_type(schema)
        if isinstance(types, list):
            concrete = [item for item in types if item != "null"]
            if len(concrete) > 1:
                variants = tuple(self._convert_typed(schema, item, False) for item in concrete)
                return OneOfSchema(variants=variants, nullable=nullable)
        kind = base_type(schema)
        if kind is None and ("properties" in schema or "additionalProperties" in schema):
            kind = "object"
        if kind is None:
            return UnknownSchema(nullable=nullable)
        return self._convert_typed(schema, kind, nullable)

    def annotations(self, node: object) -> IRAnnotations:
        """Extract documentation annotations; references carry none."""
        if not isinstance(node, Mapping) or "$ref" in node:
            return IRAnnotations()
        schema = cast(SchemaObject, node)
        examples: tuple[JsonValue, ...] | None = None
        if isinstance(schema.get("examples"), list):
            examples = tuple(schema["examples"])
        elif schema.get("example") is not None:
            example = schema["example"]
            examples = tuple(example) if isinstance(example, list) else (example,)
        return IRAnnotations(
            title=schema.get("title"),
            description=schema.get("description"),
            deprecated=schema.get("deprecated"),
            read_only=schema.get("readOnly"),
            write_only=schema.get("writeOnly"),
            default=schema.get("default"),
            examples=examples,
        )

    def _convert_ref(self, schema: SchemaObject) -> IRSchema:
        name = ref_name(schema["$ref"])
        components = self.document.get("components") or {}
        if name is None or name not in (components.get("schemas") or {}):
            return UNKNOWN
        return RefSchema(ref=name, nullable=is_nullable(schema))

    def _convert_typed(self, schema: SchemaObject, kind: str, nullable: bool) -> IRSchema:
        if kind == "string":
            return StringSchema(format=schema.get("format"), nullable=nullable)
        if kind == "integer":
            return IntegerSchema(nullable=nullable)
        if kind == "number":
            return NumberSchema(nullable=nullable)
        if kind == "boolean":
            return BooleanSchema(nullable=nullable)
        if kind == "null":
            return NullSchema()
        if kind == "array":
            return ArraySchema(items=self.convert(schema.get("items")), nullable=nullable)
        if kind == "object":
            return self._convert_object(schema, nullable)
        return UnknownSchema(nullable=nullable)

    def _convert_object(self, schema: SchemaObject, nullable: bool) -> ObjectSchema:
        properties = schema.get("properties") or {}
        required = set(schema.get("required") or [])
        fields = tuple(
            IRField(
                name=name,
                type=self.convert(properties[name]),
                required=name in required,
                annotations=self.annotations(properties[name]),
            )
            for name in sorted(properties)
        )
        additional = schema.get("additionalProperties")
        additional_schema: IRSchema | None = None
        if isinstance(additional, Mapping):
            additional_schema = self.convert(additional)
        elif additional is True:
            additional_schema = UNKNOWN
        return ObjectSchema(properties=fields, additional_properties=additional_schema, nullable=nullable)

    def _convert_enum(self, schema: SchemaObject, values: list[EnumValue], nullable: bool) -> EnumSchema:
        concrete = tuple(value for value in values if value is not None)
        return EnumSchema(
            values=concrete,
            base=_enum_base(schema, concrete),
            nullable=nullable or len(concrete) != len(values),
        )


def _discriminator(schema: SchemaObject) -> IRDiscriminator | None:
    discriminator = schema.get("discriminator")
    if not isinstance(discriminator, Mapping) or not discriminator.get("propertyName"):
        return None
    mapping = discriminator.get("mapping")
    pairs = None
    if isinstance(mapping, Mapping):
        pairs = tuple((str(key), str(value)) for key, value in mapping.items())
    return IRDiscriminator(property_name=discriminator["propertyName"], mapping=pairs)


def _enum_base(schema: SchemaObject, values: tuple[EnumValue, ...]) -> str:
    """Infer the primitive kind behind an enum, preferring the declared type."""
    declared = base_type(schema)
    if declared in _PRIMITIVE_KINDS:
        return cast(str, declared)
    if not values:
        return "unknown"
    first = values[0]
    if isinstance(first, bool):
        return "boolean"
    if isinstance(first, str):
        return "string"
    if isinstance(first, int):
        return "integer"
    if isinstance(first, float):
        return "integer" if first.is_integer() else "number"
    return "unknown"


def schema_to_ir(document: OpenAPIDocument, node: object) -> IRSchema:
    return SchemaConverter(document).convert(node)
