"""Runtime validator expressions (zod) for IR schemas."""

from __future__ import annotations

import json

from ..ir import (
    AllOfSchema,
    ArraySchema,
    BooleanSchema,
    EnumSchema,
    IntegerSchema,
    IRSchema,
    NullSchema,
    NumberSchema,
    ObjectSchema,
    OneOfSchema,
    RefSchema,
    StringSchema,
)
from ..naming import quote_property_name

_STRING_FORMATS = {
    "date": ".datetime()",
    "date-time": ".datetime()",
    "email": ".email()",
    "uri": ".url()",
    "url": ".url()",
    "uuid": ".uuid()",
}


def render_validator(schema: IRSchema, local: bool = False) -> str:
    """Render ``schema`` as a zod expression.

    Args:
        schema: The schema to render
        local: Refer to other models as ``<Name>Schema`` (same file) instead
            of ``Schema.<Name>Schema``

    Example:
        >>> render_validator(StringSchema(format="email", nullable=True))
        'z.string().email().nullable()'
    """
    expression = _render(schema, local)
    if schema.nullable and expression != "z.null()":
        return f"{expression}.nullable()"
    return expression


def _render(schema: IRSchema, local: bool) -> str:
    if isinstance(schema, StringSchema):
        return "z.string()" + _STRING_FORMATS.get(schema.format or "", "")
    if isinstance(schema, IntegerSchema):
        return "z.number().int()"
    if isinstance(schema, NumberSchema):
        return "z.number()"
    if isinstance(schema, BooleanSchema):
        return "z.boolean()"
    if isinstance(schema, NullSchema):
        return "z.null()"
    if isinstance(schema, RefSchema):
        return f"{schema.ref}Schema" if local else f"Schema.{schema.ref}Schema"
    if isinstance(schema, ArraySchema):
        return f"z.array({render_validator(schema.items, local)})"
    if isinstance(schema, ObjectSchema):
        return _render_object(schema, local)
    if isinstance(schema, EnumSchema):
        return _render_enum(schema)
    if isinstance(schema, OneOfSchema):
        return _union([render_validator(variant, local) for variant in schema.variants])
    if isinstance(schema, AllOfSchema):
        parts = [render_validator(part, local) for part in schema.parts]
        if not parts:
            return "z.unknown()"
        expression = parts[0]
        for part in parts[1:]:
            expression = f"{expression}.and({part})"
        return expression
    return "z.unknown()"


def _render_object(schema: ObjectSchema, local: bool) -> str:
    additional = schema.additional_properties
    if not schema.properties:
        value = "z.unknown()" if additional is None else render_validator(additional, local)
        return f"z.record(z.string(), {value})"
    members = []
    for prop in schema.properties:
        expression = render_validator(prop.type, local)
        if not prop.required:
            expression += ".optional()"
        members.append(f"{quote_property_name(prop.name)}: {expression}")
    shape = "z.object({ " + ", ".join(members) + " })"
    if additional is None:
        return shape
    return f"{shape}.catchall({render_validator(additional, local)})"


def _render_enum(schema: EnumSchema) -> str:
    if not schema.values:
        return "z.never()"
    if all(isinstance(value, str) for value in schema.values):
        return "z.enum([" + ", ".join(json.dumps(value) for value in schema.values) + "])"
    return _union([f"z.literal({json.dumps(value)})" for value in schema.values])


def _union(options: list[str]) -> str:
    unique = list(dict.fromkeys(options))
    if not unique:
        return "z.unknown()"
    if len(unique) == 1:
        return unique[0]
    return "z.union([" + ", ".join(unique) + "])"
