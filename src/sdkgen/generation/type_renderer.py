from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Iterable, Mapping

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
    child_schemas,
)
from ..naming import quote_property_name
from ..openapi import EnumValue


@dataclass
class TypeRenderer:
    """Renders IR schemas as TypeScript type expressions.

    References render as ``<namespace>.<Name>`` unless the name is a
    predefined type (imported from another package, rendered bare) or one of
    ``local_models`` (declared in the same file, rendered bare).
    """

    predefined_types: frozenset[str] = frozenset()
    namespace: str = "Schema"
    local_models: frozenset[str] = field(default_factory=frozenset)

    def render(self, schema: IRSchema) -> str:
        if isinstance(schema, OneOfSchema):
            parts = [self.render(variant) for variant in schema.variants]
            if schema.nullable:
                parts.append("null")
            return _join_union(parts)
        base = self._render_base(schema)
        if schema.nullable and base != "null":
            return _join_union([base, "null"])
        return base

    def _render_base(self, schema: IRSchema) -> str:
        if isinstance(schema, StringSchema):
            return "Blob" if schema.format == "binary" else "string"
        if isinstance(schema, (NumberSchema, IntegerSchema)):
            return "number"
        if isinstance(schema, BooleanSchema):
            return "boolean"
        if isinstance(schema, NullSchema):
            return "null"
        if isinstance(schema, RefSchema):
            return self.render_ref(schema.ref)
        if isinstance(schema, ArraySchema):
            inner = self.render(schema.items)
            if " | " in inner or " & " in inner:
                inner = f"({inner})"
            return f"{inner}[]"
        if isinstance(schema, AllOfSchema):
            parts = [self.render(part) for part in schema.parts]
            return " & ".join(f"({part})" if " | " in part else part for part in dict.fromkeys(parts))
        if isinstance(schema, EnumSchema):
            if not schema.values:
                return "unknown"
            return _join_union([_enum_literal(value, schema.base) for value in schema.values])
        if isinstance(schema, ObjectSchema):
            return self._render_object(schema)
        return "unknown"

    def render_ref(self, name: str) -> str:
        if name in self.predefined_types or name in self.local_models:
            return name
        return f"{self.namespace}.{name}"

    def _render_object(self, schema: ObjectSchema) -> str:
        additional = schema.additional_properties
        if not schema.properties:
            value = "unknown" if additional is None else self.render(additional)
            return f"Record<string, {value}>"
        members = [
            f"{quote_property_name(prop.name)}{'' if prop.required else '?'}: {self.render(prop.type)}"
            for prop in schema.properties
        ]
        shape = "{ " + "; ".join(members) + " }"
        if additional is None:
            return shape
        return f"{shape} & Record<string, {self.render(additional)}>"


def _join_union(parts: list[str]) -> str:
    return " | ".join(dict.fromkeys(parts))


def _enum_literal(value: EnumValue, base: str) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)) and base in {"number", "integer", "unknown"}:
        return json.dumps(value)
    return json.dumps(str(value))


def used_predefined_types(
    schemas: Iterable[IRSchema],
    predefined_types: Iterable[str],
    models: Mapping[str, IRSchema],
) -> list[str]:
    """Return the predefined type names reachable from ``schemas``.

    Non-predefined references are followed into ``models``; each model is
    visited once. The result keeps the order of ``predefined_types``.
    """
    predefined = list(predefined_types)
    if not predefined:
        return []
    wanted = set(predefined)
    used: set[str] = set()
    visited: set[str] = set()
    pending = list(schemas)
    while pending:
        schema = pending.pop()
        if isinstance(schema, RefSchema):
            if schema.ref in wanted:
                used.add(schema.ref)
            elif schema.ref not in visited and schema.ref in models:
                visited.add(schema.ref)
                pending.append(models[schema.ref])
            continue
        pending.extend(child_schemas(schema))
    return [name for name in predefined if name in used]
