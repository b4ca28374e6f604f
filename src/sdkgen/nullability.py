"""Dialect-independent view of a schema's type and nullability.

OpenAPI 3.0 marks nullable schemas with ``nullable: true`` next to a single
``type`` string. OpenAPI 3.1 follows JSON Schema and lists ``"null"`` inside
a ``type`` array instead. Both encodings map onto the same ``TypeInfo``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from .openapi import SchemaObject


@dataclass(frozen=True)
class TypeInfo:
    nullable: bool
    type: str | list[str] | None


def schema_type(schema: SchemaObject | Mapping[str, object] | None) -> str | list[str] | None:
    if not isinstance(schema, Mapping):
        return None
    value = schema.get("type")
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return [item for item in value if isinstance(item, str)]
    return None


def is_nullable(schema: SchemaObject | Mapping[str, object] | None) -> bool:
    if not isinstance(schema, Mapping):
        return False
    if schema.get("nullable") is True:
        return True
    value = schema_type(schema)
    if isinstance(value, list):
        return "null" in value
    return False


def classify(schema: SchemaObject | Mapping[str, object] | None) -> TypeInfo:
    return TypeInfo(nullable=is_nullable(schema), type=schema_type(schema))


def base_type(schema: SchemaObject | Mapping[str, object] | None) -> str | None:
    """Return the single non-null type name of ``schema``, if any.

    A 3.1 type list such as ``["string", "null"]`` yields ``"string"``; a
    list containing only ``"null"`` yields ``"null"``.
    """
    value = schema_type(schema)
    if isinstance(value, str):
        return value
    if not value:
        return None
    for item in value:
        if item != "null":
            return item
    return "null"
