"""Enum injection into placeholder component schemas.

A handful of component names act as placeholders: the published document
declares them as plain scalars (``ResourceType: {type: string}``) and each
customer's configuration supplies the actual values. The override runs on
the raw document before the IR is built, so every renderer sees the enum.
"""

from __future__ import annotations

import copy
import logging
import math
from typing import TYPE_CHECKING, Mapping, cast

from .nullability import base_type, schema_type
from .openapi import EnumValue, OpenAPIDocument, SchemaObject

if TYPE_CHECKING:
    from .customer_config import ExtractedTypes

logger = logging.getLogger(__name__)

PLACEHOLDER_TYPES: dict[str, str] = {
    "ResourceType": "resource_types",
    "EntitlementType": "entitlement_types",
    "PlanType": "plan_types",
    "LimitType": "limit_types",
    "UsageLimitType": "usage_limit_types",
}

_SCALAR_TYPES = {"string", "number", "integer", "boolean"}


def transform_spec_for_types(document: OpenAPIDocument, extracted: ExtractedTypes) -> OpenAPIDocument:
    """Return a copy of ``document`` with placeholder schemas turned into enums.

    The input document is never modified. Placeholders without extracted
    values, placeholders that are references and non-scalar placeholders are
    copied unchanged.

    Example:
        >>> doc = {"openapi": "3.0.3", "components": {"schemas": {"PlanType": {"type": "string"}}}}
        >>> out = transform_spec_for_types(doc, ExtractedTypes(plan_types=["free", "pro"]))
        >>> out["components"]["schemas"]["PlanType"]
        {'type': 'string', 'enum': ['free', 'pro']}
        >>> "enum" in doc["components"]["schemas"]["PlanType"]
        False
    """
    transformed = copy.deepcopy(document)
    for name, schema in find_simple_type_schemas(transformed).items():
        values = getattr(extracted, PLACEHOLDER_TYPES[name])
        if values is None:
            continue
        kind = cast(str, base_type(schema))
        cast(dict[str, object], schema)["enum"] = _coerce_values(values, kind)
        logger.debug("Injected %d values into %s", len(values), name)
    return transformed


def find_simple_type_schemas(document: OpenAPIDocument) -> dict[str, SchemaObject]:
    """Return the placeholder schemas of ``document`` eligible for enum injection."""
    components = document.get("components") or {}
    schemas = components.get("schemas")
    if not isinstance(schemas, Mapping):
        return {}
    found: dict[str, SchemaObject] = {}
    for name in PLACEHOLDER_TYPES:
        schema = schemas.get(name)
        if _is_simple_scalar(schema):
            found[name] = cast(SchemaObject, schema)
    return found


def _is_simple_scalar(schema: object) -> bool:
    if not isinstance(schema, Mapping) or "$ref" in schema:
        return False
    declared = schema_type(cast(SchemaObject, schema))
    if isinstance(declared, list):
        concrete = [item for item in declared if item != "null"]
        return len(concrete) == 1 and concrete[0] in _SCALAR_TYPES
    return declared in _SCALAR_TYPES


def _coerce_values(values: list[str], kind: str) -> list[EnumValue]:
    if kind == "boolean":
        return [value == "true" for value in values]
    if kind == "string":
        return list(values)
    coerced: list[EnumValue] = []
    for value in values:
        number = _parse_number(value)
        if number is None:
            continue
        if kind == "integer":
            if not number.is_integer():
                continue
            coerced.append(int(number))
        else:
            coerced.append(int(number) if number.is_integer() else number)
    return coerced


def _parse_number(value: str) -> float | None:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number
