from __future__ import annotations

from typing import TypedDict

# Type aliases for JSON-like values used in OpenAPI
JsonPrimitive = str | int | float | bool | None
JsonValue = JsonPrimitive | list["JsonValue"] | dict[str, "JsonValue"]

# OpenAPI enum can contain strings, numbers, or booleans
EnumValue = str | int | float | bool | None

ReferenceObject = TypedDict(
    "ReferenceObject",
    {
        "$ref": str,
        "summary": str,
        "description": str,
    },
    total=False,
)

DiscriminatorObject = TypedDict(
    "DiscriminatorObject",
    {
        "propertyName": str,
        "mapping": dict[str, str],
    },
    total=False,
)

# "type" is a string in 3.0 and may be a list of strings in 3.1
SchemaObject = TypedDict(
    "SchemaObject",
    {
        "type": str | list[str],
        "format": str,
        "properties": dict[str, "SchemaObject"],
        "items": "SchemaObject",
        "required": list[str],
        "nullable": bool,
        "enum": list[EnumValue],
        "const": JsonValue,
        "oneOf": list["SchemaObject"],
        "anyOf": list["SchemaObject"],
        "allOf": list["SchemaObject"],
        "not": "SchemaObject",
        "discriminator": DiscriminatorObject,
        # additionalProperties can be bool or SchemaObject
        "additionalProperties": object,
        "default": JsonValue,
        "example": JsonValue,
        "examples": list[JsonValue],
        "description": str,
        "title": str,
        "deprecated": bool,
        "readOnly": bool,
        "writeOnly": bool,
        "$ref": str,
    },
    total=False,
)

MediaTypeObject = TypedDict(
    "MediaTypeObject",
    {
        "schema": SchemaObject,
    },
    total=False,
)

ResponseObject = TypedDict(
    "ResponseObject",
    {
        "description": str,
        "headers": dict[str, object],
        "content": dict[str, MediaTypeObject],
        "$ref": str,
    },
    total=False,
)

RequestBodyObject = TypedDict(
    "RequestBodyObject",
    {
        "description": str,
        "content": dict[str, MediaTypeObject],
        "required": bool,
        "$ref": str,
    },
    total=False,
)

ParameterObject = TypedDict(
    "ParameterObject",
    {
        "name": str,
        "in": str,
        "description": str,
        "required": bool,
        "schema": SchemaObject,
        "content": dict[str, MediaTypeObject],
        "style": str,
        "explode": bool,
        "$ref": str,
    },
    total=False,
)

OperationObject = TypedDict(
    "OperationObject",
    {
        "operationId": str,
        "tags": list[str],
        "summary": str,
        "description": str,
        "deprecated": bool,
        "parameters": list[ParameterObject],
        "requestBody": RequestBodyObject,
        "responses": dict[str, ResponseObject],
        "security": list[dict[str, list[str]]],
    },
    total=False,
)

PathItemObject = TypedDict(
    "PathItemObject",
    {
        "parameters": list[ParameterObject],
        "get": OperationObject,
        "put": OperationObject,
        "post": OperationObject,
        "delete": OperationObject,
        "options": OperationObject,
        "head": OperationObject,
        "patch": OperationObject,
        "trace": OperationObject,
    },
    total=False,
)

SecuritySchemeObject = TypedDict(
    "SecuritySchemeObject",
    {
        "type": str,
        "description": str,
        "name": str,
        "in": str,
        "scheme": str,
        "bearerFormat": str,
        "openIdConnectUrl": str,
        "$ref": str,
    },
    total=False,
)

ComponentsObject = TypedDict(
    "ComponentsObject",
    {
        "schemas": dict[str, SchemaObject],
        "parameters": dict[str, ParameterObject],
        "requestBodies": dict[str, RequestBodyObject],
        "responses": dict[str, ResponseObject],
        "securitySchemes": dict[str, SecuritySchemeObject],
    },
    total=False,
)

InfoObject = TypedDict(
    "InfoObject",
    {
        "title": str,
        "version": str,
        "description": str,
    },
    total=False,
)

ServerObject = TypedDict(
    "ServerObject",
    {
        "url": str,
        "description": str,
        "variables": dict[str, object],
    },
    total=False,
)

OpenAPIDocument = TypedDict(
    "OpenAPIDocument",
    {
        "openapi": str,
        "info": InfoObject,
        "paths": dict[str, PathItemObject],
        "components": ComponentsObject,
        "servers": list[ServerObject],
    },
    total=False,
)
