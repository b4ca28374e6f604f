"""Intermediate Representation (IR) for OpenAPI documents.

The IR is a dialect-independent model of the parts of an OpenAPI document
that SDK generation needs. It is built once per generation run by
``sdkgen.builder.build_ir`` and consumed by the renderers in
``sdkgen.generation``.

Schemas are a closed family of frozen dataclasses (see ``IRSchema``). Every
variant carries ``nullable``; references carry a bare component name, never a
JSON pointer, so consumers never resolve anything themselves.

Key classes:
- IRDocument: Root container for services, model definitions and security schemes
- IRService: Operations grouped by their primary tag
- IROperation: One HTTP operation (path + method)
- IRParam / IRRequestBody / IRResponse: Operation inputs and output
- IRModelDef: A named schema (component or lifted inline type)
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, is_dataclass
from typing import ClassVar, Iterator, Literal, Union

from .openapi import EnumValue, JsonValue, OpenAPIDocument

StreamingFormat = Literal["sse", "ndjson", "chunked"]


@dataclass(frozen=True)
class IRAnnotations:
    """Non-structural schema metadata that renderers may surface as docs."""

    title: str | None = None
    description: str | None = None
    deprecated: bool | None = None
    read_only: bool | None = None
    write_only: bool | None = None
    default: JsonValue = None
    examples: tuple[JsonValue, ...] | None = None


@dataclass(frozen=True)
class IRDiscriminator:
    property_name: str
    mapping: tuple[tuple[str, str], ...] | None = None


@dataclass(frozen=True)
class StringSchema:
    kind: ClassVar[str] = "string"
    format: str | None = None
    nullable: bool = False


@dataclass(frozen=True)
class NumberSchema:
    kind: ClassVar[str] = "number"
    nullable: bool = False


@dataclass(frozen=True)
class IntegerSchema:
    kind: ClassVar[str] = "integer"
    nullable: bool = False


@dataclass(frozen=True)
class BooleanSchema:
    kind: ClassVar[str] = "boolean"
    nullable: bool = False


@dataclass(frozen=True)
class NullSchema:
    kind: ClassVar[str] = "null"
    nullable: bool = False


@dataclass(frozen=True)
class ArraySchema:
    kind: ClassVar[str] = "array"
    items: IRSchema
    nullable: bool = False


@dataclass(frozen=True)
class IRField:
    name: str
    type: IRSchema
    required: bool
    annotations: IRAnnotations = field(default_factory=IRAnnotations)


@dataclass(frozen=True)
class ObjectSchema:
    kind: ClassVar[str] = "object"
    properties: tuple[IRField, ...] = ()
    additional_properties: IRSchema | None = None
    nullable: bool = False


@dataclass(frozen=True)
class EnumSchema:
    """Closed set of literal values.

    Attributes:
        values: The raw enum values, type preserved
        base: Underlying primitive kind: string, number, integer, boolean or unknown
    """

    kind: ClassVar[str] = "enum"
    values: tuple[EnumValue, ...]
    base: str = "string"
    nullable: bool = False


@dataclass(frozen=True)
class RefSchema:
    kind: ClassVar[str] = "ref"
    ref: str
    nullable: bool = False


@dataclass(frozen=True)
class OneOfSchema:
    """Union of independently typed branches (``oneOf`` and ``anyOf``)."""

    kind: ClassVar[str] = "oneOf"
    variants: tuple[IRSchema, ...]
    discriminator: IRDiscriminator | None = None
    nullable: bool = False


@dataclass(frozen=True)
class AllOfSchema:
    kind: ClassVar[str] = "allOf"
    parts: tuple[IRSchema, ...]
    nullable: bool = False


@dataclass(frozen=True)
class UnknownSchema:
    kind: ClassVar[str] = "unknown"
    nullable: bool = False


IRSchema = Union[
    StringSchema,
    NumberSchema,
    IntegerSchema,
    BooleanSchema,
    NullSchema,
    ArraySchema,
    ObjectSchema,
    EnumSchema,
    RefSchema,
    OneOfSchema,
    AllOfSchema,
    UnknownSchema,
]

UNKNOWN = UnknownSchema()


@dataclass(frozen=True)
class IRParam:
    name: str
    schema: IRSchema
    required: bool
    description: str = ""


@dataclass(frozen=True)
class IRRequestBody:
    content_type: str
    schema: IRSchema
    required: bool


@dataclass(frozen=True)
class IRResponse:
    """The success response chosen for an operation.

    Attributes:
        schema: Body schema; Unknown when there is no body
        content_type: Media type of the body, empty when there is none
        is_streaming: Whether the body is a stream of items
        streaming_format: sse, ndjson or chunked when streaming
        description: Response description from the document
    """

    schema: IRSchema
    content_type: str = ""
    is_streaming: bool = False
    streaming_format: StreamingFormat | None = None
    description: str = ""


@dataclass(frozen=True)
class IROperation:
    """One HTTP operation.

    Attributes:
        operation_id: The operationId from the document, empty if absent
        method: Upper-case HTTP method
        path: Raw path template with ``{param}`` placeholders
        tag: Primary tag used for service grouping
        original_tags: All tags of the operation (the default tag if none)
        path_params: Path parameters in order of appearance in ``path``
        query_params: Query parameters in declaration order
        request_body: Request body, if the operation declares one
        response: Chosen success response
    """

    operation_id: str
    method: str
    path: str
    tag: str
    original_tags: tuple[str, ...]
    path_params: tuple[IRParam, ...]
    query_params: tuple[IRParam, ...]
    request_body: IRRequestBody | None
    response: IRResponse
    summary: str = ""
    description: str = ""
    deprecated: bool = False


@dataclass(frozen=True)
class IRService:
    tag: str
    operations: tuple[IROperation, ...]


@dataclass(frozen=True)
class IRModelDef:
    name: str
    schema: IRSchema
    annotations: IRAnnotations = field(default_factory=IRAnnotations)


@dataclass(frozen=True)
class IRSecurityScheme:
    key: str
    type: str
    scheme: str | None = None
    location: str | None = None
    name: str | None = None
    bearer_format: str | None = None


@dataclass(frozen=True)
class IRDocument:
    """Root container for the intermediate representation.

    Attributes:
        services: Operations grouped by primary tag, sorted by tag
        model_defs: Component schemas followed by lifted inline types
        security_schemes: Security schemes sorted by key
        document: The OpenAPI document the IR was built from
    """

    services: tuple[IRService, ...]
    model_defs: tuple[IRModelDef, ...]
    security_schemes: tuple[IRSecurityScheme, ...] = ()
    document: OpenAPIDocument | None = field(default=None, repr=False, compare=False)

    @property
    def operations(self) -> list[IROperation]:
        return [operation for service in self.services for operation in service.operations]

    @property
    def schemas(self) -> dict[str, IRSchema]:
        return {model.name: model.schema for model in self.model_defs}


def child_schemas(schema: IRSchema) -> Iterator[IRSchema]:
    """Yield the direct sub-schemas of ``schema``."""
    if isinstance(schema, ArraySchema):
        yield schema.items
    elif isinstance(schema, ObjectSchema):
        for prop in schema.properties:
            yield prop.type
        if schema.additional_properties is not None:
            yield schema.additional_properties
    elif isinstance(schema, OneOfSchema):
        yield from schema.variants
    elif isinstance(schema, AllOfSchema):
        yield from schema.parts


def iter_refs(schema: IRSchema) -> Iterator[str]:
    """Yield every reference name reachable inside ``schema`` (not across refs)."""
    if isinstance(schema, RefSchema):
        yield schema.ref
        return
    for child in child_schemas(schema):
        yield from iter_refs(child)


def operation_schemas(operation: IROperation) -> Iterator[IRSchema]:
    for param in operation.path_params:
        yield param.schema
    for param in operation.query_params:
        yield param.schema
    if operation.request_body is not None:
        yield operation.request_body.schema
    yield operation.response.schema


def to_jsonable(value: object) -> object:
    """Convert IR objects into plain JSON-compatible structures.

    Schema variants gain a ``kind`` key so the result stays self-describing.
    """
    if is_dataclass(value) and not isinstance(value, type):
        data: dict[str, object] = {}
        kind = getattr(type(value), "kind", None)
        if isinstance(kind, str):
            data["kind"] = kind
        for item in fields(value):
            if item.name == "document":
                continue
            data[item.name] = to_jsonable(getattr(value, item.name))
        return data
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    if isinstance(value, dict):
        return {str(key): to_jsonable(item) for key, item in value.items()}
    return value
