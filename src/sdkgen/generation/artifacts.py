"""Per-client bundle handed to the template step.

``build_artifacts`` turns a (filtered) IR into the strings templates need:
method names, signatures, TypeScript type expressions, zod validators and
query-key types. Nothing here touches the filesystem.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..config import PredefinedType, TypeScriptClient
from ..ir import (
    ArraySchema,
    IRDocument,
    IRField,
    IROperation,
    IRSchema,
    ObjectSchema,
    to_jsonable,
)
from ..naming import build_path_template, derive_method_name, order_path_params, to_pascal_case
from .query_keys import QueryKeyGenerator, query_key_args, query_key_base
from .type_renderer import TypeRenderer, used_predefined_types
from .validators import render_validator

logger = logging.getLogger(__name__)

REQUEST_INIT = 'init?: Omit<RequestInit, "method" | "body">'


@dataclass(frozen=True)
class PredefinedImport:
    type: str
    package: str
    import_path: str | None = None

    @property
    def module(self) -> str:
        return self.import_path or self.package


@dataclass(frozen=True)
class ModelArtifact:
    name: str
    type: str
    validator: str
    description: str | None = None


@dataclass(frozen=True)
class OperationArtifact:
    """Everything a service template needs for one operation.

    Attributes:
        method_name: SDK method name
        signature: Parameter declarations in call order
        query_type: Name of the generated query interface, if any
        streaming_item_type: Item type yielded by streaming operations
        query_key_type: Union of key tuple types, when query keys are enabled
    """

    operation_id: str
    method_name: str
    http_method: str
    path: str
    path_template: str
    signature: tuple[str, ...]
    query_type: str | None
    body_type: str | None
    response_type: str
    streaming_format: str | None
    streaming_item_type: str | None
    query_key_base: str
    query_key_args: tuple[str, ...]
    query_key_type: str | None = None
    summary: str = ""
    deprecated: bool = False


@dataclass(frozen=True)
class ServiceArtifact:
    tag: str
    name: str
    operations: tuple[OperationArtifact, ...]
    predefined_imports: tuple[PredefinedImport, ...] = ()


@dataclass(frozen=True)
class ClientArtifacts:
    client: str
    package_name: str
    services: tuple[ServiceArtifact, ...]
    models: tuple[ModelArtifact, ...]
    predefined_imports: tuple[PredefinedImport, ...] = ()
    security_schemes: tuple[str, ...] = ()


def resolve_method_name(operation: IROperation, client: TypeScriptClient) -> str:
    """Apply the client's operationId parser, falling back to REST heuristics."""
    parser = client.operation_id_parser
    if parser is not None:
        name = parser(operation.operation_id, operation.method, operation.path)
        if name:
            return name
    return derive_method_name(operation.operation_id, operation.method, operation.path)


def build_artifacts(ir: IRDocument, client: TypeScriptClient) -> ClientArtifacts:
    predefined = [_import(item) for item in client.predefined_types or []]
    predefined_names = frozenset(item.type for item in predefined)
    models = ir.schemas
    same_file = frozenset(models) - predefined_names

    service_renderer = TypeRenderer(predefined_types=predefined_names)
    schema_renderer = TypeRenderer(predefined_types=predefined_names, local_models=same_file)
    keys = QueryKeyGenerator(service_renderer)

    services = []
    query_models: list[ModelArtifact] = []
    query_schemas: list[IRSchema] = []
    taken = set(models) | predefined_names
    for service in ir.services:
        operations = []
        service_schemas: list[IRSchema] = []
        for operation in service.operations:
            method_name = resolve_method_name(operation, client)
            query_type = None
            if operation.query_params:
                base_name = f"{to_pascal_case(operation.tag)}{to_pascal_case(method_name)}Query"
                query_type = _unique_name(base_name, taken)
                taken.add(query_type)
                query_models.append(_query_model(query_type, operation, schema_renderer))
                query_schemas.extend(param.schema for param in operation.query_params)
            operations.append(_operation_artifact(operation, method_name, query_type, service_renderer, keys, client))
            service_schemas.extend(_signature_schemas(operation))
        # Service files reference models through the namespace; only bare names need imports
        used_by_service = used_predefined_types(service_schemas, predefined_names, {})
        services.append(
            ServiceArtifact(
                tag=service.tag,
                name=f"{to_pascal_case(service.tag)}Service",
                operations=tuple(operations),
                predefined_imports=_select(predefined, used_by_service),
            )
        )

    model_artifacts = [
        ModelArtifact(
            name=model.name,
            type=schema_renderer.render(model.schema),
            validator=render_validator(model.schema, local=True),
            description=model.annotations.description,
        )
        for model in ir.model_defs
        if model.name not in predefined_names
    ]
    model_artifacts.extend(query_models)

    used = used_predefined_types(
        [*(model.schema for model in ir.model_defs), *query_schemas], predefined_names, models
    )
    logger.debug(
        "Client %s: %d services, %d models, %d predefined types in use",
        client.name,
        len(services),
        len(model_artifacts),
        len(used),
    )
    return ClientArtifacts(
        client=client.name,
        package_name=client.package_name,
        services=tuple(services),
        models=tuple(model_artifacts),
        predefined_imports=_select(predefined, used),
        security_schemes=tuple(scheme.key for scheme in ir.security_schemes),
    )


def _operation_artifact(
    operation: IROperation,
    method_name: str,
    query_type: str | None,
    renderer: TypeRenderer,
    keys: QueryKeyGenerator,
    client: TypeScriptClient,
) -> OperationArtifact:
    path_params = order_path_params(operation.path, operation.path_params)
    signature = [f"{param.name}: {renderer.render(param.schema)}" for param in path_params]
    qualified_query = renderer.render_ref(query_type) if query_type else None
    if qualified_query:
        signature.append(f"query?: {qualified_query}")
    body_type = None
    if operation.request_body is not None:
        body_type = renderer.render(operation.request_body.schema)
        optional = "" if operation.request_body.required else "?"
        signature.append(f"body{optional}: {body_type}")
    signature.append(REQUEST_INIT)

    response = operation.response
    streaming_item_type = None
    if response.is_streaming:
        streaming_item_type = _streaming_item_type(response.schema, response.streaming_format, renderer)

    query_key_type = None
    if client.include_query_keys:
        query_key_type = keys.key_type(operation, qualified_query or "never")

    return OperationArtifact(
        operation_id=operation.operation_id,
        method_name=method_name,
        http_method=operation.method,
        path=operation.path,
        path_template=build_path_template(operation.path),
        signature=tuple(signature),
        query_type=query_type,
        body_type=body_type,
        response_type=renderer.render(response.schema),
        streaming_format=response.streaming_format,
        streaming_item_type=streaming_item_type,
        query_key_base=query_key_base(operation.path),
        query_key_args=tuple(query_key_args(operation)),
        query_key_type=query_key_type,
        summary=operation.summary,
        deprecated=operation.deprecated,
    )


def _streaming_item_type(schema: IRSchema, streaming_format: str | None, renderer: TypeRenderer) -> str:
    """Arrays stream their items; SSE without an array schema streams text."""
    if isinstance(schema, ArraySchema):
        return renderer.render(schema.items)
    if streaming_format == "sse":
        return "string"
    return renderer.render(schema)


def _signature_schemas(operation: IROperation) -> list[IRSchema]:
    schemas = [param.schema for param in operation.path_params]
    if operation.request_body is not None:
        schemas.append(operation.request_body.schema)
    schemas.append(operation.response.schema)
    return schemas


def _unique_name(name: str, taken: set[str]) -> str:
    """Suffix ``name`` with a counter until it no longer clashes."""
    candidate = name
    counter = 2
    while candidate in taken:
        candidate = f"{name}{counter}"
        counter += 1
    return candidate


def _query_model(
name: str, operation: IROperation, renderer: TypeRenderer) -> ModelArtifact:
    schema = ObjectSchema(
        properties=tuple(
            IRField(name=param.name, type=param.schema, required=param.required) for param in operation.query_params
        )
    )
    return ModelArtifact(name=name, type=renderer.render(schema), validator=render_validator(schema, local=True))


def _import(item: PredefinedType) -> PredefinedImport:
    return PredefinedImport(type=item.type, package=item.package, import_path=item.import_path)


def _select(predefined: list[PredefinedImport], names: list[str]) -> tuple[PredefinedImport, ...]:
    wanted = set(names)
    return tuple(item for item in predefined if item.type in wanted)


def to_json(artifacts: list[ClientArtifacts]) -> list[object]:
    """Convert artifacts into JSON-compatible data for the template step."""
    return [to_jsonable(item) for item in artifacts]
