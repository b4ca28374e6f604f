"""Construction of the IR from an OpenAPI document."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Mapping, Sequence, cast

from .errors import ConfigError, ReferenceCycleError
from .ir import (
    UNKNOWN,
    IRDocument,
    IRModelDef,
    IROperation,
    IRParam,
    IRRequestBody,
    IRResponse,
    IRSchema,
    IRSecurityScheme,
    IRService,
    ObjectSchema,
    RefSchema,
    StreamingFormat,
    StringSchema,
    iter_refs,
    operation_schemas,
)
from .naming import derive_method_name, path_param_names, to_pascal_case
from .openapi import (
    MediaTypeObject,
    OpenAPIDocument,
    OperationObject,
    ParameterObject,
    PathItemObject,
    RequestBodyObject,
    ResponseObject,
    SecuritySchemeObject,
)
from .resolver import RefResolver, is_reference
from .schema_converter import SchemaConverter
from .versions import ensure_supported

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "post", "put", "patch", "delete", "options", "head", "trace")
DEFAULT_TAG = "default"

_JSON = "application/json"
_FORM = "application/x-www-form-urlencoded"
_MULTIPART = "multipart/form-data"
_NDJSON_TYPES = {"application/x-ndjson", "application/x-jsonlines", "application/jsonl"}


def detect_streaming(content_type: str) -> StreamingFormat | None:
    """Classify a response media type as a streaming format.

    Example:
        >>> detect_streaming("text/event-stream; charset=utf-8")
        'sse'
        >>> detect_streaming("application/json") is None
        True
    """
    normalized = media_type(content_type)
    if normalized == "text/event-stream":
        return "sse"
    if normalized in _NDJSON_TYPES:
        return "ndjson"
    if "stream" in normalized or "chunked" in normalized:
        return "chunked"
    return None


def media_type(content_type: str) -> str:
    return content_type.split(";", 1)[0].strip().lower()


def is_json(content_type: str) -> bool:
    normalized = media_type(content_type)
    return normalized == _JSON or normalized.endswith("+json")


def build_ir(document: OpenAPIDocument) -> IRDocument:
    """Build an intermediate representation from an OpenAPI document.

    Args:
        document: An OpenAPI 3.0 or 3.1 document; local ``$ref`` pointers are
            expected to be intact

    Returns:
        An IRDocument containing services, model definitions and security schemes

    Raises:
        UnsupportedVersionError: If the document is not OpenAPI 3.0 or 3.1
    """
    version = ensure_supported(document)
    logger.debug("Building IR for OpenAPI %s document", version)
    ir = IRBuilder(document).build()
    logger.debug(
        "Built %d operations in %d services and %d model definitions",
        len(ir.operations),
        len(ir.services),
        len(ir.model_defs),
    )
    return ir


@dataclass
class IRBuilder:
    """Walks the paths and components of one document.

    Inline object schemas of JSON request and response bodies are lifted into
    named model definitions so that generated code can refer to them. Names
    are ``<Tag><Method>RequestBody`` and ``<Tag><Method>Response``; a name
    that collides with a component or an earlier lifted type leaves the
    schema inline.
    """

    document: OpenAPIDocument
    converter: SchemaConverter = field(init=False)
    resolver: RefResolver = field(init=False)
    _seen_names: set[str] = field(default_factory=set, init=False)
    _lifted: list[IRModelDef] = field(default_factory=list, init=False)

    def __post_init__(self) -> None:
        self.converter = SchemaConverter(self.document)
        self.resolver = RefResolver(self.document)

    def build(self) -> IRDocument:
        models = self._build_component_models()
        grouped: dict[str, list[IROperation]] = {}
        paths = cast(Mapping[str, PathItemObject], self.document.get("paths") or {})
        for path, item in paths.items():
            if not isinstance(item, Mapping):
                continue
            for operation in self._build_path_operations(path, item):
                grouped.setdefault(operation.tag, []).append(operation)
        services = tuple(
            IRService(tag=tag, operations=tuple(sorted(grouped[tag], key=lambda op: (op.path, op.method))))
            for tag in sorted(grouped)
        )
        return IRDocument(
            services=services,
            model_defs=tuple(models + self._lifted),
            security_schemes=tuple(self._build_security_schemes()),
            document=self.document,
        )

    def _build_component_models(self) -> list[IRModelDef]:
        components = self.document.get("components") or {}
        schemas = components.get("schemas") or {}
        self._seen_names.update(schemas)
        models: list[IRModelDef] = []
        for name in sorted(schemas):
            node = schemas[name]
            schema: IRSchema
            if is_reference(node) and self._resolve(node, "schemas") is None:
                schema = UNKNOWN
            else:
                schema = self.converter.convert(node)
            models.append(IRModelDef(name=name, schema=schema, annotations=self.converter.annotations(node)))
        return models

    def _build_path_operations(self, path: str, item: PathItemObject) -> Iterator[IROperation]:
        common = cast(list[ParameterObject], item.get("parameters") or [])
        for method in HTTP_METHODS:
            operation = item.get(method)
            if not isinstance(operation, Mapping):
                continue
            yield self._build_operation(path, method.upper(), cast(OperationObject, operation), common)

    def _build_operation(
        self,
        path: str,
        method: str,
        operation: OperationObject,
        common: list[ParameterObject],
    ) -> IROperation:
        tags = [tag for tag in operation.get("tags") or [] if isinstance(tag, str)]
        tag = tags[0] if tags else DEFAULT_TAG
        operation_id = operation.get("operationId") or ""
        method_name = derive_method_name(operation_id, method, path)
        prefix = f"{to_pascal_case(tag)}{to_pascal_case(method_name)}"

        parameters = self._merge_parameters(common, cast(list[ParameterObject], operation.get("parameters") or []))
        path_params = self._path_params(path, parameters)
        query_params = tuple(self._build_param(param) for param in parameters if param.get("in") == "query")

        return IROperation(
            operation_id=operation_id,
            method=method,
            path=path,
            tag=tag,
            original_tags=tuple(tags) or (DEFAULT_TAG,),
            path_params=path_params,
            query_params=query_params,
            request_body=self._build_request_body(operation.get("requestBody"), f"{prefix}RequestBody"),
            response=self._build_response(
                cast(Mapping[str, ResponseObject], operation.get("responses") or {}),
                f"{prefix}Response",
            ),
            summary=operation.get("summary") or "",
            description=operation.get("description") or "",
            deprecated=bool(operation.get("deprecated", False)),
        )

    def _merge_parameters(
        self,
        common: Sequence[ParameterObject],
        specific: Sequence[ParameterObject],
    ) -> list[ParameterObject]:
        """Merge path-level and operation-level parameters.

        Operation-level parameters override path-level parameters with the
        same name and location. Unresolvable parameter references are skipped.
        """
        merged: dict[tuple[str, str], ParameterObject] = {}
        for node in [*common, *specific]:
            param = self._resolve(node, "parameters")
            if not isinstance(param, Mapping):
                continue
            param = cast(ParameterObject, param)
            name = param.get("name")
            location = param.get("in")
            if not name or not location:
                continue
            merged[(name, location)] = param
        return list(merged.values())

    def _path_params(self, path: str, parameters: list[ParameterObject]) -> tuple[IRParam, ...]:
        declared = {param.get("name"): param for param in parameters if param.get("in") == "path"}
        ordered: list[IRParam] = []
        for name in path_param_names(path):
            param = declared.get(name)
            if param is None:
                ordered.append(IRParam(name=name, schema=StringSchema(), required=True))
            else:
                ordered.append(self._build_param(param))
        return tuple(ordered)

    def _build_param(self, param: ParameterObject) -> IRParam:
        schema_node: object = param.get("schema")
        if schema_node is None:
            content = param.get("content") or {}
            first = next(iter(content.values()), None)
            schema_node = first.get("schema") if isinstance(first, Mapping) else None
        return IRParam(
            name=param.get("name", ""),
            schema=self.converter.convert(schema_node),
            required=bool(param.get("required", False)) or param.get("in") == "path",
            description=param.get("description") or "",
        )

    def _build_request_body(self, node: object, lifted_name: str) -> IRRequestBody | None:
        body = self._resolve(node, "requestBodies")
        if not isinstance(body, Mapping):
            return None
        body = cast(RequestBodyObject, body)
        content = body.get("content") or {}
        if not content:
            return None
        required = bool(body.get("required", False))
        for content_type, media in content.items():
            if is_json(content_type):
                schema = self._lift_inline(media, lifted_name)
                return IRRequestBody(content_type=content_type, schema=schema, required=required)
        if _FORM in content:
            schema = self.converter.convert(content[_FORM].get("schema"))
            return IRRequestBody(content_type=_FORM, schema=schema, required=required)
        if _MULTIPART in content:
            return IRRequestBody(content_type=_MULTIPART, schema=UNKNOWN, required=required)
        content_type, media = next(iter(content.items()))
        return IRRequestBody(
            content_type=content_type,
            schema=self.converter.convert(_media_schema(media)),
            required=required,
        )

    def _build_response(self, responses: Mapping[str, ResponseObject], lifted_name: str) -> IRResponse:
        selected = self._select_response(responses)
        if selected is None:
            return IRResponse(schema=UNKNOWN)
        status, response = selected
        description = response.get("description") or ""
        content = response.get("content") or {}
        if status == "204" or not content:
            return IRResponse(schema=UNKNOWN, description=description)

        for content_type, media in content.items():
            streaming = detect_streaming(content_type)
            if streaming is not None:
                return IRResponse(
                    schema=self.converter.convert(_media_schema(media)),
                    content_type=content_type,
                    is_streaming=True,
                    streaming_format=streaming,
                    description=description,
                )
        for content_type, media in content.items():
            if is_json(content_type):
                return IRResponse(
                    schema=self._lift_inline(media, lifted_name),
                    content_type=content_type,
                    description=description,
                )
        content_type, media = next(iter(content.items()))
        return IRResponse(
            schema=self.converter.convert(_media_schema(media)),
            content_type=content_type,
            description=description,
        )

    def _select_response(self, responses: Mapping[str, ResponseObject]) -> tuple[str, ResponseObject] | None:
        """Choose 200, then 201, then the first other 2xx response."""
        # YAML parses unquoted status codes as integers
        responses = {str(code): response for code, response in responses.items()}
        candidates = [code for code in ("200", "201") if code in responses]
        candidates += [
            code for code in responses if len(code) == 3 and code.startswith("2") and code not in {"200", "201"}
        ]
        for code in candidates:
            response = self._resolve(responses[code], "responses")
            if isinstance(response, Mapping):
                return code, cast(ResponseObject, response)
        return None

    def _lift_inline(self, media: MediaTypeObject, name: str) -> IRSchema:
        node = _media_schema(media)
        schema = self.converter.convert(node)
        if not isinstance(schema, ObjectSchema) or name in self._seen_names:
            return schema
        self._seen_names.add(name)
        self._lifted.append(IRModelDef(name=name, schema=schema, annotations=self.converter.annotations(node)))
        return RefSchema(ref=name)

    def _build_security_schemes(self) -> Iterable[IRSecurityScheme]:
        components = self.document.get("components") or {}
        schemes = components.get("securitySchemes") or {}
        for key in sorted(schemes):
            scheme = self._resolve(schemes[key], "securitySchemes")
            if not isinstance(scheme, Mapping) or "type" not in scheme:
                continue
            scheme = cast(SecuritySchemeObject, scheme)
            scheme_type = scheme["type"]
            if scheme_type == "http":
                yield IRSecurityScheme(
                    key=key,
                    type=scheme_type,
                    scheme=scheme.get("scheme"),
                    bearer_format=scheme.get("bearerFormat"),
                )
            elif scheme_type == "apiKey":
                yield IRSecurityScheme(key=key, type=scheme_type, location=scheme.get("in"), name=scheme.get("name"))
            else:
                yield IRSecurityScheme(key=key, type=scheme_type)

    def _resolve(self, node: object, section: str) -> object | None:
        try:
            return self.resolver.resolve(node, section)
        except ReferenceCycleError:
            return None


def _media_schema(media: object) -> object:
    if isinstance(media, Mapping):
        return media.get("schema")
    return None


def filter_ir(ir: IRDocument, include_tags: Sequence[str] = (), exclude_tags: Sequence[str] = ()) -> IRDocument:
    """Restrict an IR to the operations selected by tag patterns.

    An operation is kept when any of its original tags matches any include
    pattern (or there are no include patterns) and none matches an exclude
    pattern. Model definitions not reachable from a kept operation are
    dropped.

    Raises:
        ConfigError: If a pattern is not a valid regular expression
    """
    include = _compile_patterns(include_tags)
    exclude = _compile_patterns(exclude_tags)
    services: list[IRService] = []
    for service in ir.services:
        kept = tuple(op for op in service.operations if _should_include(op.original_tags, include, exclude))
        if kept:
            services.append(IRService(tag=service.tag, operations=kept))
    filtered = IRDocument(
        services=tuple(services),
        model_defs=ir.model_defs,
        security_schemes=ir.security_schemes,
        document=ir.document,
    )
    referenced = _referenced_models(filtered)
    return IRDocument(
        services=filtered.services,
        model_defs=tuple(model for model in ir.model_defs if model.name in referenced),
        security_schemes=ir.security_schemes,
        document=ir.document,
    )


def _compile_patterns(patterns: Sequence[str]) -> list[re.Pattern[str]]:
    compiled: list[re.Pattern[str]] = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as exc:
            raise ConfigError(f'Invalid tag filter pattern "{pattern}": {exc}') from exc
    return compiled


def _should_include(tags: Sequence[str], include: list[re.Pattern[str]], exclude: list[re.Pattern[str]]) -> bool:
    if include and not any(pattern.search(tag) for tag in tags for pattern in include):
        return False
    return not any(pattern.search(tag) for tag in tags for pattern in exclude)


def _referenced_models(ir: IRDocument) -> set[str]:
    models = ir.schemas
    referenced: set[str] = set()
    pending = [ref for op in ir.operations for schema in operation_schemas(op) for ref in iter_refs(schema)]
    while pending:
        name = pending.pop()
        if name in referenced:
            continue
        referenced.add(name)
        schema = models.get(name)
        if schema is not None:
            pending.extend(iter_refs(schema))
    return referenced
