"""Cache-key tuple types for generated query-key helpers.

Every operation gets a key of the shape ``[base, ...pathParams, body?, query?]``
where ``base`` is the static part of its path. Optional trailing parts become
separate tuple variants joined into a union, so a caller may omit them.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..ir import IROperation
from ..naming import order_path_params, strip_path_params
from .type_renderer import TypeRenderer


def query_key_base(path: str) -> str:
    """Return the quoted static part of ``path``.

    Example:
        >>> query_key_base("/workspaces/{workspaceId}/resources/{resourceId}")
        "'workspaces/resources'"
    """
    segments = [segment for segment in strip_path_params(path).split("/") if segment]
    return "'" + "/".join(segments) + "'"


def _body_optional(operation: IROperation) -> bool:
    return operation.request_body is not None and not operation.request_body.required


def _query_optional(operation: IROperation) -> bool:
    if not operation.query_params:
        return False
    if _body_optional(operation):
        return True
    return any(not param.required for param in operation.query_params)


def has_optional_query_key_params(operation: IROperation) -> bool:
    return _body_optional(operation) or _query_optional(operation)


def query_key_args(operation: IROperation) -> list[str]:
    """Argument names forwarded to the key helper: path params, query, body."""
    args = [param.name for param in order_path_params(operation.path, operation.path_params)]
    if operation.query_params:
        args.append("query")
    if operation.request_body is not None:
        args.append("body")
    return args


@dataclass
class QueryKeyGenerator:
    renderer: TypeRenderer

    def variants(self, operation: IROperation, query_type: str) -> list[str]:
        """Return each tuple type the key of ``operation`` can take.

        With both an optional body and an optional query the variants are,
        in order: neither, query only, body only, body and query.
        """
        prefix = [query_key_base(operation.path)]
        prefix += [self.renderer.render(param.schema) for param in operation.path_params]

        body = operation.request_body
        body_type = self.renderer.render(body.schema) if body is not None else None
        if body is None:
            body_options = [False]
        elif body.required:
            body_options = [True]
        else:
            body_options = [False, True]

        if not operation.query_params:
            query_options = [False]
        elif _query_optional(operation):
            query_options = [False, True]
        else:
            query_options = [True]

        variants: list[str] = []
        for with_body in body_options:
            for with_query in query_options:
                parts = list(prefix)
                if with_body and body_type is not None:
                    parts.append(body_type)
                if with_query:
                    parts.append(query_type)
                variants.append(_tuple_type(parts))
        return variants

    def key_type(self, operation: IROperation, query_type: str) -> str:
        return " | ".join(self.variants(operation, query_type))


def _tuple_type(parts: list[str]) -> str:
    return "readonly [" + ", ".join(parts) + "]"
