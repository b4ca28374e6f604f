from .artifacts import ClientArtifacts, ModelArtifact, OperationArtifact, ServiceArtifact, build_artifacts, to_json
from .query_keys import QueryKeyGenerator, has_optional_query_key_params, query_key_args, query_key_base
from .type_renderer import TypeRenderer, used_predefined_types
from .validators import render_validator

__all__ = [
    "ClientArtifacts",
    "ModelArtifact",
    "OperationArtifact",
    "ServiceArtifact",
    "build_artifacts",
    "to_json",
    "QueryKeyGenerator",
    "has_optional_query_key_params",
    "query_key_args",
    "query_key_base",
    "TypeRenderer",
    "used_predefined_types",
    "render_validator",
]
