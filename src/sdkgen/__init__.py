from .builder import build_ir, detect_streaming, filter_ir
from .config import Config, PredefinedType, TypeScriptClient, load_config, parse_config
from .customer_config import (
    ExtractedTypes,
    SourceRegistry,
    extract_types,
    extract_types_from_config,
    load_customer_config,
)
from .errors import ConfigError, ReferenceCycleError, SdkgenError, SpecError, UnsupportedVersionError
from .generation import QueryKeyGenerator, TypeRenderer, build_artifacts, render_validator
from .ir import IRDocument, IROperation, IRSchema
from .loader import load_spec
from .nullability import classify, is_nullable
from .overrides import find_simple_type_schemas, transform_spec_for_types
from .pipeline import run
from .resolver import get_schema_from_ref, resolve_ref
from .versions import detect_version, is_supported_version

__all__ = [
    "SdkgenError",
    "SpecError",
    "UnsupportedVersionError",
    "ReferenceCycleError",
    "ConfigError",
    "Config",
    "PredefinedType",
    "TypeScriptClient",
    "load_config",
    "parse_config",
    "ExtractedTypes",
    "SourceRegistry",
    "extract_types",
    "extract_types_from_config",
    "load_customer_config",
    "find_simple_type_schemas",
    "transform_spec_for_types",
    "IRDocument",
    "IROperation",
    "IRSchema",
    "build_ir",
    "detect_streaming",
    "filter_ir",
    "load_spec",
    "classify",
    "is_nullable",
    "get_schema_from_ref",
    "resolve_ref",
    "detect_version",
    "is_supported_version",
    "QueryKeyGenerator",
    "TypeRenderer",
    "build_artifacts",
    "render_validator",
    "run",
]
