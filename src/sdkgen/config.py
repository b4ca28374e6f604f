"""Validated codegen configuration.

The configuration names the OpenAPI document and one or more clients to
generate. It is validated with pydantic before any document processing
starts; validation failures surface as ``ConfigError`` naming the field.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .customer_config import get_source
from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "sdkgen.config.py"

TYPESCRIPT_TEMPLATE_NAMES = (
    "client.ts.hbs",
    "index.ts.hbs",
    "package.json.hbs",
    "README.md.hbs",
    "schema.ts.hbs",
    "schema.zod.ts.hbs",
    "service.ts.hbs",
    "tsconfig.json.hbs",
    "utils.ts.hbs",
)

OperationIdParser = Callable[[str, str, str], str]


class PredefinedType(BaseModel):
    """A component schema imported from an external package instead of generated."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    type: str = Field(..., min_length=1, description="Component schema name, e.g. ResourceType")
    package: str = Field(..., min_length=1, description="Package to import from")
    import_path: Optional[str] = Field(default=None, alias="importPath")


class TypeScriptClient(BaseModel):
    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    type: Literal["typescript"]
    out_dir: str = Field(..., min_length=1, alias="outDir")
    name: str = Field(..., min_length=1)
    package_name: str = Field(..., min_length=1, alias="packageName")
    module_name: Optional[str] = Field(default=None, alias="moduleName")
    include_tags: Optional[list[str]] = Field(default=None, alias="includeTags")
    exclude_tags: Optional[list[str]] = Field(default=None, alias="excludeTags")
    include_query_keys: Optional[bool] = Field(default=None, alias="includeQueryKeys")
    predefined_types: Optional[list[PredefinedType]] = Field(default=None, alias="predefinedTypes")
    templates: Optional[dict[str, str]] = None
    exclude: Optional[list[str]] = None
    default_base_url: Optional[str] = Field(default=None, alias="defaultBaseURL")
    operation_id_parser: Optional[OperationIdParser] = Field(default=None, alias="operationIdParser")
    pre_command: Optional[list[str]] = Field(default=None, alias="preCommand")
    post_command: Optional[list[str]] = Field(default=None, alias="postCommand")
    dependencies: Optional[dict[str, str]] = None
    dev_dependencies: Optional[dict[str, str]] = Field(default=None, alias="devDependencies")
    format_code: Optional[bool] = Field(default=None, alias="formatCode")

    @field_validator("templates")
    @classmethod
    def _check_template_names(cls, value: Optional[dict[str, str]]) -> Optional[dict[str, str]]:
        if value is None:
            return value
        unknown = [key for key in value if key not in TYPESCRIPT_TEMPLATE_NAMES]
        if unknown:
            raise ValueError(f"Template names must be one of: {', '.join(TYPESCRIPT_TEMPLATE_NAMES)}")
        return value

    @property
    def predefined_type_names(self) -> set[str]:
        return {item.type for item in self.predefined_types or []}


Client = TypeScriptClient


class Config(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    spec: str = Field(..., min_length=1)
    name: Optional[str] = None
    clients: list[Client] = Field(..., min_length=1)


def parse_config(data: Mapping[str, Any]) -> Config:
    """Validate a raw configuration mapping.

    Raises:
        ConfigError: With one ``<field>: <problem>`` line per validation error
    """
    try:
        return Config.model_validate(dict(data))
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration:\n{_format_errors(exc)}") from exc


def _format_errors(exc: ValidationError) -> str:
    lines = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "<root>"
        lines.append(f"  {location}: {error['msg']}")
    return "\n".join(lines)


def load_config(path: str | Path) -> Config:
    """Load, validate and normalize a configuration file.

    Relative ``spec`` and ``outDir`` values are made absolute against the
    directory of the configuration file. URL specs are left untouched.
    """
    config_path = Path(path).resolve()
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    raw = get_source(config_path).load(config_path)
    if not isinstance(raw, Mapping):
        raise ConfigError(f"Failed to load config from {config_path}: config must be a mapping")
    config = parse_config(raw)
    logger.debug("Loaded configuration with %d client(s) from %s", len(config.clients), config_path)
    return normalize_paths(config, config_path.parent)


def normalize_paths(config: Config, base_dir: Path) -> Config:
    spec = config.spec
    if not is_url(spec) and not Path(spec).is_absolute():
        spec = str((base_dir / spec).resolve())
    clients = [
        client.model_copy(update={"out_dir": str((base_dir / client.out_dir).resolve())})
        if not Path(client.out_dir).is_absolute()
        else client
        for client in config.clients
    ]
    return config.model_copy(update={"spec": spec, "clients": clients})


def is_url(value: str) -> bool:
    return value.startswith(("http://", "https://"))


def find_default_config(start: str | Path | None = None) -> Path | None:
    """Search ``start`` and its parents for ``sdkgen.config.py``."""
    current = Path(start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / DEFAULT_CONFIG_FILE
        if candidate.is_file():
            return candidate
    return None
