"""Type extraction from a customer's project configuration.

A customer configuration describes the resources, entitlements and plans of
one project. Only its keys matter here: they become the values injected
into the placeholder schemas by ``sdkgen.overrides``.

Configuration files are read through ``ConfigSource`` implementations looked
up by file extension. Additional formats can be plugged in with
``SourceRegistry.register``.
"""

from __future__ import annotations

import importlib.util
import json
import logging
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Callable, Iterable, Mapping, Protocol

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass
class ExtractedTypes:
    """Value lists for the placeholder schemas; ``None`` means no override."""

    resource_types: list[str] | None = None
    entitlement_types: list[str] | None = None
    plan_types: list[str] | None = None
    limit_types: list[str] | None = None
    usage_limit_types: list[str] | None = None

    def is_empty(self) -> bool:
        return all(
            value is None
            for value in (
                self.resource_types,
                self.entitlement_types,
                self.plan_types,
                self.limit_types,
                self.usage_limit_types,
            )
        )


def extract_types(config: Mapping[str, object]) -> ExtractedTypes:
    """Enumerate the keys of a customer configuration.

    Key order is preserved. Limit names are collected across all plans and
    keep the position where they were first seen.

    Example:
        >>> extract_types({"plans": {"free": {"resource_limits": {"a": 1}}, "pro": {"resource_limits": {"a": 1, "b": 2}}}})
        ExtractedTypes(resource_types=None, entitlement_types=None, plan_types=['free', 'pro'], limit_types=['a', 'b'], usage_limit_types=None)
    """
    extracted = ExtractedTypes()
    resources = config.get("resources")
    if isinstance(resources, Mapping):
        extracted.resource_types = list(resources)
    extracted.entitlement_types = _keys(config.get("entitlements"))
    plans = config.get("plans")
    extracted.plan_types = _keys(plans)

    if isinstance(plans, Mapping):
        plan_values = [plan for plan in plans.values() if isinstance(plan, Mapping)]
        extracted.limit_types = _collect(plan.get("resource_limits") for plan in plan_values)
        extracted.usage_limit_types = _collect(plan.get("usage_based_limits") for plan in plan_values)
    return extracted


def _keys(section: object) -> list[str] | None:
    if not isinstance(section, Mapping) or not section:
        return None
    return list(section)


def _collect(sections: Iterable[object]) -> list[str] | None:
    seen: dict[str, None] = {}
    for section in sections:
        if isinstance(section, Mapping):
            for key in section:
                seen.setdefault(key, None)
    return list(seen) or None


class ConfigSource(Protocol):
    def load(self, path: Path) -> object: ...


class PythonModuleSource:
    """Imports a Python file and reads its ``config`` (or ``default``) attribute.

    A callable export is treated as a factory and invoked without arguments.
    """

    def load(self, path: Path) -> object:
        module_name = f"_sdkgen_config_{uuid.uuid4().hex}"
        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            raise ConfigError(f"Cannot import config module: {path}")
        module = importlib.util.module_from_spec(spec)
        try:
            spec.loader.exec_module(module)
        except Exception as exc:
            raise ConfigError(f"Failed to load config {path}: {exc}") from exc
        if hasattr(module, "config"):
            value = module.config
        elif hasattr(module, "default"):
            value = module.default
        else:
            raise ConfigError(f"Config module {path} must define `config` or `default`")
        if callable(value):
            try:
                value = value()
            except Exception as exc:
                raise ConfigError(f"Failed to load config {path}: {exc}") from exc
        return value


class JsonSource:
    def load(self, path: Path) -> object:
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Failed to load config {path}: {exc}") from exc


class YamlSource:
    def load(self, path: Path) -> object:
        try:
            return yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to load config {path}: {exc}") from exc


class TypeScriptSource:
    def load(self, path: Path) -> object:
        raise ConfigError(
            "TypeScript config files require tsx or ts-node. Please use .py, .json or .yaml instead or ensure tsx is available."
        )


DEFAULT_SOURCES: Mapping[str, Callable[[], ConfigSource]] = MappingProxyType(
    {
        ".py": PythonModuleSource,
        ".json": JsonSource,
        ".yaml": YamlSource,
        ".yml": YamlSource,
        ".ts": TypeScriptSource,
    }
)


@dataclass
class SourceRegistry:
    """Maps file extensions to ``ConfigSource`` factories.

    Each registry starts from ``DEFAULT_SOURCES``; registrations stay local
    to the instance.

    Example:
        >>> registry = SourceRegistry()
        >>> registry.register(".toml", TomlSource)
        >>> load_customer_config("project.toml", registry)
    """

    factories: dict[str, Callable[[], ConfigSource]] = field(default_factory=lambda: dict(DEFAULT_SOURCES))

    def register(self, extension: str, factory: Callable[[], ConfigSource]) -> None:
        if not extension.startswith("."):
            extension = f".{extension}"
        self.factories[extension.lower()] = factory

    def get(self, path: str | Path) -> ConfigSource:
        extension = Path(path).suffix.lower()
        factory = self.factories.get(extension)
        if factory is None:
            supported = ", ".join(self.factories)
            raise ConfigError(f"Unsupported config file format: {extension}. Supported: {supported}")
        return factory()


def get_source(path: str | Path, registry: SourceRegistry | None = None) -> ConfigSource:
    return (registry or SourceRegistry()).get(path)


def load_customer_config(path: str | Path, registry: SourceRegistry | None = None) -> Mapping[str, object]:
    """Load a customer configuration file into a mapping.

    Raises:
        ConfigError: If the format is unsupported, the file cannot be parsed,
            or it does not hold a mapping
        FileNotFoundError: If the file does not exist
    """
    resolved = Path(path).resolve()
    source = get_source(resolved, registry)
    if not resolved.exists():
        raise FileNotFoundError(f"Config file not found: {resolved}")
    value = source.load(resolved)
    if not isinstance(value, Mapping):
        raise ConfigError(f"Config {resolved} must evaluate to a mapping, got {type(value).__name__}")
    logger.debug("Loaded customer config from %s", resolved)
    return value


def extract_types_from_config(path: str | Path, registry: SourceRegistry | None = None) -> ExtractedTypes:
    return extract_types(load_customer_config(path, registry))
