"""Reading OpenAPI documents from files, URLs and mappings.

Local ``#/...`` references are left in place: the IR builder relies on them
to name models. References into other files are inlined, since nothing
downstream can follow them.
"""

from __future__ import annotations

import json
import logging
from copy import deepcopy
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path
from typing import Mapping, cast
from urllib.parse import urldefrag, urlparse
from urllib.request import Request, urlopen

import yaml

from .errors import SpecError
from .openapi import OpenAPIDocument

logger = logging.getLogger(__name__)

SpecSource = str | PathLike[str] | Mapping[str, object]

_YAML_SUFFIXES = {".yaml", ".yml"}


def load_spec(source: SpecSource, base_path: str | PathLike[str] | None = None) -> OpenAPIDocument:
    """Load an OpenAPI document.

    Args:
        source: A file path, an http(s) URL, or an already parsed mapping
        base_path: Directory used for relative external references; defaults
            to the directory of the source file

    Returns:
        The document with external file references inlined

    Raises:
        SpecError: If the source cannot be read or is not a JSON object
    """
    explicit_base = Path(base_path) if base_path is not None else None
    document, source_base = _read_source(source)
    logger.debug("Loaded OpenAPI document from %s", _describe(source))
    return ExternalRefInliner(document, explicit_base or source_base).inline()


@dataclass
class ExternalRefInliner:
    """Replaces ``other.yaml#/pointer`` references by the value they point to.

    ``#/`` references inside an inlined fragment are resolved against the
    file the fragment came from. The root document's own ``#/`` references
    are kept verbatim.

    Example:
        >>> inliner = ExternalRefInliner(document, Path("./specs"))
        >>> resolved = inliner.inline()
    """

    document: OpenAPIDocument
    base_path: Path | None
    _doc_cache: dict[Path, Mapping[str, object]] = field(default_factory=dict, init=False)

    def inline(self) -> OpenAPIDocument:
        base = self.base_path or Path.cwd()
        return cast(OpenAPIDocument, self._walk(self.document, base, None, ()))

    def _walk(self, obj: object, current_base: Path, current_doc: Path | None, stack: tuple[str, ...]) -> object:
        if isinstance(obj, list):
            return [self._walk(item, current_base, current_doc, stack) for item in obj]
        if not isinstance(obj, dict):
            return obj
        obj_dict = cast(dict[str, object], obj)
        ref = obj_dict.get("$ref")
        if isinstance(ref, str):
            path_part, fragment = urldefrag(ref)
            if path_part or current_doc is not None:
                return self._inline_ref(obj_dict, path_part, fragment, current_base, current_doc, stack)
        return {key: self._walk(value, current_base, current_doc, stack) for key, value in obj_dict.items()}

    def _inline_ref(
        self,
        obj: dict[str, object],
        path_part: str,
        fragment: str,
        current_base: Path,
        current_doc: Path | None,
        stack: tuple[str, ...],
    ) -> object:
        if path_part:
            target_path = (current_base / path_part).resolve()
        else:
            target_path = cast(Path, current_doc)
        key = f"{target_path}#{fragment}"
        if key in stack:
            raise SpecError(f"Circular external $ref: {' -> '.join([*stack, key])}")
        if fragment and not fragment.startswith("/"):
            raise SpecError(f"Unsupported $ref fragment: {fragment}")
        target = _resolve_pointer(self._load(target_path), fragment, str(target_path))
        resolved = self._walk(deepcopy(target), target_path.parent, target_path, (*stack, key))
        siblings = {name: value for name, value in obj.items() if name != "$ref"}
        if not siblings:
            return resolved
        if not isinstance(resolved, dict):
            raise SpecError("$ref target must be an object when merged")
        merged = dict(resolved)
        for name, value in siblings.items():
            merged[name] = self._walk(value, current_base, current_doc, stack)
        return merged

    def _load(self, path: Path) -> Mapping[str, object]:
        if path not in self._doc_cache:
            data = _parse(path.read_text(encoding="utf-8"), path.suffix.lower())
            if not isinstance(data, dict):
                raise SpecError(f"Referenced document must be an object: {path}")
            self._doc_cache[path] = data
        return self._doc_cache[path]


def _describe(source: SpecSource) -> str:
    if isinstance(source, Mapping):
        return "<mapping>"
    return str(source)


def _is_url(source: str) -> bool:
    return urlparse(source).scheme in {"http", "https"}


def _fetch_url(url: str) -> str:
    try:
        request = Request(url, headers={"User-Agent": "sdkgen"})
        with urlopen(request, timeout=30) as response:  # noqa: S310
            return response.read().decode("utf-8")
    except OSError as exc:
        raise SpecError(f"Failed to fetch URL: {url}") from exc


def _url_extension(url: str) -> str:
    path = urlparse(url).path
    if "." in path.rsplit("/", 1)[-1]:
        return "." + path.rsplit(".", 1)[-1].lower()
    return ""


def _read_source(source: SpecSource) -> tuple[OpenAPIDocument, Path | None]:
    if isinstance(source, Mapping):
        return cast(OpenAPIDocument, dict(source)), None

    source_str = str(source) if isinstance(source, PathLike) else source
    if _is_url(source_str):
        data = _parse(_fetch_url(source_str), _url_extension(source_str))
        base: Path | None = None
    else:
        path = Path(source_str)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise SpecError(f"Cannot read OpenAPI document: {path}") from exc
        data = _parse(text, path.suffix.lower())
        base = path.parent
    if not isinstance(data, dict):
        raise SpecError("OpenAPI document must be an object")
    return cast(OpenAPIDocument, data), base


def _parse(text: str, suffix: str) -> object:
    """Parse JSON or YAML; unknown suffixes try JSON first."""
    try:
        if suffix in _YAML_SUFFIXES:
            return yaml.safe_load(text)
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise SpecError(f"Invalid JSON or YAML document: {exc}") from exc


def _resolve_pointer(document: Mapping[str, object], fragment: str, origin: str) -> object:
    if fragment in {"", "/"}:
        return document
    current: object = document
    for part in fragment[1:].split("/"):
        key = part.replace("~1", "/").replace("~0", "~")
        if isinstance(current, dict) and key in current:
            current = current[key]
        elif isinstance(current, list) and key.isdigit() and int(key) < len(current):
            current = current[int(key)]
        else:
            raise SpecError(f"Unresolvable $ref pointer: {origin}#{fragment}")
    return current
