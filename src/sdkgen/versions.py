"""OpenAPI dialect detection.

OpenAPI 3.0 and 3.1 share the document layout but encode schemas
differently (most visibly nullability). Nothing here rewrites the
document; callers branch on the detected dialect where it matters.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Mapping

from .errors import UnsupportedVersionError
from .openapi import ComponentsObject, InfoObject, OpenAPIDocument, PathItemObject, ServerObject

OpenAPIVersion = Literal["3.0", "3.1", "unknown"]

SUPPORTED_VERSIONS: frozenset[str] = frozenset({"3.0", "3.1"})


def detect_version(document: Mapping[str, object] | OpenAPIDocument) -> OpenAPIVersion:
    """Classify a document by the prefix of its ``openapi`` field.

    Example:
        >>> detect_version({"openapi": "3.1.0"})
        '3.1'
        >>> detect_version({"swagger": "2.0"})
        'unknown'
    """
    version = document.get("openapi")
    if not isinstance(version, str):
        return "unknown"
    if version.startswith("3.1"):
        return "3.1"
    if version.startswith("3.0"):
        return "3.0"
    return "unknown"


def is_supported_version(version: str) -> bool:
    return version in SUPPORTED_VERSIONS


def is_openapi_30(document: OpenAPIDocument) -> bool:
    return detect_version(document) == "3.0"


def is_openapi_31(document: OpenAPIDocument) -> bool:
    return detect_version(document) == "3.1"


def ensure_supported(document: OpenAPIDocument) -> OpenAPIVersion:
    """Return the dialect of ``document`` or raise if it is not 3.0/3.1."""
    version = detect_version(document)
    if not is_supported_version(version):
        raise UnsupportedVersionError(document.get("openapi"))
    return version


@dataclass(frozen=True)
class NormalizedDocument:
    """Version-independent view of the top-level document fields."""

    openapi: str
    info: InfoObject
    paths: dict[str, PathItemObject]
    components: ComponentsObject
    servers: list[ServerObject]


def normalize_document(document: OpenAPIDocument) -> NormalizedDocument:
    openapi = document.get("openapi")
    return NormalizedDocument(
        openapi=openapi if isinstance(openapi, str) else "",
        info=document.get("info") or {},
        paths=document.get("paths") or {},
        components=document.get("components") or {},
        servers=document.get("servers") or [],
    )
