from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, cast

from .errors import ReferenceCycleError
from .openapi import OpenAPIDocument, SchemaObject

_MISSING = object()


def is_reference(node: object) -> bool:
    return isinstance(node, Mapping) and "$ref" in node


def ref_name(ref: str, section: str = "schemas") -> str | None:
    """Extract the component name from a local ``#/components/<section>/<Name>`` pointer.

    Example:
        >>> ref_name("#/components/schemas/User")
        'User'
        >>> ref_name("other.yaml#/components/schemas/User") is None
        True
    """
    prefix = f"#/components/{section}/"
    if not isinstance(ref, str) or not ref.startswith(prefix):
        return None
    name = ref[len(prefix) :]
    if not name or "/" in name:
        return None
    return name.replace("~1", "/").replace("~0", "~")


@dataclass
class RefResolver:
    """Resolves local component references of a single document.

    Chains of references (a component that is itself a ``$ref``) are
    followed to the first concrete node. Results are memoized per pointer
    for the lifetime of the resolver, so one resolver should be used for one
    document only.

    Example:
        >>> document = {"components": {"schemas": {"A": {"$ref": "#/components/schemas/B"}, "B": {"type": "string"}}}}
        >>> RefResolver(document).resolve({"$ref": "#/components/schemas/A"})
        {'type': 'string'}
    """

    document: OpenAPIDocument
    _cache: dict[tuple[str, str], object] = field(default_factory=dict, init=False)

    def resolve(self, node: object, section: str = "schemas") -> object | None:
        """Resolve ``node`` to a concrete component node.

        Returns:
            ``node`` itself when it is not a reference object, the target of
            the reference chain, or None when a pointer is malformed or names
            a missing component.

        Raises:
            ReferenceCycleError: If the chain leads back to a pointer already visited.
        """
        if not is_reference(node):
            return node
        chain: list[str] = []
        current: object = node
        while is_reference(current):
            ref = cast(Mapping[str, object], current)["$ref"]
            if not isinstance(ref, str):
                return self._remember(chain, section, None)
            cached = self._cache.get((section, ref), _MISSING)
            if cached is not _MISSING:
                return self._remember(chain, section, cached)
            if ref in chain:
                raise ReferenceCycleError([*chain, ref])
            chain.append(ref)
            current = self._lookup(ref, section)
            if current is None:
                return self._remember(chain, section, None)
        return self._remember(chain, section, current)

    def _lookup(self, ref: str, section: str) -> object | None:
        name = ref_name(ref, section)
        if name is None:
            return None
        components = cast(Mapping[str, object], self.document.get("components") or {})
        entries = components.get(section) or {}
        if not isinstance(entries, Mapping):
            return None
        return entries.get(name)

    def _remember(self, chain: list[str], section: str, value: object | None) -> object | None:
        for ref in chain:
            self._cache[(section, ref)] = value
        return value


def resolve_ref(document: OpenAPIDocument, node: object, section: str = "schemas") -> object | None:
    """Resolve a reference against ``document``; see ``RefResolver.resolve``."""
    return RefResolver(document).resolve(node, section)


def get_schema_from_ref(document: OpenAPIDocument, node: object) -> SchemaObject | None:
    """Resolve a schema or schema reference, treating every failure as absence."""
    if not isinstance(node, Mapping):
        return None
    try:
        resolved = resolve_ref(document, node)
    except ReferenceCycleError:
        return None
    if not isinstance(resolved, Mapping):
        return None
    return cast(SchemaObject, resolved)
