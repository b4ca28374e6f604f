"""Identifier helpers shared by the IR builder and the renderers."""

from __future__ import annotations

import re
from typing import Sequence, TypeVar

_WORD_SPLIT = re.compile(r"[^A-Za-z0-9]+")
_PATH_PARAM = re.compile(r"\{([^{}]+)\}")
_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

_P = TypeVar("_P")


def split_camel_case(word: str) -> list[str]:
    """Split a camelCase or PascalCase word, keeping acronyms together.

    Example:
        >>> split_camel_case("XMLHttpRequest")
        ['XML', 'Http', 'Request']
    """
    parts: list[str] = []
    current = ""
    for index, char in enumerate(word):
        starts_word = False
        if index > 0 and char.isupper():
            previous = word[index - 1]
            following = word[index + 1] if index + 1 < len(word) else ""
            if not previous.isupper():
                starts_word = True
            elif following and not following.isupper():
                starts_word = True
        if starts_word and current:
            parts.append(current)
            current = ""
        current += char
    if current:
        parts.append(current)
    return parts


def _words(value: str) -> list[str]:
    words: list[str] = []
    for chunk in _WORD_SPLIT.split(value.strip()):
        if chunk:
            words.extend(split_camel_case(chunk))
    return words


def to_pascal_case(value: str) -> str:
    return "".join(word[:1].upper() + word[1:].lower() for word in _words(value))


def to_camel_case(value: str) -> str:
    pascal = to_pascal_case(value)
    return pascal[:1].lower() + pascal[1:]


def to_snake_case(value: str) -> str:
    return "_".join(word.lower() for word in _words(value))


def to_kebab_case(value: str) -> str:
    return "-".join(word.lower() for word in _words(value))


def parse_operation_id(operation_id: str) -> str:
    """Strip framework prefixes such as ``UsersController_`` from an operationId."""
    marker = "Controller_"
    index = operation_id.find(marker)
    if index >= 0:
        return operation_id[index + len(marker) :]
    return operation_id


def derive_method_name(operation_id: str, method: str, path: str) -> str:
    """Derive an SDK method name from an operation.

    Uses the operationId when there is one, otherwise REST heuristics on the
    method and whether the path addresses a single item.

    Example:
        >>> derive_method_name("UsersController_findAll", "GET", "/users")
        'findAll'
        >>> derive_method_name("", "GET", "/users/{id}")
        'get'
    """
    parsed = parse_operation_id(operation_id) if operation_id else ""
    if parsed:
        name = to_camel_case(parsed)
        if name:
            return name
    method = method.upper()
    if method == "GET":
        return "get" if path_param_names(path) else "list"
    if method == "POST":
        return "create"
    if method in {"PUT", "PATCH"}:
        return "update"
    if method == "DELETE":
        return "delete"
    return method.lower()


def path_param_names(path: str) -> list[str]:
    """Return the ``{param}`` placeholder names of a path, left to right."""
    return _PATH_PARAM.findall(path)


def strip_path_params(path: str) -> str:
    """Remove every ``{param}`` placeholder from ``path``."""
    return _PATH_PARAM.sub("", path)


def order_path_params(path: str, params: Sequence[_P], name_of: str = "name") -> list[_P]:
    """Order ``params`` by the position of their placeholder in ``path``.

    Parameters that do not appear in the path are dropped.
    """
    by_name = {getattr(param, name_of): param for param in params}
    return [by_name[name] for name in path_param_names(path) if name in by_name]


def build_path_template(path: str) -> str:
    """Convert an OpenAPI path into a TypeScript template literal.

    Example:
        >>> build_path_template("/users/{id}")
        '`/users/${encodeURIComponent(id)}`'
    """
    body = _PATH_PARAM.sub(lambda match: "${encodeURIComponent(" + match.group(1) + ")}", path)
    return f"`{body}`"


def quote_property_name(name: str) -> str:
    """Quote an object property name unless it is a plain identifier."""
    if _IDENTIFIER.match(name):
        return name
    escaped = name.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'
