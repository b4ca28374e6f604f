from __future__ import annotations

import pytest

from sdkgen.nullability import TypeInfo, base_type, classify, is_nullable, schema_type

PRIMITIVES = ["string", "number", "integer", "boolean", "object", "array"]


class TestIsNullable:
    @pytest.mark.parametrize("kind", PRIMITIVES)
    def test_openapi30_flag(self, kind: str) -> None:
        assert is_nullable({"type": kind, "nullable": True}) is True

    @pytest.mark.parametrize("kind", PRIMITIVES)
    def test_openapi31_type_list(self, kind: str) -> None:
        assert is_nullable({"type": [kind, "null"]}) is True

    @pytest.mark.parametrize(
        "schema",
        [
            pytest.param({"type": "string"}, id="plain"),
            pytest.param({"type": "string", "nullable": False}, id="flag-false"),
            pytest.param({"type": ["string"]}, id="list-without-null"),
            pytest.param({}, id="empty"),
        ],
    )
    def test_not_nullable(self, schema: dict[str, object]) -> None:
        assert is_nullable(schema) is False

    def test_none_is_not_nullable(self) -> None:
        assert is_nullable(None) is False


class TestTypeInfo:
    def test_schema_type_keeps_list(self) -> None:
        assert schema_type({"type": ["string", "null"]}) == ["string", "null"]

    def test_schema_type_missing(self) -> None:
        assert schema_type({"properties": {}}) is None

    def test_classify(self) -> None:
        assert classify({"type": "integer", "nullable": True}) == TypeInfo(nullable=True, type="integer")
        assert classify(None) == TypeInfo(nullable=False, type=None)

    @pytest.mark.parametrize(
        ("schema", "expected"),
        [
            pytest.param({"type": "string"}, "string", id="string"),
            pytest.param({"type": ["null", "integer"]}, "integer", id="null-first"),
            pytest.param({"type": ["null"]}, "null", id="only-null"),
            pytest.param({"type": []}, None, id="empty-list"),
            pytest.param({}, None, id="untyped"),
        ],
    )
    def test_base_type(self, schema: dict[str, object], expected: str | None) -> None:
        assert base_type(schema) == expected
