from __future__ import annotations

from dataclasses import dataclass

import pytest

from sdkgen.naming import (
    build_path_template,
    derive_method_name,
    order_path_params,
    parse_operation_id,
    path_param_names,
    quote_property_name,
    split_camel_case,
    to_camel_case,
    to_kebab_case,
    to_pascal_case,
    to_snake_case,
)


@dataclass
class _Param:
    name: str


class TestCaseConversion:
    @pytest.mark.parametrize(
        ("value", "pascal", "camel", "snake", "kebab"),
        [
            pytest.param("user_profile", "UserProfile", "userProfile", "user_profile", "user-profile", id="snake"),
            pytest.param("api-keys", "ApiKeys", "apiKeys", "api_keys", "api-keys", id="kebab"),
            pytest.param("findAll", "FindAll", "findAll", "find_all", "find-all", id="camel"),
            pytest.param("XMLHttpRequest", "XmlHttpRequest", "xmlHttpRequest", "xml_http_request", "xml-http-request", id="acronym"),
        ],
    )
    def test_conversions(self, value: str, pascal: str, camel: str, snake: str, kebab: str) -> None:
        assert to_pascal_case(value) == pascal
        assert to_camel_case(value) == camel
        assert to_snake_case(value) == snake
        assert to_kebab_case(value) == kebab

    def test_split_camel_case(self) -> None:
        assert split_camel_case("getUserByID") == ["get", "User", "By", "ID"]


class TestMethodNames:
    def test_parse_operation_id(self) -> None:
        assert parse_operation_id("UsersController_findAll") == "findAll"
        assert parse_operation_id("listUsers") == "listUsers"

    @pytest.mark.parametrize(
        ("operation_id", "method", "path", "expected"),
        [
            pytest.param("UsersController_findAll", "GET", "/users", "findAll", id="operation-id"),
            pytest.param("", "GET", "/users", "list", id="list"),
            pytest.param("", "GET", "/users/{id}", "get", id="get"),
            pytest.param("", "POST", "/users", "create", id="create"),
            pytest.param("", "PUT", "/users/{id}", "update", id="put"),
            pytest.param("", "PATCH", "/users/{id}", "update", id="patch"),
            pytest.param("", "DELETE", "/users/{id}", "delete", id="delete"),
            pytest.param("", "HEAD", "/users", "head", id="other"),
        ],
    )
    def test_derive_method_name(self, operation_id: str, method: str, path: str, expected: str) -> None:
        assert derive_method_name(operation_id, method, path) == expected


class TestPaths:
    def test_path_param_names(self) -> None:
        assert path_param_names("/workspaces/{workspaceId}/resources/{resourceId}") == ["workspaceId", "resourceId"]

    def test_order_path_params(self) -> None:
        params = [_Param("b"), _Param("extra"), _Param("a")]
        ordered = order_path_params("/x/{a}/y/{b}", params)
        assert [param.name for param in ordered] == ["a", "b"]

    def test_build_path_template(self) -> None:
        assert build_path_template("/users/{id}/posts") == "`/users/${encodeURIComponent(id)}/posts`"

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            pytest.param("id", "id", id="identifier"),
            pytest.param("$meta", "$meta", id="dollar"),
            pytest.param("display-name", '"display-name"', id="dash"),
            pytest.param("1st", '"1st"', id="leading-digit"),
        ],
    )
    def test_quote_property_name(self, name: str, expected: str) -> None:
        assert quote_property_name(name) == expected
