"""
Unit tests for the Request Builder and curl formatter

Tests:
- Path substitution
- Required-field auto-fill per schema type
- Caller values are never overwritten or mutated
- Header merging
- curl rendering
"""

import copy

import pytest

from conftest import BASE_URL
from swagger_explorer.builder import RequestBuilder, to_curl
from swagger_explorer.introspection.endpoint_resolver import find_operation
from swagger_explorer.schema.models import Endpoint, LoadedDocument, RequestDescriptor


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def loaded(sample_document):
    return LoadedDocument(document=sample_document, name="users", base_url=BASE_URL)


@pytest.fixture
def builder():
    return RequestBuilder()


def inline_endpoint(method, schema):
    """Endpoint with an inline JSON request body schema"""
    operation = {"requestBody": {"content": {"application/json": {"schema": schema}}}}
    return Endpoint(path="/items", method=method, operation=operation, base_url=BASE_URL)


# ============================================================================
# TEST: path substitution
# ============================================================================


class TestPathSubstitution:
    """{name} placeholders"""

    def test_get_user_by_id(self, builder, loaded):
        endpoint = find_operation(loaded, "/users/{id}", "GET")
        request = builder.build(endpoint, path_params={"id": "42"})

        assert request.method == "GET"
        assert request.url == f"{BASE_URL}/users/42"
        assert request.body is None
        assert request.headers == {"Content-Type": "application/json"}

    def test_unmatched_placeholder_stays_literal(self, builder, loaded):
        endpoint = find_operation(loaded, "/users/{id}", "get")
        request = builder.build(endpoint)
        assert request.url == f"{BASE_URL}/users/{{id}}"

    def test_every_occurrence_replaced(self):
        assert RequestBuilder.substitute_path("/a/{x}/b/{x}", {"x": 7}) == "/a/7/b/7"

    def test_values_are_not_encoded(self):
        assert RequestBuilder.substitute_path("/files/{name}", {"name": "a b"}) == "/files/a b"

    def test_query_params_are_copied(self, builder, loaded):
        query = {"limit": "10"}
        request = builder.build(find_operation(loaded, "/users", "get"), query_params=query)

        assert request.query_params == {"limit": "10"}
        assert request.query_params is not query


# ============================================================================
# TEST: auto-fill
# ============================================================================


class TestAutoFill:
    """Required-field placeholders for POST/PUT/PATCH"""

    def test_fills_every_type_through_ref(self, builder, loaded):
        request = builder.build(find_operation(loaded, "/users", "post"))

        assert request.body == {
            "name": "test_string",
            "age": 0,
            "score": 0,
            "active": False,
            "tags": [],
            "profile": {},
        }
        assert "nickname" not in request.body

    def test_caller_values_preserved(self, builder, loaded):
        tags = ["admin"]
        body = {"name": "Ada", "tags": tags, "age": None}

        request = builder.build(find_operation(loaded, "/users", "post"), body=body)

        assert request.body["name"] == "Ada"
        assert request.body["tags"] is tags
        assert request.body["age"] is None
        assert request.body["score"] == 0

    def test_caller_body_not_mutated(self, builder, loaded):
        body = {"name": "Ada"}
        snapshot = copy.deepcopy(body)

        request = builder.build(find_operation(loaded, "/users", "post"), body=body)

        assert body == snapshot
        assert request.body is not body

    def test_fresh_containers(self, builder, loaded):
        endpoint = find_operation(loaded, "/users", "post")
        first = builder.build(endpoint).body
        second = builder.build(endpoint).body

        first["tags"].append("x")
        assert second["tags"] == []
        assert first["profile"] is not second["profile"]

    @pytest.mark.parametrize("method", ["put", "patch"])
    def test_other_body_methods(self, builder, method):
        schema = {"type": "object", "properties": {"title": {"type": "string"}}, "required": ["title"]}
        request = builder.build(inline_endpoint(method, schema))
        assert request.body == {"title": "test_string"}

    @pytest.mark.parametrize("method", ["get", "delete"])
    def test_no_autofill_for_other_methods(self, builder, method):
        schema = {"type": "object", "properties": {"title": {"type": "string"}}, "required": ["title"]}
        request = builder.build(inline_endpoint(method, schema))
        assert request.body is None

    def test_autofill_disabled(self, builder, loaded):
        request = builder.build(find_operation(loaded, "/users", "post"), autofill=False)
        assert request.body is None

    def test_no_required_list(self, builder):
        schema = {"type": "object", "properties": {"title": {"type": "string"}}}
        assert builder.build(inline_endpoint("post", schema)).body is None

    def test_untyped_required_field_skipped(self, builder):
        schema = {
            "type": "object",
            "properties": {"meta": {"description": "anything"}, "title": {"type": "string"}},
            "required": ["meta", "title", "ghost"],
        }
        assert builder.build(inline_endpoint("post", schema)).body == {"title": "test_string"}

    def test_non_object_body_untouched(self, builder):
        schema = {"type": "object", "properties": {"title": {"type": "string"}}, "required": ["title"]}
        request = builder.build(inline_endpoint("post", schema), body=["raw"])
        assert request.body == ["raw"]

    def test_custom_placeholders(self):
        builder = RequestBuilder(placeholders={"string": lambda: "placeholder"})
        schema = {"type": "object", "properties": {"title": {"type": "string"}}, "required": ["title"]}
        assert builder.build(inline_endpoint("post", schema)).body == {"title": "placeholder"}


# ============================================================================
# TEST: headers
# ============================================================================


class TestHeaders:
    """Default Content-Type under caller headers"""

    def test_caller_header_added(self, builder, loaded):
        request = builder.build(find_operation(loaded, "/users", "get"), headers={"X-Trace": "abc"})
        assert request.headers == {"Content-Type": "application/json", "X-Trace": "abc"}

    def test_caller_content_type_wins_case_insensitively(self):
        merged = RequestBuilder.merge_headers({"content-type": "text/plain"})
        assert merged == {"content-type": "text/plain"}


# ============================================================================
# TEST: curl
# ============================================================================


class TestCurl:
    """curl command rendering"""

    def test_get_with_query(self):
        request = RequestDescriptor(
            method="GET",
            url=f"{BASE_URL}/users",
            headers={"Content-Type": "application/json"},
            query_params={"limit": "10", "q": "a b"},
        )

        assert to_curl(request) == (
            "curl -X GET 'http://localhost:8080/users?limit=10&q=a+b' \\\n"
            "  -H 'Content-Type: application/json'"
        )

    def test_post_with_body(self):
        request = RequestDescriptor(
            method="POST",
            url=f"{BASE_URL}/users",
            headers={"Content-Type": "application/json"},
            body={"name": "O'Brien"},
        )
        command = to_curl(request)

        assert command.startswith("curl -X POST http://localhost:8080/users \\\n")
        assert command.endswith("-d '{\"name\": \"O'\"'\"'Brien\"}'")

    def test_body_ignored_for_get(self):
        request = RequestDescriptor(method="GET", url=f"{BASE_URL}/users", body={"x": 1})
        assert "-d" not in to_curl(request)
