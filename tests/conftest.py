"""Shared fixtures: a sample OpenAPI document and a scripted HTTP transport."""

import copy
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import pytest

from swagger_explorer.exceptions import UpstreamHTTPError
from swagger_explorer.schema.models import HttpResponse

DOC_URL = "http://localhost:8080/v3/api-docs"
BASE_URL = "http://localhost:8080"


def json_content(schema: Dict[str, Any]) -> Dict[str, Any]:
    return {"application/json": {"schema": schema}}


SAMPLE_DOCUMENT = {
    "openapi": "3.0.0",
    "info": {"title": "User Service", "version": "1.0.0"},
    "paths": {
        "/users": {
            "get": {
                "summary": "List users",
                "operationId": "listUsers",
                "parameters": [{"name": "limit", "in": "query", "schema": {"type": "integer"}}],
                "responses": {
                    "200": {
                        "description": "Users",
                        "content": json_content({"type": "array", "items": {"$ref": "#/components/schemas/User"}}),
                    }
                },
            },
            "post": {
                "summary": "Create user",
                "operationId": "createUser",
                "requestBody": {
                    "required": True,
                    "content": json_content({"$ref": "#/components/schemas/NewUser"}),
                },
                "responses": {
                    "201": {
                        "description": "Created",
                        "content": json_content({"$ref": "#/components/schemas/User"}),
                    }
                },
            },
        },
        "/users/{id}": {
            "parameters": [{"$ref": "#/components/parameters/UserId"}],
            "get": {
                "summary": "Get user",
                "description": "Fetch a single user by id",
                "responses": {
                    "200": {
                        "description": "User",
                        "content": json_content({"$ref": "#/components/schemas/User"}),
                    },
                    "404": {"$ref": "#/components/responses/NotFound"},
                },
            },
            "delete": {
                "summary": "Delete user",
                "responses": {"204": {"description": "Deleted"}},
            },
        },
        "/auth/login": {
            "post": {
                "summary": "Login",
                "requestBody": {
                    "content": json_content({
                        "type": "object",
                        "properties": {"username": {"type": "string"}, "password": {"type": "string"}},
                        "required": ["username", "password"],
                    }),
                },
                "responses": {"200": {"description": "Token"}},
            }
        },
        "/teams": {
            "get": {
                "summary": "List teams",
                "responses": {
                    "200": {
                        "description": "Teams",
                        "content": json_content({"type": "array", "items": {"$ref": "#/components/schemas/Team"}}),
                    }
                },
            }
        },
    },
    "components": {
        "parameters": {
            "UserId": {"name": "id", "in": "path", "required": True, "schema": {"type": "string"}},
        },
        "responses": {
            "NotFound": {
                "description": "Not found",
                "content": json_content({"$ref": "#/components/schemas/Error"}),
            }
        },
        "schemas": {
            "User": {
                "type": "object",
                "properties": {
                    "id": {"type": "integer"},
                    "name": {"type": "string"},
                    "role": {"type": "string", "enum": ["admin", "member"]},
                    "tags": {"type": "array", "items": {"type": "string"}},
                },
                "required": ["id", "name"],
            },
            "NewUser": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "age": {"type": "integer"},
                    "score": {"type": "number"},
                    "active": {"type": "boolean"},
                    "tags": {"type": "array", "items": {"type": "string"}},
                    "profile": {"type": "object"},
                    "nickname": {"type": "string"},
                },
                "required": ["name", "age", "score", "active", "tags", "profile"],
            },
            "Team": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "members": {"type": "array", "items": {"$ref": "#/components/schemas/User"}},
                    "parent": {"$ref": "#/components/schemas/Team"},
                },
            },
            "Error": {
                "type": "object",
                "properties": {"message": {"type": "string"}},
            },
        },
    },
}


@dataclass
class Call:
    method: str
    url: str
    params: Optional[Dict[str, Any]] = None
    headers: Dict[str, str] = field(default_factory=dict)
    body: Any = None


class ScriptedTransport:
    """
    Stand-in for HttpTransport

    `handler(call)` returns an HttpResponse; non-2xx responses are raised as
    UpstreamHTTPError, like the real transport does. `documents` maps URLs to
    documents (or exceptions) for get_json.
    """

    def __init__(
        self,
        handler: Optional[Callable[[Call], HttpResponse]] = None,
        documents: Optional[Dict[str, Any]] = None,
    ):
        self.handler = handler or (lambda call: HttpResponse(200, "OK", {}, {}))
        self.documents = documents or {}
        self.calls: List[Call] = []
        self.fetched: List[str] = []

    def request(self, method, url, params=None, headers=None, body=None) -> HttpResponse:
        call = Call(method.upper(), url, params, dict(headers or {}), copy.deepcopy(body))
        self.calls.append(call)
        response = self.handler(call)
        if not response.ok:
            raise UpstreamHTTPError(url, response.status, response.status_text, body=response.body,
                                    headers=response.headers)
        return response

    def get_json(self, url: str) -> Any:
        self.fetched.append(url)
        document = self.documents[url]
        if isinstance(document, Exception):
            raise document
        return document

    def calls_to(self, url: str) -> List[Call]:
        return [c for c in self.calls if c.url == url]


@pytest.fixture
def sample_document():
    """Fresh deep copy of the sample OpenAPI document"""
    return copy.deepcopy(SAMPLE_DOCUMENT)


@pytest.fixture
def scripted_transport():
    """Factory for ScriptedTransport instances"""
    return ScriptedTransport
