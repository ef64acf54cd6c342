"""
Request Builder - Turns an endpoint plus caller parameters into a complete
HTTP request descriptor.

Handles:
- Path template substitution ({name} placeholders)
- Required-field auto-fill for POST/PUT/PATCH JSON bodies
- Default Content-Type header merged under caller headers
"""

import logging
from typing import Any, Callable, Dict, Optional

from swagger_explorer.introspection.endpoint_resolver import request_body_schema
from swagger_explorer.schema.models import Endpoint, RequestDescriptor

logger = logging.getLogger(__name__)

BODY_METHODS = ("post", "put", "patch")
DEFAULT_HEADERS = {"Content-Type": "application/json"}
STRING_PLACEHOLDER = "test_string"


def _placeholder_factories() -> Dict[str, Callable[[], Any]]:
    # Factories so every synthesized list/dict is a fresh object
    return {
        "string": lambda: STRING_PLACEHOLDER,
        "number": lambda: 0,
        "integer": lambda: 0,
        "boolean": lambda: False,
        "array": list,
        "object": dict,
    }


class RequestBuilder:
    """
    Builds ready-to-execute request descriptors

    Usage:
    ```python
    builder = RequestBuilder()
    request = builder.build(endpoint, path_params={"id": "42"})
    # request.url == "http://localhost:8080/users/42"
    ```
    """

    def __init__(self, placeholders: Optional[Dict[str, Callable[[], Any]]] = None):
        """
        Initialize RequestBuilder

        Args:
            placeholders: Overrides for type -> placeholder factory
        """
        self.placeholders = _placeholder_factories()
        if placeholders:
            self.placeholders.update(placeholders)

    def build(
        self,
        endpoint: Endpoint,
        path_params: Optional[Dict[str, Any]] = None,
        query_params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        body: Any = None,
        autofill: bool = True,
    ) -> RequestDescriptor:
        """
        Build a request descriptor

        Args:
            endpoint: Endpoint found in a loaded document
            path_params: Values for {name} placeholders
            query_params: Query string parameters
            headers: Caller headers (win over defaults)
            body: Caller body (never overwritten, only completed)
            autofill: Synthesize missing required body fields

        Returns:
            RequestDescriptor with an absolute URL
        """
        path = self.substitute_path(endpoint.path, path_params or {})

        if autofill and endpoint.method in BODY_METHODS:
            body = self.fill_required(body, request_body_schema(endpoint))

        return RequestDescriptor(
            method=endpoint.method.upper(),
            url=f"{endpoint.base_url}{path}",
            headers=self.merge_headers(headers or {}),
            query_params=dict(query_params or {}),
            body=body,
        )

    @staticmethod
    def substitute_path(template: str, path_params: Dict[str, Any]) -> str:
        """Replace {name} placeholders; unmatched placeholders stay literal"""
        path = template
        for name, value in path_params.items():
            path = path.replace(f"{{{name}}}", str(value))
        return path

    @staticmethod
    def merge_headers(headers: Dict[str, str]) -> Dict[str, str]:
        """Caller headers over the defaults (case-insensitive collision)"""
        caller_keys = {key.lower() for key in headers}
        merged = {k: v for k, v in DEFAULT_HEADERS.items() if k.lower() not in caller_keys}
        merged.update(headers)
        return merged

    def fill_required(self, body: Any, schema: Any) -> Any:
        """
        Complete a JSON body with placeholders for absent required fields

        The caller's body is copied, never mutated; supplied fields keep their
        exact value.
        """
        if not isinstance(schema, dict) or not isinstance(schema.get("properties"), dict):
            return body
        required = schema.get("required")
        if not isinstance(required, list) or not required:
            return body
        if body is None:
            body = {}
        if not isinstance(body, dict):
            logger.debug("Body is not a JSON object; skipping auto-fill")
            return body

        filled = dict(body)
        properties = schema["properties"]
        for name in required:
            if name in filled:
                continue
            prop = properties.get(name)
            prop_type = prop.get("type") if isinstance(prop, dict) else None
            factory = self.placeholders.get(prop_type) if isinstance(prop_type, str) else None
            if factory is None:
                logger.debug(f"No placeholder for required field '{name}'")
                continue
            filled[name] = factory()
            logger.debug(f"Auto-filled required field '{name}'")
        return filled
