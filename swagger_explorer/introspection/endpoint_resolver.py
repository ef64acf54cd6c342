"""
Endpoint Resolver - Locates operations and resolves their parameters,
request body and responses into fully materialized schemas.
"""

from typing import Any, Dict, List, Optional

from swagger_explorer.exceptions import MethodNotFound, PathNotFound
from swagger_explorer.schema.models import Endpoint, LoadedDocument

from .resolver import deref, resolve_media, resolve_schema

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")
JSON_MEDIA_TYPE = "application/json"


def iter_operations(document: Dict[str, Any]):
    """Yield (path, method, operation) for every operation, in document order"""
    paths = document.get("paths") or {}
    for path, path_item in paths.items():
        if not isinstance(path_item, dict):
            continue
        for method, operation in path_item.items():
            if method.lower() in HTTP_METHODS and isinstance(operation, dict):
                yield path, method.lower(), operation


def find_operation(loaded: LoadedDocument, path: str, method: str) -> Endpoint:
    """
    Look up an operation

    Raises:
        PathNotFound: Path absent from the document
        MethodNotFound: Path present but method not declared
    """
    paths = loaded.paths
    path_item = paths.get(path)
    if not isinstance(path_item, dict):
        raise PathNotFound(path, loaded.name, list(paths.keys()))

    wanted = method.lower()
    methods = {m.lower(): op for m, op in path_item.items() if m.lower() in HTTP_METHODS}
    operation = methods.get(wanted)
    if not isinstance(operation, dict):
        raise MethodNotFound(path, wanted, loaded.name, list(methods.keys()))

    # Path-level parameters apply to every operation unless overridden
    shared = path_item.get("parameters")
    if isinstance(shared, list) and shared:
        operation = dict(operation)
        operation["parameters"] = merge_parameters(shared, operation.get("parameters") or [], loaded.document)

    return Endpoint(
        path=path,
        method=wanted,
        operation=operation,
        base_url=loaded.base_url,
        service=loaded.name,
        document=loaded.document,
    )


def merge_parameters(
    shared: List[Any],
    own: List[Any],
    document: Dict[str, Any],
) -> List[Any]:
    """Merge path-level and operation-level parameters; operation wins on (name, in)"""
    def key(param):
        target = deref(param, document)
        if isinstance(target, dict):
            return target.get("name"), target.get("in")
        return None, None

    own_keys = {key(p) for p in own}
    return [p for p in shared if key(p) not in own_keys] + list(own)


def resolve_parameter(param: Any, document: Dict[str, Any]) -> Dict[str, Any]:
    target = deref(param, document)
    if not isinstance(target, dict):
        return {}
    return {
        "name": target.get("name"),
        "in": target.get("in"),
        "required": target.get("required", False),
        "description": target.get("description"),
        "schema": resolve_schema(target.get("schema"), document),
    }


def resolve_request_body(request_body: Any, document: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    target = deref(request_body, document)
    if not isinstance(target, dict):
        return None
    resolved = dict(target)
    if "content" in resolved:
        resolved["content"] = resolve_media(resolved["content"], document)
    return resolved


def resolve_responses(responses: Any, document: Dict[str, Any]) -> Dict[str, Any]:
    resolved = {}
    if not isinstance(responses, dict):
        return resolved
    for code, response in responses.items():
        target = deref(response, document)
        if isinstance(target, dict) and "content" in target:
            target = dict(target)
            target["content"] = resolve_media(target["content"], document)
        resolved[str(code)] = target
    return resolved


def resolve_operation(operation: Dict[str, Any], document: Dict[str, Any]) -> Dict[str, Any]:
    """
    Resolve an operation into a fully materialized description

    Returns:
        Dict with summary, description, parameters, requestBody, responses
    """
    parameters = operation.get("parameters")
    request_body = operation.get("requestBody")
    return {
        "summary": operation.get("summary"),
        "description": operation.get("description"),
        "operationId": operation.get("operationId"),
        "parameters": [resolve_parameter(p, document) for p in parameters] if isinstance(parameters, list) else None,
        "requestBody": resolve_request_body(request_body, document) if request_body is not None else None,
        "responses": resolve_responses(operation.get("responses"), document),
    }


def json_schema(container: Optional[Dict[str, Any]]) -> Optional[Any]:
    """Return the JSON media-type schema of a resolved requestBody/response"""
    if not isinstance(container, dict):
        return None
    content = container.get("content")
    if not isinstance(content, dict):
        return None
    media = content.get(JSON_MEDIA_TYPE)
    if media is None:
        # Vendor JSON types (application/problem+json, application/vnd.x+json)
        for media_type, candidate in content.items():
            if media_type.split(";")[0].strip().endswith("json"):
                media = candidate
                break
    if not isinstance(media, dict):
        return None
    return media.get("schema")


def request_body_schema(endpoint: Endpoint) -> Optional[Any]:
    """Resolved JSON request-body schema of an endpoint, if any"""
    if endpoint.request_body is None:
        return None
    return json_schema(resolve_request_body(endpoint.request_body, endpoint.document))


def success_response_schema(endpoint: Endpoint) -> Optional[Any]:
    """Resolved JSON schema of the first 2xx (or default) response"""
    responses = resolve_responses(endpoint.operation.get("responses"), endpoint.document)
    codes = [c for c in responses if c.startswith("2")] + [c for c in responses if c == "default"]
    for code in codes:
        schema = json_schema(responses[code])
        if schema is not None:
            return schema
    return None
