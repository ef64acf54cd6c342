"""
API Explorer - Discover, inspect and invoke endpoints of OpenAPI services.

One ApiExplorer is built per process; the document cache and the auth
session live on it and are shared by every call.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from config import AppConfig
from swagger_explorer.builder.curl import to_curl
from swagger_explorer.builder.request_builder import RequestBuilder
from swagger_explorer.exceptions import SwaggerExplorerError, TransportError, UpstreamHTTPError
from swagger_explorer.introspection.document_store import DocumentStore
from swagger_explorer.introspection.endpoint_resolver import (
    find_operation,
    iter_operations,
    request_body_schema,
    resolve_operation,
    success_response_schema,
)
from swagger_explorer.introspection.projector import TYPEDDICT_HEADER, project, render, type_name
from swagger_explorer.schema.models import ApiResponse, Endpoint, SearchMatch

from .auth_session import AuthSessionManager
from .search import rank
from .transport import HttpTransport

logger = logging.getLogger(__name__)


class ApiExplorer:
    """
    Facade over document store, resolver, request builder and auth session

    Usage:
    ```python
    explorer = ApiExplorer.from_config(AppConfig.from_env())
    name, endpoints = explorer.list_endpoints()
    for method, path, summary in endpoints:
        print(method, path, summary)
    result = explorer.debug_endpoint("/users/{id}", "get", path_params={"id": "42"})
    ```
    """

    def __init__(
        self,
        store: DocumentStore,
        session: AuthSessionManager,
        builder: Optional[RequestBuilder] = None,
    ):
        self.store = store
        self.session = session
        self.builder = builder or RequestBuilder()

    @classmethod
    def from_config(cls, config: AppConfig) -> "ApiExplorer":
        """Build an explorer (and its shared transport) from configuration"""
        transport = HttpTransport(timeout=config.http.timeout)
        store = DocumentStore([(s.name, s.source_url) for s in config.services], transport)
        session = AuthSessionManager(transport, config.credential)
        return cls(store, session)

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    def list_services(self) -> List[Tuple[str, str]]:
        return [(s.name, s.source_url) for s in self.store.services]

    def refresh_docs(self, service: Optional[str] = None) -> Tuple[str, str]:
        """Force a refetch; returns (service name, document title)"""
        loaded = self.store.get(service, force_refresh=True)
        return loaded.name, loaded.title

    def list_endpoints(self, service: Optional[str] = None) -> Tuple[str, List[Tuple[str, str, str]]]:
        """
        List every operation of a service

        Returns:
            (service name, [(METHOD, path, summary)])
        """
        loaded = self.store.get(service)
        endpoints = [
            (method.upper(), path, operation.get("summary") or "No summary")
            for path, method, operation in iter_operations(loaded.document)
        ]
        return loaded.name, endpoints

    def search_apis(self, query: str, service: Optional[str] = None, limit: int = 50) -> List[SearchMatch]:
        """Rank operations across one or all services; unreachable services are skipped"""
        names = [service] if service else self.store.service_names()
        documents = []
        for name in names:
            try:
                documents.append((name, self.store.get(name).document))
            except SwaggerExplorerError as e:
                logger.warning(f"Skipping search for {name}: {e}")
        return rank(query, documents, limit=limit)

    def get_endpoint_details(self, path: str, method: str, service: Optional[str] = None) -> Dict[str, Any]:
        """Fully resolved description of one operation"""
        endpoint = self._endpoint(path, method, service)
        details = {"service": endpoint.service, "path": path, "method": endpoint.method.upper()}
        details.update(resolve_operation(endpoint.operation, endpoint.document))
        return details

    def generate_interface(
        self,
        path: str,
        method: str,
        service: Optional[str] = None,
        style: str = "typescript",
    ) -> str:
        """
        Emit type declarations for an operation's request body and 2xx response

        Args:
            style: "typescript" or "python" (TypedDict)
        """
        endpoint = self._endpoint(path, method, service)
        operation_id = endpoint.operation.get("operationId")
        base = type_name(operation_id) if isinstance(operation_id, str) else type_name(endpoint.method, endpoint.path)

        blocks = []
        body_schema = request_body_schema(endpoint)
        if body_schema is not None:
            blocks.append(render(project(body_schema), f"{base}Request", style))
        response_schema = success_response_schema(endpoint)
        if response_schema is not None:
            blocks.append(render(project(response_schema), f"{base}Response", style))

        comment = "//" if style == "typescript" else "#"
        if not blocks:
            return f"{comment} No JSON request or response schema for {endpoint.method.upper()} {path}"
        if style == "typescript":
            return "\n\n".join(blocks)
        return "\n\n\n".join([TYPEDDICT_HEADER] + blocks)

    # ------------------------------------------------------------------
    # Invocation
    # ------------------------------------------------------------------

    def debug_endpoint(
        self,
        path: str,
        method: str,
        service: Optional[str] = None,
        path_params: Optional[Dict[str, Any]] = None,
        query_params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        body: Any = None,
    ) -> ApiResponse:
        """
        Execute a real HTTP request

        Upstream failures are reported in the returned ApiResponse
        (is_error=True) rather than raised.
        """
        endpoint = self._endpoint(path, method, service)
        request = self.builder.build(endpoint, path_params, query_params, headers, body)
        logger.info(f"Debugging {request.method} {request.url}")

        try:
            return self.session.execute(request, endpoint.base_url)
        except UpstreamHTTPError as e:
            return ApiResponse(
                status=e.status,
                status_text=e.status_text,
                headers=e.headers,
                body=e.body,
                is_error=True,
                message=f"Request Failed: {e.status} {e.status_text}".strip(),
            )
        except TransportError as e:
            return ApiResponse(is_error=True, message=str(e))

    def generate_curl(
        self,
        path: str,
        method: str,
        service: Optional[str] = None,
        path_params: Optional[Dict[str, Any]] = None,
        query_params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        body: Any = None,
    ) -> str:
        """Render the request as a curl command (no auto-fill, no session token)"""
        loaded = self.store.get(service)
        endpoint = Endpoint(
            path=path,
            method=method.lower(),
            operation={},
            base_url=loaded.base_url,
            service=loaded.name,
            document=loaded.document,
        )
        request = self.builder.build(endpoint, path_params, query_params, headers, body, autofill=False)
        return to_curl(request)

    def _endpoint(self, path: str, method: str, service: Optional[str]) -> Endpoint:
        return find_operation(self.store.get(service), path, method)
