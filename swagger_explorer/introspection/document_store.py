"""
Document Store - Fetches and caches one OpenAPI document per registered service.

Features:
- Service selection (implicit when exactly one service is registered)
- In-memory cache with explicit invalidation (force_refresh)
- IPv4 fallback for localhost documents when the first attempt hits a
  local-connection or permission error
- Base URL derivation from `servers[0].url` or the document origin
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple
from urllib.parse import urljoin, urlsplit, urlunsplit

import requests

from swagger_explorer.api.transport import HttpTransport
from swagger_explorer.exceptions import AmbiguousService, FetchFailure, ServiceNotFound
from swagger_explorer.schema.models import LoadedDocument, ServiceDescriptor

logger = logging.getLogger(__name__)


class DocumentStore:
    """
    Holds the raw OpenAPI document of every registered service

    Usage:
    ```python
    store = DocumentStore([("petstore", "http://localhost:8080/v3/api-docs")])
    loaded = store.get("petstore")
    print(loaded.base_url, len(loaded.paths))
    ```
    """

    # Error text that suggests the host name resolved to an unusable address
    LOCAL_FAILURE_MARKERS = (
        "connection refused",
        "econnrefused",
        "permission denied",
        "eacces",
        "eperm",
        "operation not permitted",
        "cannot assign requested address",
        "eaddrnotavail",
    )

    IPV4_ALIASES = {
        "localhost": "127.0.0.1",
        "::1": "127.0.0.1",
    }

    def __init__(
        self,
        services: Iterable[Tuple[str, str]],
        transport: Optional[HttpTransport] = None,
    ):
        """
        Initialize Document Store

        Args:
            services: (name, source_url) pairs
            transport: HTTP transport used for fetching documents
        """
        self.transport = transport or HttpTransport()
        self._services: Dict[str, ServiceDescriptor] = {
            name: ServiceDescriptor(name=name, source_url=url) for name, url in services
        }
        self._cache: Dict[str, Dict[str, Any]] = {}

    @property
    def services(self) -> List[ServiceDescriptor]:
        return list(self._services.values())

    def service_names(self) -> List[str]:
        return list(self._services.keys())

    def get(self, service_name: Optional[str] = None, force_refresh: bool = False) -> LoadedDocument:
        """
        Get a service's document, fetching it on cache miss

        Args:
            service_name: Registered name (optional when only one is registered)
            force_refresh: Refetch even if cached

        Returns:
            LoadedDocument with document, resolved name and base URL

        Raises:
            AmbiguousService: No name given and several services registered
            ServiceNotFound: Name not registered
            FetchFailure: Document could not be fetched or parsed
        """
        service = self._select(service_name)

        document = self._cache.get(service.name)
        if document is None or force_refresh:
            document = self._fetch(service)
            self._cache[service.name] = document
        else:
            logger.debug(f"Using cached document for '{service.name}'")

        service.base_url = self.derive_base_url(document, service.source_url)
        return LoadedDocument(document=document, name=service.name, base_url=service.base_url)

    def invalidate(self, service_name: Optional[str] = None) -> None:
        """Drop the cached document (all documents when no name is given)"""
        if service_name is None:
            self._cache.clear()
        else:
            self._cache.pop(service_name, None)

    def _select(self, service_name: Optional[str]) -> ServiceDescriptor:
        if not service_name:
            if len(self._services) != 1:
                raise AmbiguousService(self.service_names())
            return next(iter(self._services.values()))

        if service_name not in self._services:
            raise ServiceNotFound(service_name, self.service_names())
        return self._services[service_name]

    def _fetch(self, service: ServiceDescriptor) -> Dict[str, Any]:
        """Fetch a document, retrying once on an IPv4 literal for local failures"""
        url = service.source_url
        logger.info(f"Fetching Swagger docs for '{service.name}' from {url}...")

        try:
            return self._fetch_document(url)
        except (requests.exceptions.RequestException, ValueError) as e:
            alternate = self.ipv4_variant(url)
            if alternate is None or not self._looks_like_local_failure(e):
                logger.error(f"Could not fetch document for '{service.name}': {e}")
                raise FetchFailure(service.name, url, str(e)) from e
            first_error = e

        logger.warning(f"Fetch from {url} failed ({first_error}); retrying with {alternate}")
        try:
            document = self._fetch_document(alternate)
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.error(f"Could not fetch document for '{service.name}' from {alternate}: {e}")
            raise FetchFailure(service.name, url, f"{first_error}; retry against {alternate}: {e}") from e

        logger.info(f"Service '{service.name}' now uses {alternate}")
        service.source_url = alternate
        return document

    def _fetch_document(self, url: str) -> Dict[str, Any]:
        document = self.transport.get_json(url)
        if not isinstance(document, dict):
            raise ValueError(f"Expected a JSON object, got {type(document).__name__}")
        return document

    @classmethod
    def _looks_like_local_failure(cls, error: Exception) -> bool:
        text = str(error).lower()
        return any(marker in text for marker in cls.LOCAL_FAILURE_MARKERS)

    @classmethod
    def ipv4_variant(cls, url: str) -> Optional[str]:
        """Return the URL with its host swapped for an IPv4 literal, if it has one"""
        parts = urlsplit(url)
        host = (parts.hostname or "").lower()
        literal = cls.IPV4_ALIASES.get(host)
        if literal is None:
            return None

        netloc = literal
        if parts.port is not None:
            netloc = f"{literal}:{parts.port}"
        if parts.username:
            auth = parts.username
            if parts.password:
                auth = f"{auth}:{parts.password}"
            netloc = f"{auth}@{netloc}"
        return urlunsplit((parts.scheme, netloc, parts.path, parts.query, parts.fragment))

    @staticmethod
    def derive_base_url(document: Dict[str, Any], source_url: str) -> str:
        """
        Derive the base URL for live calls

        `servers[0].url` wins when present (relative values are resolved against
        the document origin); otherwise the document origin is used.
        """
        parts = urlsplit(source_url)
        origin = f"{parts.scheme}://{parts.netloc}"

        base_url = origin
        servers = document.get("servers")
        if isinstance(servers, list) and servers and isinstance(servers[0], dict):
            server_url = servers[0].get("url")
            if isinstance(server_url, str) and server_url:
                if server_url.startswith("http"):
                    base_url = server_url
                else:
                    base_url = urljoin(f"{origin}/", server_url)

        return base_url.rstrip("/")
