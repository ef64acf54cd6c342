"""
Error taxonomy for swagger-explorer.

Lookup errors (AmbiguousService, ServiceNotFound, PathNotFound, MethodNotFound)
are fatal to the current call and always name the valid alternatives.
FetchFailure is fatal to the call but not to the process.
UpstreamHTTPError is turned into call output by the explorer facade.
AutoLoginFailure never leaves the auth session manager.
"""

from typing import Any, Dict, Iterable, Optional


class SwaggerExplorerError(Exception):
    """Base class for all swagger-explorer errors"""


def _join(names: Iterable[str]) -> str:
    names = list(names)
    return ", ".join(names) if names else "(none)"


class AmbiguousService(SwaggerExplorerError):
    """Raised when no service name is given and several are registered"""

    def __init__(self, available: Iterable[str]):
        self.available = list(available)
        super().__init__(
            f"Multiple services configured. Please specify 'service_name'. "
            f"Available: {_join(self.available)}"
        )


class ServiceNotFound(SwaggerExplorerError):
    """Raised when a service name is not registered"""

    def __init__(self, name: Optional[str], available: Iterable[str]):
        self.name = name
        self.available = list(available)
        super().__init__(f"Service '{name}' not found. Available: {_join(self.available)}")


class FetchFailure(SwaggerExplorerError):
    """Raised when an OpenAPI document cannot be fetched or parsed"""

    def __init__(self, name: str, url: str, reason: str):
        self.name = name
        self.url = url
        self.reason = reason
        super().__init__(
            f"Failed to fetch Swagger docs for '{name}': {reason}. "
            f"Please ensure the service at {url} is running."
        )


class PathNotFound(SwaggerExplorerError):
    """Raised when a path is absent from the document"""

    def __init__(self, path: str, service: str, available: Iterable[str] = ()):
        self.path = path
        self.service = service
        self.available = list(available)
        message = f"Path '{path}' not found in '{service}'."
        if self.available:
            shown = self.available[:20]
            more = len(self.available) - len(shown)
            message += f" Available paths: {_join(shown)}"
            if more > 0:
                message += f" (+{more} more)"
        super().__init__(message)


class MethodNotFound(SwaggerExplorerError):
    """Raised when a path exists but does not declare the requested method"""

    def __init__(self, path: str, method: str, service: str, available: Iterable[str] = ()):
        self.path = path
        self.method = method
        self.service = service
        self.available = list(available)
        super().__init__(
            f"Method '{method}' not found for '{path}' in '{service}'. "
            f"Available methods: {_join(m.upper() for m in self.available)}"
        )


class TransportError(SwaggerExplorerError):
    """Raised when a live HTTP call fails below the HTTP layer"""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Request to {url} failed: {reason}")


class UpstreamHTTPError(TransportError):
    """Raised for a non-2xx response; carries the decoded response"""

    def __init__(
        self,
        url: str,
        status: int,
        status_text: str = "",
        body: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.status = status
        self.status_text = status_text
        self.body = body
        self.headers = headers or {}
        super().__init__(url, f"{status} {status_text}".strip())


class AutoLoginFailure(SwaggerExplorerError):
    """Raised by the login sub-call when it fails or yields no token"""

    def __init__(self, login_url: str, reason: str):
        self.login_url = login_url
        self.reason = reason
        super().__init__(f"Auto-login to {login_url} failed: {reason}")
