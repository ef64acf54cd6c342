"""
Auth Session Manager - Owns the process-wide bearer token.

States:
- NoToken: requests go out as the caller built them
- HasToken: "Authorization: Bearer <token>" is injected unless the caller
  set an Authorization header explicitly

Every 2xx response is scanned for a token (passive capture). A 401 triggers
at most one automatic login followed by at most one retry of the original
request.
"""

import logging
import re
import threading
from typing import Any, Dict, Optional

from swagger_explorer.exceptions import AutoLoginFailure, TransportError, UpstreamHTTPError
from swagger_explorer.schema.models import ApiResponse, Credential, HttpResponse, RequestDescriptor

from .transport import HttpTransport

logger = logging.getLogger(__name__)

# Checked in this order; the first usable value wins
TOKEN_FIELDS = ("token", "accessToken", "access_token")
AUTHORIZATION_HEADER = "authorization"

# Passively captured tokens must be strictly longer than this
MIN_TOKEN_LENGTH = 20

_BEARER_PREFIX = re.compile(r"^Bearer\s+", re.IGNORECASE)


def strip_bearer(value: str) -> str:
    return _BEARER_PREFIX.sub("", value.strip())


def mask(token: str) -> str:
    """Short, log-safe rendering of a token"""
    return f"{token[:4]}...({len(token)} chars)"


def extract_token(
    body: Any,
    headers: Optional[Dict[str, str]] = None,
    min_length: int = MIN_TOKEN_LENGTH,
) -> Optional[str]:
    """
    Find a token in a response

    Looks at the body fields in TOKEN_FIELDS order, then at an
    authorization header (any case).

    Args:
        body: Decoded response body
        headers: Response headers
        min_length: Token must be longer than this after stripping "Bearer "

    Returns:
        The raw token, or None
    """
    candidates = []
    if isinstance(body, dict):
        candidates.extend(body.get(name) for name in TOKEN_FIELDS)
    for key, value in (headers or {}).items():
        if key.lower() == AUTHORIZATION_HEADER:
            candidates.append(value)

    for candidate in candidates:
        if not isinstance(candidate, str):
            continue
        token = strip_bearer(candidate)
        if token and len(token) > min_length:
            return token
    return None


class AuthSessionManager:
    """
    Executes requests under a shared bearer-token session

    Usage:
    ```python
    session = AuthSessionManager(HttpTransport(), Credential("admin", "secret", "/auth/login"))
    response = session.execute(request, base_url="http://localhost:8080")
    ```
    """

    def __init__(self, transport: HttpTransport, credential: Optional[Credential] = None):
        """
        Initialize session manager

        Args:
            transport: HTTP transport for requests and the login sub-call
            credential: Credentials for auto-login (optional)
        """
        self.transport = transport
        self.credential = credential
        self._token: Optional[str] = None
        self._lock = threading.Lock()

    @property
    def token(self) -> Optional[str]:
        with self._lock:
            return self._token

    @property
    def has_token(self) -> bool:
        return self.token is not None

    def set_token(self, token: str) -> None:
        with self._lock:
            self._token = token
        logger.info(f"Cached auth token {mask(token)}")

    def clear_token(self) -> None:
        with self._lock:
            self._token = None

    def inject(self, request: RequestDescriptor) -> RequestDescriptor:
        """Add the cached bearer token unless the caller set Authorization"""
        token = self.token
        if token is None or request.has_header("Authorization"):
            return request
        logger.debug("Injected cached token")
        return request.with_header("Authorization", f"Bearer {token}")

    def capture_token(self, response: HttpResponse) -> bool:
        """
        Passively capture a token from a successful response

        Returns:
            True if the session now holds a token taken from this response
        """
        if not response.ok:
            return False
        token = extract_token(response.body, response.headers)
        if token is None:
            return False
        self.set_token(token)
        return True

    def execute(self, request: RequestDescriptor, base_url: str) -> ApiResponse:
        """
        Execute a request, recovering once from a 401 when possible

        Args:
            request: Request built by RequestBuilder
            base_url: Service base URL (login paths are relative to it)

        Returns:
            ApiResponse for a 2xx response, or a guidance response when
            credentials exist but no login path is known

        Raises:
            UpstreamHTTPError: Non-2xx response that was not recovered
            TransportError: Request never produced a response
        """
        try:
            response = self._send(self.inject(request))
        except UpstreamHTTPError as e:
            if e.status != 401:
                raise
            return self._handle_unauthorized(request, base_url, e)

        return ApiResponse.from_http(response)

    def _send(self, request: RequestDescriptor) -> HttpResponse:
        response = self.transport.request(
            request.method,
            request.url,
            params=request.query_params,
            headers=request.headers,
            body=request.body,
        )
        self.capture_token(response)
        return response

    def _handle_unauthorized(
        self,
        request: RequestDescriptor,
        base_url: str,
        error: UpstreamHTTPError,
    ) -> ApiResponse:
        if self.credential is None:
            raise error

        if not self.credential.login_path:
            return ApiResponse(
                status=error.status,
                status_text=error.status_text,
                headers=error.headers,
                body=error.body,
                is_error=True,
                message=self.login_guidance(),
            )

        try:
            token = self.login(base_url)
        except AutoLoginFailure as login_error:
            logger.warning(str(login_error))
            raise error

        logger.info("Login success. Retrying original request...")
        # The fresh token replaces a stale caller-supplied Authorization header
        retry = request.with_header("Authorization", f"Bearer {token}")
        response = self._send(retry)
        return ApiResponse.from_http(response, retried=True)

    def login(self, base_url: str) -> str:
        """
        Log in with the stored credential and cache the token

        The payload shape ({"username", "password"}) is fixed.

        Raises:
            AutoLoginFailure: Login call failed or returned no token
        """
        login_path = self.credential.login_path
        login_url = login_path if login_path.startswith("http") else f"{base_url}{login_path}"
        logger.info(f"401 detected. Attempting auto-login to {login_url}...")

        payload = {"username": self.credential.user, "password": self.credential.password}
        try:
            response = self.transport.request(
                "POST",
                login_url,
                headers={"Content-Type": "application/json"},
                body=payload,
            )
        except TransportError as e:
            raise AutoLoginFailure(login_url, str(e)) from e

        token = extract_token(response.body, response.headers, min_length=0)
        if token is None:
            raise AutoLoginFailure(login_url, "response carried no token")

        self.set_token(token)
        return token

    def login_guidance(self) -> str:
        user = self.credential.user if self.credential else "?"
        return (
            "Request failed with 401 Unauthorized.\n\n"
            f"TIP: Credentials are stored (User: {user}). Call the API's login endpoint "
            "(e.g. POST /auth/login) with these credentials; the token in its response "
            "is cached automatically and sent on later requests."
        )
