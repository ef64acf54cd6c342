"""HTTP transport over requests."""
import logging
from typing import Any, Dict, Optional

import requests

from swagger_explorer.exceptions import TransportError, UpstreamHTTPError
from swagger_explorer.schema.models import HttpResponse

logger = logging.getLogger(__name__)


class HttpTransport:
    """Thin wrapper around a requests.Session used for every outbound call."""

    def __init__(self, timeout: int = 30, session: Optional[requests.Session] = None):
        """
        Initialize transport.

        Args:
            timeout: Request timeout in seconds
            session: Pre-built session (tests pass a mock here)
        """
        self.timeout = timeout
        self.session = session or requests.Session()

    def request(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        body: Any = None,
    ) -> HttpResponse:
        """
        Execute a request.

        Returns:
            HttpResponse for any 2xx status

        Raises:
            UpstreamHTTPError: For a non-2xx status (carries status/body)
            TransportError: When the request never produced a response
        """
        logger.debug(f"{method.upper()} {url}")
        try:
            response = self.session.request(
                method.upper(),
                url,
                params=params or None,
                headers=headers or None,
                json=body,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise TransportError(url, str(e)) from e

        result = HttpResponse(
            status=response.status_code,
            status_text=response.reason or "",
            headers=dict(response.headers),
            body=self._decode(response),
        )
        if not result.ok:
            raise UpstreamHTTPError(
                url,
                result.status,
                result.status_text,
                body=result.body,
                headers=result.headers,
            )
        return result

    def get_json(self, url: str) -> Any:
        """
        Fetch a JSON document.

        Raises:
            requests.exceptions.RequestException: On network or HTTP failure
            ValueError: If the payload is not JSON
        """
        response = self.session.get(url, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    @staticmethod
    def _decode(response: requests.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    def close(self) -> None:
        self.session.close()
