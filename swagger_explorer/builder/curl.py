"""Format a request descriptor as a curl command."""
import json
import shlex
from urllib.parse import urlencode

from swagger_explorer.schema.models import RequestDescriptor

BODY_METHODS = ("POST", "PUT", "PATCH")


def to_curl(request: RequestDescriptor) -> str:
    """
    Render a curl command (one option per line).

    The body is only emitted for POST/PUT/PATCH requests that carry one.
    """
    url = request.url
    if request.query_params:
        separator = "&" if "?" in url else "?"
        url = f"{url}{separator}{urlencode(request.query_params, doseq=True)}"

    parts = [f"curl -X {request.method.upper()} {shlex.quote(url)}"]
    for key, value in request.headers.items():
        parts.append(f"-H {shlex.quote(f'{key}: {value}')}")

    if request.body is not None and request.method.upper() in BODY_METHODS:
        parts.append(f"-d {shlex.quote(json.dumps(request.body, ensure_ascii=False))}")

    return " \\\n  ".join(parts)
