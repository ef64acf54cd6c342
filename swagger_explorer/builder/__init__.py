"""
Request Builder Module

Builds live HTTP requests from resolved endpoints:
- Path parameter substitution
- Required body field auto-fill
- curl rendering
"""

from .request_builder import RequestBuilder
from .curl import to_curl

__all__ = [
    "RequestBuilder",
    "to_curl",
]
