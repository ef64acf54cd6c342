"""
API Introspection Module

Loads OpenAPI documents and turns them into concrete schemas.
Supports:
- Per-service document cache with explicit refresh
- $ref / allOf resolution with cycle detection
- Endpoint lookup and parameter/body/response resolution
- Type projection to TypeScript / TypedDict declarations
"""

from .document_store import DocumentStore
from .endpoint_resolver import find_operation, resolve_operation
from .projector import project, render
from .resolver import SchemaKind, classify, resolve_schema

__all__ = [
    "DocumentStore",
    "SchemaKind",
    "classify",
    "resolve_schema",
    "find_operation",
    "resolve_operation",
    "project",
    "render",
]
