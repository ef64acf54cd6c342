"""Swagger Explorer - discover, inspect and invoke OpenAPI-described endpoints."""

__version__ = "2.0.0"
