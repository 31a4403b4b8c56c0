"""Shared utilities used across services."""

from .http_client import AsyncHTTPClient, HTTPClientError, HTTPTimeoutError

__all__ = [
    "AsyncHTTPClient",
    "HTTPClientError",
    "HTTPTimeoutError",
]
