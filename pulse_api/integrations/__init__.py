"""External service integrations."""

from .backend import BackendClient, BackendError, get_backend_client

__all__ = ["BackendClient", "BackendError", "get_backend_client"]
