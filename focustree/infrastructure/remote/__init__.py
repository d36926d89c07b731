"""Remote store access over HTTP."""

from focustree.infrastructure.remote.client import DEFAULT_API_URL, TodoApiClient

__all__ = ["DEFAULT_API_URL", "TodoApiClient"]
