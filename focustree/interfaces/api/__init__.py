"""API interface for focustree.

Exports the FastAPI router and app factory.
"""

from focustree.interfaces.api.routes import create_app, router

__all__ = ["router", "create_app"]
