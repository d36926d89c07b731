"""Interfaces layer for focustree.

Adapters for external interactions:
- CLI: Command-line interface using Typer
- API: REST API using FastAPI

The interfaces layer accepts and validates input, calls the application
services and formats output.
"""

from focustree.interfaces.cli import app

__all__ = ["app"]
