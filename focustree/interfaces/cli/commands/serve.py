"""Serve the HTTP API."""

import logging
from pathlib import Path
from typing import Optional

import typer
import uvicorn

from focustree.interfaces.api import create_app
from focustree.interfaces.cli.common import data_dir_option, get_settings

logger = logging.getLogger(__name__)


def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", help="Port"),
    data_dir: Optional[Path] = data_dir_option,
) -> None:
    """Run the todo, timer-session and timebox API."""
    settings = get_settings(data_dir)
    settings = settings.model_copy(
        update={"host": host or settings.host, "port": port or settings.port}
    )
    logger.info(f"Serving {settings.data_dir} on {settings.host}:{settings.port}")
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
