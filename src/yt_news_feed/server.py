"""
Web feed server.

Serves the enhanced dataset at ``/api/videos`` and the static browser UI that
renders it. The dataset file is read from disk on every request.
"""

import json
import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles

from . import __version__
from .config import Configuration

logger = logging.getLogger(__name__)


def create_app(config: Configuration) -> FastAPI:
    """
    Create the feed application.

    Args:
        config: Configuration with the dataset path and static directory

    Returns:
        FastAPI application
    """
    app = FastAPI(title="YouTube News Feed", version=__version__)
    dataset_path = Path(config.output_file)
    static_dir = Path(config.static_dir)

    @app.get("/api/videos")
    def get_videos():
        try:
            data = json.loads(dataset_path.read_text(encoding='utf-8'))
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Error reading {dataset_path}: {e}")
            return JSONResponse(status_code=500, content={"error": "Failed to load video data"})
        return JSONResponse(content=data)

    @app.get("/")
    def index():
        index_file = static_dir / "index.html"
        if not index_file.is_file():
            return JSONResponse(status_code=404, content={"error": "Not found"})
        return FileResponse(index_file)

    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=str(static_dir)), name="static")
    else:
        logger.warning(f"Static directory {static_dir} not found, UI assets will not be served")

    return app
