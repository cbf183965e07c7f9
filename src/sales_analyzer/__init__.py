import logging

import uvicorn
from .config import get_settings
from .main import app

def main() -> None:
    """Entry point for running the FastAPI server."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(app, host=settings.host, port=settings.port)
