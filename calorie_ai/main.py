from __future__ import annotations

import logging
import os

from .api import create_app
from .config import settings

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = create_app()


def run() -> None:
    """Console entry point (used by pyproject [project.scripts])."""
    import uvicorn

    host = os.environ.get("CALORIEAI_HOST") or os.environ.get("HOST") or "127.0.0.1"
    port_raw = os.environ.get("CALORIEAI_PORT") or os.environ.get("PORT") or "8000"
    try:
        port = int(port_raw)
    except ValueError:
        port = 8000

    uvicorn.run("calorie_ai.main:app", host=host, port=port, reload=False)
