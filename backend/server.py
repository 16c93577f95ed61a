"""Run the game backend: `python server.py` from backend/."""

import logging
import os

import uvicorn
from dotenv import load_dotenv

# Load .env from backend dir before settings are first read.
load_dotenv(os.path.join(os.path.dirname(__file__), ".env"))

from app.config import get_settings  # noqa: E402

logging.basicConfig(level=get_settings().log_level)

from app.main import app  # noqa: E402


def main() -> None:
    settings = get_settings()
    logging.getLogger(__name__).info("Server listening on %s:%d", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
