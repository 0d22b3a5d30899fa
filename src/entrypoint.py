from __future__ import annotations

import logging

import uvicorn

from .config import load_settings
from .index import create_app
from .logging_config import setup_logging

logger = logging.getLogger(__name__)

settings = load_settings()
setup_logging(settings)

# One store per process, owned by this app instance
app = create_app(settings)


def main() -> None:
    logger.info(f"Listening on http://{settings.host}:{settings.port}{settings.api_prefix}")
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
