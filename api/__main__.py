"""Run the market tools service with uvicorn."""

from __future__ import annotations

import logging
import os

import uvicorn
from dotenv import load_dotenv

from tools.service import ServiceSettings

logger = logging.getLogger(__name__)


def main() -> int:
    load_dotenv()
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))
    settings = ServiceSettings.from_env()
    logger.info("Real estate data service listening on port %s", settings.port)
    uvicorn.run("api.main:app", host="0.0.0.0", port=settings.port)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
