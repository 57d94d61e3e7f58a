import logging

import uvicorn

from .config import get_settings
from .log import setup_logging

logger = logging.getLogger(__name__)


def main():
    settings = get_settings()
    setup_logging(settings)
    logger.info(f"Starting taxi relay in {settings.environment} environment on port {settings.port}")
    uvicorn.run(
        "taxi_relay.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
