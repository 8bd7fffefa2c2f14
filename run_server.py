import os

import uvicorn

from forecast_intel.config import settings
from utils.logging_utils import get_tagged_logger, setup_logging

logger = get_tagged_logger(__name__, tag="server")


if __name__ == "__main__":
    setup_logging(level=settings.log_level, job_name="forecast_intel")
    logger.info("Starting forecast-intel server", extra={"locale": settings.locale_name})

    uvicorn.run(
        "forecast_intel.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", 8000)),
        reload=False,
    )
