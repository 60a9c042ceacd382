import uvicorn

from weather_api.config import settings
from utils.logging_utils import get_tagged_logger, setup_logging

setup_logging(level=settings.log_level)
logger = get_tagged_logger(__name__, tag="server")


if __name__ == "__main__":
    logger.info(f"Starting Weather API on {settings.host}:{settings.port} ({settings.environment})")

    uvicorn.run(
        "weather_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_config=None,
    )
