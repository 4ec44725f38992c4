"""
Course Analytics Engine
Package entry point

Call configure_logging() once from the hosting process before using the
analytics services:

    from app.main import configure_logging
    from app.services.analytics_service import get_course_analytics
"""

import logging

from app.config import Settings, settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger("course-analytics")


def configure_logging(config: Settings = settings) -> None:
    """Configure root logging with the application format and level."""
    logging.basicConfig(
        level=config.log_level_value,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )
    logger.setLevel(config.log_level_value)
    logger.info(f"{config.APP_NAME} logging configured (level={logging.getLevelName(config.log_level_value)})")
