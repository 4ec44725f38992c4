"""Application configuration loaded from environment variables."""

import logging

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # App
    APP_NAME: str = "Course Analytics"
    DEBUG: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"

    # Dashboard roll-up
    RECENT_SUBMISSIONS_LIMIT: int = 10

    @property
    def log_level_value(self) -> int:
        if self.DEBUG:
            return logging.DEBUG
        level = logging.getLevelName(self.LOG_LEVEL.upper())
        return level if isinstance(level, int) else logging.INFO

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
    }


settings = Settings()
