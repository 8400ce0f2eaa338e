"""
Reference Tables Configuration
==============================

PURPOSE:
    Pydantic-Settings based configuration for the reference table manager.
    All settings can be overridden via environment variables (REFTABLE_ prefix)
    or a local .env file.
"""

import logging
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

_DEFAULT_API_URL = "https://api.datadoghq.com"


class Settings(BaseSettings):
    """Connection, timeout and logging settings."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="REFTABLE_")

    # Platform API
    api_url: str = _DEFAULT_API_URL
    api_key: Optional[str] = None   # sent as DD-API-KEY
    app_key: Optional[str] = None   # sent as DD-APPLICATION-KEY
    request_timeout: float = 30.0   # seconds, per request

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_to_file: bool = False
    log_dir: str = "logs"
    log_file: str = "reftable.jsonl"

    def auth_headers(self) -> dict:
        """Return the API key headers that are configured."""
        headers = {}
        if self.api_key:
            headers["DD-API-KEY"] = self.api_key
        if self.app_key:
            headers["DD-APPLICATION-KEY"] = self.app_key
        if not headers:
            logger.warning(
                "REFTABLE_API_KEY / REFTABLE_APP_KEY not set; requests will fail auth"
            )
        return headers


settings = Settings()
