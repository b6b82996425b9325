"""Application configuration using Pydantic Settings."""

import os
import tempfile
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    PORT and the IPFS credentials have no defaults: a missing or malformed
    value fails validation and the process exits at startup.
    """

    # Server
    PORT: int = Field(..., ge=1, le=65535)
    LOG_LEVEL: str = "INFO"

    # ==========================================================================
    # IPFS storage (Infura-style HTTP API with basic auth)
    # ==========================================================================

    IPFS_USERNAME: str
    IPFS_PASSWORD: str
    IPFS_API_URL: str = "https://ipfs.infura.io:5001"
    IPFS_GATEWAY_URL: str = "https://ipfs.io/ipfs"
    IPFS_TIMEOUT_SECONDS: float = 60.0

    # ==========================================================================
    # Logo downloads
    # ==========================================================================

    HTTP_TIMEOUT_SECONDS: float = 30.0
    LOGO_MAX_BYTES: int = 10 * 1024 * 1024  # 10MB

    # ==========================================================================
    # Rendering
    # ==========================================================================

    # Each request gets its own subdirectory here
    TICKETS_WORK_DIR: str = os.path.join(tempfile.gettempdir(), "ticketmint")

    # Empty = bundled DejaVu fonts; the score font must be bold
    SCORE_FONT_PATH: str = ""
    DATE_FONT_PATH: str = ""

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    def gateway_url(self, address: str) -> str:
        """Public gateway URL for a content address."""
        return f"{self.IPFS_GATEWAY_URL.rstrip('/')}/{address}"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
