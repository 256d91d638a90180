"""EZID external service configuration."""

from pydantic import Field
from pydantic_settings import BaseSettings

EZID_DEFAULT_URL = "https://ezid.cdlib.org"


class EzidConfig(BaseSettings):
    """EZID external service configuration."""

    model_config = {"extra": "allow"}  # Allow creation using the constructor.

    EZID_URL: str = Field(default=EZID_DEFAULT_URL, description="EZID service base URL")
    EZID_USER: str | None = Field(default=None, description="EZID account username")
    EZID_PASSWORD: str | None = Field(default=None, description="EZID account password")
    EZID_WORKERS: int | None = Field(default=None, gt=0, description="Request queue worker count")
    EZID_CONNECTION_LIMIT: int = Field(default=5, gt=0, description="Total simultaneous connections")
    EZID_CONNECTION_LIMIT_PER_HOST: int = Field(default=8, gt=0, description="Simultaneous connections per host")
    EZID_TIMEOUT: float = Field(default=60, gt=0, description="Timeout of a single HTTP exchange in seconds")


def ezid_config() -> EzidConfig:
    """Get EZID configuration."""

    # Avoid loading environment variables when module is imported.
    return EzidConfig()
