"""Configuration via pydantic-settings — 12-factor app style."""
from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """ircparse configuration — loaded from env vars / .env file."""

    default_dialect: str = Field(default="default", description="Dialect used when none is given")
    encoding: str = Field(default="utf-8", description="Encoding of log files")
    encoding_errors: str = Field(default="replace", description="Codec error handler for undecodable bytes")
    log_level: str = Field(default="WARNING", description="Log level for the CLI")
    table_max_rows: int = Field(default=500, description="Row cap for table output")

    class Config:
        env_prefix = "IRCPARSE_"
        env_file = ".env"


settings = Settings()
