"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    imageproxy_env: str = "development"
    imageproxy_log_level: str = "info"

    # JSON file mapping path prefixes to source configuration; empty for none
    imageproxy_sources_file: str = ""

    # Drop option keys from the query string forwarded to the remote URL
    imageproxy_strip_option_params: bool = False

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
