"""Environment configuration for the route server."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .server.http.auth import parse_api_keys


class RouterSettings(BaseSettings):
    """Process settings read from the environment or a ``.env`` file."""

    DUCKDB_DATABASE: str = Field(default=":memory:", description="DuckDB database file")
    ROUTES_CONFIG_PATH: str = Field(default="routes.json", description="Route definition file path")
    API_KEY: str = Field(default="", description="Comma separated API keys")
    HOST: str = Field(default="0.0.0.0", description="Listen host")
    PORT: int = Field(default=3000, description="Listen port")
    LOG_LEVEL: str = Field(default="INFO", description="Log level")

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )

    @property
    def api_keys(self) -> frozenset[str]:
        return parse_api_keys(self.API_KEY)


__all__ = ["RouterSettings"]
