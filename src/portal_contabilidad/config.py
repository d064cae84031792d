"""Configuration for the task portal."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    """Application configuration, read from PORTAL_* environment variables."""

    model_config = SettingsConfigDict(env_prefix="PORTAL_")

    backend: Literal["local", "firestore"] = Field(default="local")
    data_dir: str = Field(default="data/tasks")  # Local backend only
    firestore_project: str | None = Field(default=None)
    firestore_database: str = Field(default="(default)")
    firestore_credentials: str | None = Field(default=None)  # Service account JSON path
    collection: str = Field(default="tasks")
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000)
    log_level: str = Field(default="INFO")
