"""Application settings, loaded from the environment and ``.env``."""
from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Every value can be overridden with a ``TECHPOINTS_`` prefixed variable,
    e.g. ``TECHPOINTS_API_URL=http://10.0.0.5:8086``.
    """

    model_config = SettingsConfigDict(
        env_prefix="TECHPOINTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    API_URL: str = Field(default="http://localhost:3006", description="Backend REST API base URL")
    REQUEST_TIMEOUT: float = Field(default=30.0, gt=0)
    IMPORT_TIMEOUT: float = Field(default=600.0, gt=0)
    LOG_LEVEL: str = "INFO"
    APP_BASE_URL: str = Field(
        default="http://localhost:8501",
        description="Public URL of the Streamlit app, used for score links",
    )
    # The backend does not announce the row count up front; the progress bar
    # is scaled against this many rows and held at 95% until "done".
    IMPORT_PROGRESS_ROWS: int = Field(default=200, gt=0)


settings = Settings()
