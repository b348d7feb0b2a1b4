from __future__ import annotations

from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="OLT_GRAPH_", env_file=".env", extra="ignore")

    APP_NAME: str = Field(default="olt-graph-service")
    ENV: str = Field(default="dev")
    LOG_LEVEL: str = Field(default="INFO")

    SMARTOLT_API_KEY: SecretStr = Field(default=SecretStr(""))
    SMARTOLT_BASE_URL: str = Field(default="https://demo.smartolt.com/api")
    FETCH_TIMEOUT_SECONDS: float = Field(default=30.0)
    VERIFY_SSL: bool = Field(default=True)

    OCR_LANG: str = Field(default="eng")
    # Tesseract page segmentation mode; 11 = sparse text, suits graph legends and axes.
    OCR_PSM: int = Field(default=11)
    OCR_MAX_CONCURRENCY: int = Field(default=2, ge=1)
    OCR_TIMEOUT_SECONDS: float = Field(default=30.0)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]
