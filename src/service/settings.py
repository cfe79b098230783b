from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServiceSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # MarketCheck listings feed
    marketcheck_api_key: str = Field(default="", alias="MARKETCHECK_API_KEY")
    marketcheck_base_url: str = Field(default="https://marketcheck-prod.apigee.net/v2", alias="MARKETCHECK_BASE_URL")
    marketcheck_timeout_seconds: float = Field(default=10.0, alias="MARKETCHECK_TIMEOUT_SECONDS")

    # "sample" serves generated listings instead of calling the feed
    data_source: Literal["live", "sample"] = Field(default="live", alias="DATA_SOURCE")
    sample_seed: int | None = Field(default=None, alias="SAMPLE_SEED")
    sample_size: int = Field(default=36, alias="SAMPLE_SIZE")

    default_zip: str = Field(default="02141", alias="DEFAULT_ZIP")
    default_radius: int = Field(default=150, alias="DEFAULT_RADIUS")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="json", alias="LOG_FORMAT")

    @property
    def use_sample_data(self) -> bool:
        return self.data_source == "sample" or not self.marketcheck_api_key
