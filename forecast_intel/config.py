"""Application configuration pulled from environment variables via pydantic."""
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from forecast_intel.domain import ASHEVILLE_NORMAL_HIGHS_F
from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="forecast_intel/config")


class Settings(BaseSettings):
    """Environment-driven configuration for the forecast-intel service."""
    model_config = SettingsConfigDict(env_prefix="FORECAST_", extra="ignore")

    locale_name: str = "Asheville, NC"
    alert_start_hours: int = 12
    alert_end_hours: int = 48
    tomorrow_fallback: bool = True  # clamp to hours 24-48 when tomorrow's date is missing
    strict_pattern_detection: bool = False
    normal_highs_f: List[float] = Field(default_factory=lambda: list(ASHEVILLE_NORMAL_HIGHS_F))
    api_key: str | None = None
    log_level: str = "INFO"

    @field_validator("normal_highs_f", mode="after")
    @classmethod
    def twelve_months(cls, v: List[float]) -> List[float]:
        """Require exactly one normal high per calendar month."""
        if len(v) != 12:
            raise ValueError(f"normal_highs_f needs 12 monthly values, got {len(v)}")
        return v

    @field_validator("log_level", mode="after")
    @classmethod
    def upper_level(cls, v: str) -> str:
        """Normalize log level names."""
        return str(v).upper()


settings = Settings()


if __name__ == "__main__":
    logger.setLevel("DEBUG")
    logger.debug(f"Loaded settings: {settings.model_dump_json(indent=4)}")
