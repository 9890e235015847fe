"""Application settings loaded from environment variables using Pydantic v2."""

from functools import lru_cache
from logging import getLevelName
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from intrinsic.models import DetectorConfig


class Settings(BaseSettings):
    """Configuration values for the detector and its tooling.

    Thresholds and overshoot sizes are fractions in relative mode (0.01 == 1%)
    and price units in absolute mode.
    """

    log_level: str = Field(default="INFO", validation_alias="IEVENTS_LOG_LEVEL")
    threshold_up: float = Field(default=0.01, validation_alias="IEVENTS_THRESHOLD_UP")
    threshold_down: float = Field(default=0.01, validation_alias="IEVENTS_THRESHOLD_DOWN")
    os_size_up: float = Field(default=0.01, validation_alias="IEVENTS_OS_SIZE_UP")
    os_size_down: float = Field(default=0.01, validation_alias="IEVENTS_OS_SIZE_DOWN")
    initial_mode: int = Field(default=1, validation_alias="IEVENTS_INITIAL_MODE")
    relative_moves: bool = Field(default=True, validation_alias="IEVENTS_RELATIVE_MOVES")
    check_order: bool = Field(default=False, validation_alias="IEVENTS_CHECK_ORDER")
    price_scale: Optional[int] = Field(default=None, validation_alias="IEVENTS_PRICE_SCALE")

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore", populate_by_name=True
    )

    @field_validator("initial_mode")
    @classmethod
    def validate_mode(cls, value: int) -> int:
        if value not in (1, -1):
            raise ValueError("IEVENTS_INITIAL_MODE must be 1 or -1")
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(getLevelName(level), int):
            raise ValueError(f"Unknown log level {value!r}")
        return level

    @field_validator("price_scale")
    @classmethod
    def validate_price_scale(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value <= 0:
            raise ValueError("IEVENTS_PRICE_SCALE must be positive")
        return value

    def detector_config(self) -> DetectorConfig:
        return DetectorConfig(
            threshold_up=self.threshold_up,
            threshold_down=self.threshold_down,
            os_size_up=self.os_size_up,
            os_size_down=self.os_size_down,
            initial_mode=self.initial_mode,
            relative_moves=self.relative_moves,
            check_order=self.check_order,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
