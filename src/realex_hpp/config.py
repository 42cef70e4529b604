"""Configuration management for the HPP adapter."""

from enum import Enum
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SupplementaryDataLayout(str, Enum):
    """How supplementary data is laid out in the JSON payload."""

    FLAT = "flat"  # extra top-level keys
    NESTED = "nested"  # SUPPLEMENTARY_DATA: {"key": "value"}
    LIST = "list"  # SUPPLEMENTARY_DATA: [{"key": ..., "value": ...}]


class HppSettings(BaseSettings):
    """Adapter settings loaded from environment variables (prefix HPP_)."""

    secret: SecretStr = Field(default=SecretStr(""), description="Shared secret issued by the gateway")
    charset: str = Field(default="utf-8", description="Character set for Base64 field encoding")
    timezone: str = Field(default="UTC", description="IANA timezone for generated timestamps")
    supplementary_data_layout: SupplementaryDataLayout = Field(
        default=SupplementaryDataLayout.FLAT,
        description="Wire layout of supplementary data",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_json: bool = Field(default=True, description="Render logs as JSON")

    model_config = SettingsConfigDict(
        env_prefix="HPP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {value}") from e
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()
