"""Runtime configuration loaded from the environment and ``.env``."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Literal

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PartitionPolicy = Literal["month", "year"]


def _default_data_dir() -> Path:
    return Path.home() / ".liftlog"


class Settings(BaseSettings):
    data_dir: Path = Field(
        default_factory=_default_data_dir,
        description="Root directory of the on-disk partitions",
    )
    workout_namespace: str = Field(default="workouts", description="Namespace holding workout partitions")
    program_namespace: str = Field(default="program", description="Namespace holding program state")
    partition_policy: PartitionPolicy = Field(
        default="month",
        description="Partition workouts by calendar month or calendar year",
    )
    program_origin: date = Field(
        default=date(2024, 10, 5),
        description="First day of the rotation (index 0)",
    )
    program_file: Path | None = Field(
        default=None,
        description="Optional JSON file replacing the built-in rotation",
    )
    log_level: str = Field(default="INFO", description="loguru level for the stderr sink")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="LIFTLOG_",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        valid_levels = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            logger.warning(f"Invalid LIFTLOG_LOG_LEVEL '{value}'. Defaulting to INFO.")
            return "INFO"
        return upper_value

    @field_validator("workout_namespace", "program_namespace")
    @classmethod
    def validate_namespace(cls, value: str) -> str:
        cleaned = value.strip().strip("/")
        if not cleaned or "/" in cleaned:
            raise ValueError("Namespaces must be a single non-empty path segment")
        return cleaned
