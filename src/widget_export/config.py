from __future__ import annotations

import os
from pathlib import Path
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

HeaderMode = Literal["first_source", "union"]
ExportFormat = Literal["csv", "xlsx"]


class TableConfig(BaseModel):
    header_mode: HeaderMode = "first_source"


class TimeConfig(BaseModel):
    timezone: str = "UTC"
    # en-US style, e.g. "04/08/2021, 10:38:18 AM"
    display_format: str = "%m/%d/%Y, %I:%M:%S %p"
    invalid_label: str = "Invalid Date"

    @field_validator("timezone")
    @classmethod
    def _validate_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"invalid timezone: {value}") from exc
        return value


class OutputConfig(BaseModel):
    default_format: ExportFormat = "csv"
    directory: str = "exports"
    sheet_name: str = Field(default="Sheet1", min_length=1, max_length=31)
    column_width: float = Field(default=13, gt=0)


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    table: TableConfig = Field(default_factory=TableConfig)
    time: TimeConfig = Field(default_factory=TimeConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


DEFAULT_CONFIG_PATH = Path("configs/default.yaml")


def _resolve_directory(path_value: str, base_dir: Path) -> str:
    candidate = Path(path_value)
    if candidate.is_absolute():
        return str(candidate)
    return str((base_dir / candidate).resolve())


def _apply_env_overrides(config: AppConfig) -> AppConfig:
    timezone_name = os.getenv("WIDGET_EXPORT_TIMEZONE")
    if timezone_name:
        config.time = TimeConfig.model_validate(
            {**config.time.model_dump(), "timezone": timezone_name}
        )
    out_dir = os.getenv("WIDGET_EXPORT_OUT_DIR")
    if out_dir:
        config.output.directory = out_dir
    return config


def load_config(path: Path | None) -> AppConfig:
    if path is None:
        return _apply_env_overrides(AppConfig())

    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    config = AppConfig.model_validate(data)
    config.output.directory = _resolve_directory(
        config.output.directory, path.resolve().parent
    )
    return _apply_env_overrides(config)
