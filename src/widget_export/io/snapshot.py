from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

SampleValue = str | int | float | bool | None


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class DataKey(_WireModel):
    name: str
    label: str | None = None

    @property
    def header_label(self) -> str:
        return self.label or self.name


class DataSource(_WireModel):
    entity_name: str = Field(alias="entityName")
    entity_type: str = Field(default="", alias="entityType")
    data_keys: list[DataKey] = Field(default_factory=list, alias="dataKeys")

    @property
    def key_names(self) -> list[str]:
        return [key.name for key in self.data_keys]


class SeriesRef(_WireModel):
    name: str


class DataSeries(_WireModel):
    datasource: SeriesRef
    data_key: SeriesRef = Field(alias="dataKey")
    data: list[tuple[Any, SampleValue]] = Field(default_factory=list)

    @property
    def join_key(self) -> tuple[str, str]:
        return self.datasource.name, self.data_key.name

    def timestamps(self) -> list[Any]:
        return [sample[0] for sample in self.data]

    def values(self) -> list[SampleValue]:
        return [sample[1] for sample in self.data]


class Snapshot(_WireModel):
    """Resolved widget data: the data sources and every (entity, key) series."""

    title: str | None = None
    data_sources: list[DataSource] = Field(default_factory=list, alias="datasources")
    series: list[DataSeries] = Field(default_factory=list, alias="data")

    @model_validator(mode="after")
    def _check_unique_entities(self) -> Snapshot:
        seen: set[str] = set()
        for source in self.data_sources:
            if source.entity_name in seen:
                raise ValueError(f"duplicate entityName in snapshot: {source.entity_name}")
            seen.add(source.entity_name)
        return self


def parse_snapshot(payload: Any) -> Snapshot:
    return Snapshot.model_validate(payload)


def load_snapshot(path: Path) -> Snapshot:
    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")
    if suffix == ".json":
        return parse_snapshot(json.loads(text))
    if suffix in {".yaml", ".yml"}:
        return parse_snapshot(yaml.safe_load(text) or {})
    raise ValueError(f"Unsupported snapshot file type: {path.suffix}")
