from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

import pandas as pd

from widget_export.config import HeaderMode
from widget_export.io.snapshot import DataKey, DataSeries, DataSource

LOGGER = logging.getLogger(__name__)

TIMESTAMP_COLUMN = "timestamp"
FIXED_COLUMNS = (TIMESTAMP_COLUMN, "name", "type")
MISSING_CELL = ""

SeriesIndex = dict[tuple[str, str], DataSeries]


@dataclass(frozen=True)
class ExportTable:
    """Rectangular export grid: one header plus rows aligned to it."""

    header: list[str]
    rows: list[list[Any]] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def width(self) -> int:
        return len(self.header)

    def grid(self) -> list[list[Any]]:
        return [list(self.header), *[list(row) for row in self.rows]]

    def entity_names(self) -> list[str]:
        name_index = self.header.index("name")
        names: list[str] = []
        for row in self.rows:
            if row[name_index] not in names:
                names.append(row[name_index])
        return names

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.rows, columns=self.header, dtype=object)


def index_series(series: Iterable[DataSeries]) -> SeriesIndex:
    index: SeriesIndex = {}
    for item in series:
        if item.join_key in index:
            LOGGER.warning(
                "Ignoring duplicate series for entity=%s key=%s",
                item.datasource.name,
                item.data_key.name,
            )
            continue
        index[item.join_key] = item
    return index


def derive_header_keys(
    data_sources: Sequence[DataSource],
    mode: HeaderMode = "first_source",
) -> list[DataKey]:
    if not data_sources:
        return []
    if mode == "first_source":
        return list(data_sources[0].data_keys)
    if mode == "union":
        keys: dict[str, DataKey] = {}
        for source in data_sources:
            for key in source.data_keys:
                keys.setdefault(key.name, key)
        return list(keys.values())
    raise ValueError(f"Unsupported header mode: {mode}")


def _cell(values: Sequence[Any], position: int) -> Any:
    if position >= len(values):
        return MISSING_CELL
    value = values[position]
    return MISSING_CELL if value is None else value


def _key_columns(
    source: DataSource,
    header_keys: Sequence[DataKey],
    matched: dict[str, DataSeries],
    mode: HeaderMode,
) -> list[list[Any]]:
    if mode == "union":
        names = [key.name for key in header_keys]
    else:
        # Positional fill: clamp to the header width, pad short key lists.
        names = source.key_names[: len(header_keys)]
    columns = [matched[name].values() if name in matched else [] for name in names]
    return columns + [[] for _ in range(len(header_keys) - len(columns))]


def _entity_rows(
    source: DataSource,
    header_keys: Sequence[DataKey],
    index: SeriesIndex,
    mode: HeaderMode,
) -> list[list[Any]]:
    matched = {
        key.name: index[(source.entity_name, key.name)]
        for key in source.data_keys
        if (source.entity_name, key.name) in index
    }
    reference = next(
        (
            matched[key.name]
            for key in source.data_keys
            if key.name in matched and matched[key.name].data
        ),
        None,
    )
    if reference is None:
        LOGGER.debug("Skipping entity %s: no key has data", source.entity_name)
        return []

    timestamps = reference.timestamps()
    columns = _key_columns(source, header_keys, matched, mode)
    return [
        [timestamps[i], source.entity_name, source.entity_type, *[_cell(c, i) for c in columns]]
        for i in range(len(timestamps))
    ]


def build_table(
    data_sources: Sequence[DataSource],
    series: Iterable[DataSeries],
    *,
    header_mode: HeaderMode = "first_source",
) -> ExportTable:
    """Align every entity's key series into one row-per-timestamp table.

    The row count of an entity is the length of its first key series (in
    dataKeys order) that has samples; that series also supplies the
    timestamp column. Entities with no samples at all contribute no rows.
    Timestamps are left as raw epoch milliseconds; see
    ``widget_export.table.timestamps`` for display formatting.
    """
    header_keys = derive_header_keys(data_sources, header_mode)
    header = [*FIXED_COLUMNS, *[key.header_label for key in header_keys]]
    index = index_series(series)

    if header_mode == "first_source" and data_sources:
        expected = [key.name for key in header_keys]
        for source in data_sources[1:]:
            if source.key_names != expected:
                LOGGER.warning(
                    "Entity %s keys %s differ from header keys %s; columns are filled by position",
                    source.entity_name,
                    source.key_names,
                    expected,
                )

    rows: list[list[Any]] = []
    for source in data_sources:
        rows.extend(_entity_rows(source, header_keys, index, header_mode))
    return ExportTable(header=header, rows=rows)
