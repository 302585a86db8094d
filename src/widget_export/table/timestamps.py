from __future__ import annotations

from typing import Any, Sequence

import pandas as pd

from widget_export.config import TimeConfig
from widget_export.table.builder import TIMESTAMP_COLUMN, ExportTable

# Nanosecond timestamp bounds in ms, less one day of headroom for timezone offsets.
MAX_EPOCH_MILLIS = pd.Timestamp.max.value // 1_000_000 - 86_400_000


def format_epoch_millis(
    values: Sequence[Any],
    *,
    timezone: str = "UTC",
    display_format: str = "%m/%d/%Y, %I:%M:%S %p",
    invalid_label: str = "Invalid Date",
) -> list[str]:
    """Render epoch-millisecond values as local date-time strings.

    Values that are not numeric, or fall outside the representable range,
    render as ``invalid_label`` instead of raising.
    """
    if len(values) == 0:
        return []
    raw = pd.Series(list(values), dtype=object)
    numeric = pd.to_numeric(raw, errors="coerce").astype("float64")
    numeric = numeric.where(numeric.abs() <= MAX_EPOCH_MILLIS)
    stamps = pd.to_datetime(numeric, unit="ms", utc=True, errors="coerce")
    local = stamps.dt.tz_convert(timezone)
    formatted = local.dt.strftime(display_format)
    return formatted.where(local.notna(), invalid_label).tolist()


def format_timestamp_column(table: ExportTable, config: TimeConfig) -> ExportTable:
    if TIMESTAMP_COLUMN not in table.header:
        return table
    column = table.header.index(TIMESTAMP_COLUMN)
    formatted = format_epoch_millis(
        [row[column] for row in table.rows],
        timezone=config.timezone,
        display_format=config.display_format,
        invalid_label=config.invalid_label,
    )
    rows = [
        [*row[:column], display, *row[column + 1 :]]
        for row, display in zip(table.rows, formatted)
    ]
    return ExportTable(header=list(table.header), rows=rows)
