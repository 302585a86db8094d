from __future__ import annotations

import logging
from pathlib import Path

from widget_export.config import AppConfig, HeaderMode
from widget_export.errors import NoDataError
from widget_export.io.snapshot import Snapshot
from widget_export.io.write import write_payload
from widget_export.serialize.serializer import ExportPayload, serialize
from widget_export.table.builder import ExportTable, build_table
from widget_export.table.timestamps import format_timestamp_column

LOGGER = logging.getLogger(__name__)

DEFAULT_TITLE = "export"


def build_export_table(
    snapshot: Snapshot,
    config: AppConfig,
    *,
    header_mode: HeaderMode | None = None,
) -> ExportTable:
    table = build_table(
        snapshot.data_sources,
        snapshot.series,
        header_mode=header_mode or config.table.header_mode,
    )
    return format_timestamp_column(table, config.time)


def prepare_export(
    snapshot: Snapshot,
    config: AppConfig,
    *,
    fmt: str | None = None,
    title: str | None = None,
    header_mode: HeaderMode | None = None,
    now_ms: int | None = None,
) -> ExportPayload:
    table = build_export_table(snapshot, config, header_mode=header_mode)
    if table.row_count == 0:
        raise NoDataError(
            f"Nothing to export: {len(snapshot.data_sources)} data source(s) produced no rows"
        )
    return serialize(
        table,
        fmt or config.output.default_format,
        title or snapshot.title or DEFAULT_TITLE,
        sheet_name=config.output.sheet_name,
        column_width=config.output.column_width,
        now_ms=now_ms,
    )


def run_export(
    snapshot: Snapshot,
    config: AppConfig,
    *,
    out_dir: Path | None = None,
    fmt: str | None = None,
    title: str | None = None,
    header_mode: HeaderMode | None = None,
) -> Path:
    payload = prepare_export(
        snapshot,
        config,
        fmt=fmt,
        title=title,
        header_mode=header_mode,
    )
    path = write_payload(payload, out_dir or Path(config.output.directory))
    LOGGER.info(
        "Exported %d rows from %d entities to %s",
        payload.row_count,
        len(snapshot.data_sources),
        path,
    )
    return path
