from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from widget_export.errors import EncodingError
from widget_export.serialize.encoders import (
    DEFAULT_COLUMN_WIDTH,
    DEFAULT_SHEET_NAME,
    get_encoder,
)
from widget_export.table.builder import ExportTable

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportPayload:
    filename: str
    content: bytes
    media_type: str
    row_count: int


def current_epoch_millis() -> int:
    # Whole-second precision, matching date strings parsed back to epoch millis.
    return int(time.time()) * 1000


def build_filename(title: str, extension: str, now_ms: int | None = None) -> str:
    stamp = current_epoch_millis() if now_ms is None else now_ms
    safe_title = title.replace("/", "_").replace("\\", "_")
    return f"{safe_title}-{stamp}.{extension}"


def serialize(
    table: ExportTable,
    fmt: str,
    title: str,
    *,
    sheet_name: str = DEFAULT_SHEET_NAME,
    column_width: float = DEFAULT_COLUMN_WIDTH,
    now_ms: int | None = None,
) -> ExportPayload:
    encoder = get_encoder(fmt, sheet_name=sheet_name, column_width=column_width)
    try:
        content = encoder.encode(table)
    except EncodingError:
        raise
    except Exception as exc:
        raise EncodingError(f"Failed encoding export as {encoder.extension}: {exc}") from exc

    filename = build_filename(title, encoder.extension, now_ms=now_ms)
    LOGGER.debug("Encoded %s (%d bytes)", filename, len(content))
    return ExportPayload(
        filename=filename,
        content=content,
        media_type=encoder.media_type,
        row_count=table.row_count,
    )
