from __future__ import annotations

from pathlib import Path

from widget_export.errors import ExportError
from widget_export.serialize.serializer import ExportPayload


def write_payload(payload: ExportPayload, out_dir: Path) -> Path:
    if Path(payload.filename).name != payload.filename or payload.filename in {".", ".."}:
        raise ExportError(
            f"Export filename must not contain path separators: {payload.filename}"
        )
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / payload.filename
    path.write_bytes(payload.content)
    return path
