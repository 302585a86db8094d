from __future__ import annotations

from pathlib import Path

import pytest

from widget_export.io.write import write_payload
from widget_export.serialize.serializer import ExportPayload


def _payload(filename: str) -> ExportPayload:
    return ExportPayload(filename=filename, content=b"abc", media_type="text/csv", row_count=1)


def test_write_payload_creates_directory(tmp_path: Path) -> None:
    out_dir = tmp_path / "nested" / "exports"

    path = write_payload(_payload("report-1000.csv"), out_dir)

    assert path == out_dir / "report-1000.csv"
    assert path.read_bytes() == b"abc"


def test_write_payload_rejects_path_like_filenames(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="path separators"):
        write_payload(_payload("../escape-1000.csv"), tmp_path)
    assert list(tmp_path.iterdir()) == []
