from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from pydantic import ValidationError

from widget_export.config import load_config


def test_load_config_defaults_without_file(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("WIDGET_EXPORT_TIMEZONE", raising=False)
    monkeypatch.delenv("WIDGET_EXPORT_OUT_DIR", raising=False)

    cfg = load_config(None)

    assert cfg.table.header_mode == "first_source"
    assert cfg.time.timezone == "UTC"
    assert cfg.output.sheet_name == "Sheet1"
    assert cfg.output.column_width == 13


def test_load_config_resolves_relative_output_directory(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        yaml.safe_dump({"output": {"directory": "out", "default_format": "xlsx"}}),
        encoding="utf-8",
    )

    cfg = load_config(config_path)

    assert Path(cfg.output.directory) == (tmp_path / "out").resolve()
    assert cfg.output.default_format == "xlsx"


def test_load_config_env_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("{}", encoding="utf-8")
    monkeypatch.setenv("WIDGET_EXPORT_TIMEZONE", "Asia/Shanghai")
    monkeypatch.setenv("WIDGET_EXPORT_OUT_DIR", str(tmp_path / "env-out"))

    cfg = load_config(config_path)

    assert cfg.time.timezone == "Asia/Shanghai"
    assert cfg.output.directory == str(tmp_path / "env-out")


def test_load_config_rejects_bad_values(tmp_path: Path) -> None:
    config_path = tmp_path / "config.yaml"
    for data in (
        {"time": {"timezone": "Mars/Olympus"}},
        {"table": {"header_mode": "everything"}},
        {"output": {"column_width": 0}},
        {"unknown": True},
    ):
        config_path.write_text(yaml.safe_dump(data), encoding="utf-8")
        with pytest.raises(ValidationError):
            load_config(config_path)


def test_shipped_default_config_loads() -> None:
    config_path = Path(__file__).resolve().parents[1] / "configs" / "default.yaml"

    cfg = load_config(config_path)

    assert cfg.output.default_format == "csv"
