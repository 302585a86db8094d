from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from widget_export.io.snapshot import DataKey, load_snapshot, parse_snapshot


def _payload() -> dict:
    return {
        "title": "Bus temperatures",
        "datasources": [
            {
                "entityName": "BusA",
                "entityType": "DEVICE",
                "dataKeys": [{"name": "temperature", "label": "Temp"}, {"name": "status"}],
            }
        ],
        "data": [
            {
                "datasource": {"name": "BusA"},
                "dataKey": {"name": "temperature"},
                "data": [[1000, 9.3], [2000, "9.4"]],
            }
        ],
    }


def test_parse_snapshot_maps_wire_names() -> None:
    snapshot = parse_snapshot(_payload())

    source = snapshot.data_sources[0]
    assert snapshot.title == "Bus temperatures"
    assert source.entity_name == "BusA"
    assert source.key_names == ["temperature", "status"]
    assert [key.header_label for key in source.data_keys] == ["Temp", "status"]

    series = snapshot.series[0]
    assert series.join_key == ("BusA", "temperature")
    assert series.timestamps() == [1000, 2000]
    assert series.values() == [9.3, "9.4"]


def test_data_key_label_falls_back_to_name() -> None:
    assert DataKey(name="humidity").header_label == "humidity"
    assert DataKey(name="humidity", label="").header_label == "humidity"


def test_parse_snapshot_rejects_duplicate_entity_names() -> None:
    payload = _payload()
    payload["datasources"].append(dict(payload["datasources"][0]))

    with pytest.raises(ValueError, match="duplicate entityName"):
        parse_snapshot(payload)


def test_load_snapshot_reads_json_and_yaml(tmp_path: Path) -> None:
    json_path = tmp_path / "snapshot.json"
    yaml_path = tmp_path / "snapshot.yml"
    json_path.write_text(json.dumps(_payload()), encoding="utf-8")
    yaml_path.write_text(yaml.safe_dump(_payload()), encoding="utf-8")

    assert load_snapshot(json_path) == load_snapshot(yaml_path)


def test_load_snapshot_rejects_unknown_suffix(tmp_path: Path) -> None:
    path = tmp_path / "snapshot.txt"
    path.write_text("{}", encoding="utf-8")

    with pytest.raises(ValueError, match="Unsupported snapshot file type"):
        load_snapshot(path)
