from __future__ import annotations

import json

import pytest

from fontseek.config import InspectorConfig
from fontseek.errors import ConfigError
from fontseek.util import parse_point, parse_px, parse_viewport


def test_defaults() -> None:
    config = InspectorConfig()
    assert config.ancestor_hops == 8
    assert config.probe_sizes == (32, 48)
    assert config.nearest_radius == 200.0


def test_from_dict_overrides_and_ignores_unknown_keys() -> None:
    config = InspectorConfig.from_dict({"nearest_radius": 120, "probe_sizes": [24], "theme": "dark"})
    assert config.nearest_radius == 120.0
    assert isinstance(config.nearest_radius, float)
    assert config.probe_sizes == (24,)
    assert config.ancestor_hops == 8


@pytest.mark.parametrize(
    "data",
    [
        [],
        {"ancestor_hops": "eight"},
        {"ancestor_hops": True},
        {"probe_sizes": []},
        {"probe_sizes": 32},
    ],
)
def test_from_dict_rejects_bad_values(data) -> None:
    with pytest.raises(ConfigError):
        InspectorConfig.from_dict(data)


def test_from_json(tmp_path) -> None:
    path = tmp_path / "fontseek.json"
    path.write_text(json.dumps({"pierce_depth": 4}), encoding="utf-8")
    assert InspectorConfig.from_json(str(path)).pierce_depth == 4
    assert InspectorConfig.from_json(None) == InspectorConfig()


def test_from_json_errors(tmp_path) -> None:
    with pytest.raises(ConfigError):
        InspectorConfig.from_json(str(tmp_path / "missing.json"))
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigError):
        InspectorConfig.from_json(str(broken))


def test_parse_helpers() -> None:
    assert parse_viewport("1024x768") == {"width": 1024, "height": 768}
    assert parse_viewport("wide") == {"width": 1440, "height": 900}
    assert parse_point("10, 20.5") == {"x": 10.0, "y": 20.5}
    assert parse_point("10") is None
    assert parse_px("16px") == 16.0
    assert parse_px("normal") is None
