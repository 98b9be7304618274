import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from fontseek.errors import ConfigError
from fontseek.util import read_text


@dataclass
class InspectorConfig:
    ancestor_hops: int = 8
    pierce_depth: int = 10
    nearest_radius: float = 200.0
    small_area: float = 50000.0
    medium_area: float = 200000.0
    viewport_coverage: float = 0.95
    probe_sizes: Tuple[int, ...] = (32, 48)
    reality_check_size: int = 48
    census_sample_limit: int = 400

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InspectorConfig":
        if not isinstance(data, dict):
            raise ConfigError("config must be a JSON object")
        defaults = cls()
        values = {}
        for f in fields(cls):
            if f.name not in data:
                continue
            raw = data[f.name]
            default = getattr(defaults, f.name)
            try:
                if isinstance(default, tuple):
                    if not isinstance(raw, list) or not raw:
                        raise ValueError("expected a non-empty list")
                    values[f.name] = tuple(int(v) for v in raw)
                elif isinstance(raw, bool) or not isinstance(raw, (int, float)):
                    raise ValueError("expected a number")
                else:
                    values[f.name] = type(default)(raw)
            except (TypeError, ValueError) as exc:
                raise ConfigError(f"invalid value for {f.name!r}: {exc}") from exc
        return cls(**values)

    @classmethod
    def from_json(cls, path: Optional[str]) -> "InspectorConfig":
        if not path:
            return cls()
        config_path = Path(path)
        try:
            data = json.loads(read_text(config_path))
        except (OSError, ValueError) as exc:
            raise ConfigError(f"cannot read config {config_path}: {exc}") from exc
        return cls.from_dict(data)
