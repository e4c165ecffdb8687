"""
Configuration system for the gesture mapper.

Holds engine settings only. Mapping definitions are supplied in memory
by the caller.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Literal

import yaml

SECONDS_PER_UNIT = {"ms": 0.001, "s": 1.0}

TIMESTAMP_UNITS = tuple(SECONDS_PER_UNIT)


@dataclass
class FilteringConfig:
    """Temporal filtering configuration."""

    # One-Euro frame rate assumed before a second sample exists
    bootstrap_fps: float = 60.0


@dataclass
class MapperConfig:
    """Main gesture mapper configuration."""

    # Unit of FrameObservation.timestamp for the whole session
    timestamp_unit: Literal["ms", "s"] = "ms"

    log_level: str = "INFO"

    # Preset ids registered by the CLI
    presets: List[str] = field(
        default_factory=lambda: ["pinch-filter-cutoff", "wrist-y-volume", "depth-delay-mix"]
    )

    filtering: FilteringConfig = field(default_factory=FilteringConfig)

    def __post_init__(self):
        if self.timestamp_unit not in TIMESTAMP_UNITS:
            raise ValueError(
                f"Unknown timestamp unit: {self.timestamp_unit} (expected one of {TIMESTAMP_UNITS})"
            )

    @property
    def seconds_per_unit(self) -> float:
        """Factor converting frame timestamps to seconds."""
        return SECONDS_PER_UNIT[self.timestamp_unit]

    @classmethod
    def from_yaml(cls, path: Path) -> "MapperConfig":
        """Load configuration from YAML file."""
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}

        kwargs = {}

        if "timestamp_unit" in data:
            kwargs["timestamp_unit"] = data["timestamp_unit"]
        if "log_level" in data:
            kwargs["log_level"] = str(data["log_level"]).upper()
        if "presets" in data:
            kwargs["presets"] = list(data["presets"])
        if "filtering" in data:
            kwargs["filtering"] = FilteringConfig(**data["filtering"])

        return cls(**kwargs)

    def to_yaml(self, path: Path) -> None:
        """Save configuration to YAML file."""

        def to_dict(obj):
            if hasattr(obj, "__dataclass_fields__"):
                return {k: to_dict(v) for k, v in obj.__dict__.items()}
            elif isinstance(obj, Path):
                return str(obj)
            return obj

        data = to_dict(self)

        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    def validate(self) -> List[str]:
        """Validate configuration and return list of issues."""
        from handmap.presets import PRESET_IDS

        issues = []

        if self.timestamp_unit not in TIMESTAMP_UNITS:
            issues.append(f"Unknown timestamp unit: {self.timestamp_unit}")

        if self.filtering.bootstrap_fps <= 0:
            issues.append(f"Bootstrap FPS must be positive, got {self.filtering.bootstrap_fps}")

        for preset_id in self.presets:
            if preset_id not in PRESET_IDS:
                issues.append(f"Unknown preset: {preset_id}")

        return issues
