"""
Engine Configuration

Loads engine settings from a YAML file. The defaults ship in
engine_defaults.yaml next to this module; a user file only needs the
keys it overrides.
"""

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .placement.collision import CollisionMode
from .render.metrics import GridMetrics

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "engine_defaults.yaml"


class ConfigError(ValueError):
    """Invalid engine configuration."""


@dataclass
class RenderConfig:
    """Grid <-> pixel convention."""
    gutter: float = 8.0
    padding: float = 30.0
    origin: float = 15.0
    cell_height: float = 50.0

    def metrics(self, canvas_width: float) -> GridMetrics:
        """Metrics for a canvas of the given width."""
        return GridMetrics(
            canvas_width=canvas_width,
            gutter=self.gutter,
            padding=self.padding,
            origin=self.origin,
            cell_height=self.cell_height,
        )


@dataclass
class EngineConfig:
    """Configuration for the layout engine."""
    collision_mode: CollisionMode = CollisionMode.REFLOW
    damping: float = 0.12               # Smoothing factor per tick
    snap_threshold: float = 0.6         # Cells before the snap target moves
    ghost_snap_threshold: float = 0.5   # Tighter tolerance for the ghost
    tick_interval: float = 1.0 / 60.0   # Seconds between animation ticks
    max_search_rows: int = 100          # First-fit row bound
    narrow_max_width: float = 768
    medium_max_width: float = 1024
    render: RenderConfig = field(default_factory=RenderConfig)

    def validate(self):
        """Raise ConfigError if any value is out of range."""
        if not 0 < self.damping <= 1:
            raise ConfigError(f"damping must be in (0, 1], got {self.damping}")
        if self.snap_threshold < 0 or self.ghost_snap_threshold < 0:
            raise ConfigError("snap thresholds must be non-negative")
        if self.tick_interval <= 0:
            raise ConfigError(f"tick_interval must be positive, got {self.tick_interval}")
        if self.max_search_rows < 1:
            raise ConfigError(f"max_search_rows must be >= 1, got {self.max_search_rows}")
        if not 0 < self.narrow_max_width <= self.medium_max_width:
            raise ConfigError(
                f"breakpoints must satisfy 0 < narrow_max_width <= medium_max_width, "
                f"got {self.narrow_max_width} / {self.medium_max_width}"
            )
        if self.render.gutter < 0 or self.render.cell_height <= 0:
            raise ConfigError("render.gutter must be >= 0 and render.cell_height > 0")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "collision_mode": self.collision_mode.value,
            "damping": self.damping,
            "snap_threshold": self.snap_threshold,
            "ghost_snap_threshold": self.ghost_snap_threshold,
            "tick_interval": self.tick_interval,
            "max_search_rows": self.max_search_rows,
            "narrow_max_width": self.narrow_max_width,
            "medium_max_width": self.medium_max_width,
            "render": {
                "gutter": self.render.gutter,
                "padding": self.render.padding,
                "origin": self.render.origin,
                "cell_height": self.render.cell_height,
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any],
                  base: Optional["EngineConfig"] = None) -> "EngineConfig":
        """
        Build a config from a mapping, starting from `base` (or the defaults).

        Raises:
            ConfigError: on unknown keys or values of the wrong type
        """
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration must be a mapping, got {type(data).__name__}")

        config = base or cls()
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {unknown}")

        values: Dict[str, Any] = {}
        for key, value in data.items():
            if key == "render":
                values["render"] = _render_from_dict(value, config.render)
            elif key == "collision_mode":
                try:
                    values[key] = CollisionMode(value)
                except ValueError:
                    raise ConfigError(
                        f"Unknown collision_mode {value!r}, expected one of "
                        f"{[m.value for m in CollisionMode]}"
                    ) from None
            elif key == "max_search_rows":
                values[key] = _number(key, value, int)
            else:
                values[key] = _number(key, value, float)

        merged = {f.name: getattr(config, f.name) for f in fields(cls)}
        merged.update(values)
        result = cls(**merged)
        result.validate()
        return result


def _number(key: str, value: Any, kind: type):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{key} must be a number, got {value!r}")
    if kind is int and value != int(value):
        raise ConfigError(f"{key} must be an integer, got {value!r}")
    return kind(value)


def _render_from_dict(data: Any, base: RenderConfig) -> RenderConfig:
    if not isinstance(data, dict):
        raise ConfigError("render must be a mapping")
    known = {f.name for f in fields(RenderConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown render keys: {unknown}")
    merged = {f.name: getattr(base, f.name) for f in fields(RenderConfig)}
    merged.update({k: _number(f"render.{k}", v, float) for k, v in data.items()})
    return RenderConfig(**merged)


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Engine configuration file not found: {path}")
    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    return data or {}


def load_engine_config(path: Optional[Union[str, Path]] = None) -> EngineConfig:
    """
    Load the engine configuration.

    The shipped defaults are read first; when `path` is given, its keys
    override them.

    Args:
        path: Optional user configuration file

    Returns:
        Validated EngineConfig

    Raises:
        FileNotFoundError: if a configuration file does not exist
        ConfigError: if a file is not valid YAML or holds invalid values
    """
    config = EngineConfig.from_dict(_read_yaml(DEFAULT_CONFIG_PATH))
    if path is not None:
        path = Path(path)
        config = EngineConfig.from_dict(_read_yaml(path), base=config)
        logger.debug("Loaded engine configuration from %s", path)
    return config
