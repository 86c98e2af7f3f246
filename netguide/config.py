"""Configuration loading for netguide."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


class LayoutConfig(BaseModel):
    width: int = 640
    height: int = 480
    link_distance: float = 50.0
    charge_strength: float = -100.0
    collision_radius: float = 20.0
    alpha_min: float = 0.001
    alpha_target_drag: float = 0.3  # liveliness held while a node is dragged
    velocity_decay: float = 0.4
    max_ticks: int = Field(default=300, gt=0)

    @property
    def alpha_decay(self) -> float:
        """Per-tick decay that cools alpha below alpha_min after ~max_ticks."""
        return 1 - self.alpha_min ** (1 / self.max_ticks)


class EncodingConfig(BaseModel):
    base_radius: float = 5.0
    degree_scale: float = 0.5
    palette: list[str] = Field(min_length=1, default_factory=lambda: [
        "#667eea", "#764ba2", "#f093fb", "#4facfe", "#43e97b", "#fa709a", "#fee140",
    ])
    neutral_color: str = "#999"
    stroke: str = "#fff"
    stroke_width: float = 1.5
    link_stroke_width: float = 1.0


class SampleConfig(BaseModel):
    node_count: int = Field(default=30, gt=0)
    extra_edge_probability: float = Field(default=0.3, ge=0.0, le=1.0)
    seed: int | None = None


class Config(BaseModel):
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    encoding: EncodingConfig = Field(default_factory=EncodingConfig)
    sample: SampleConfig = Field(default_factory=SampleConfig)
    guidelines: list[str] = Field(default_factory=lambda: [
        "size", "color", "crossings", "clustering",
    ])
    preview_limit: int = Field(default=5, ge=0)
    output_dir: str = "output"

    @property
    def resolved_output_dir(self) -> Path:
        """Resolve output_dir relative to project root."""
        p = Path(self.output_dir).expanduser()
        if p.is_absolute():
            return p
        return _project_root() / p


def _project_root() -> Path:
    """Return the netguide project root directory."""
    return Path(__file__).parent.parent


def load_config(config_path: Path | None = None) -> Config:
    """Load config from YAML file. Falls back to defaults if file missing."""
    if config_path is None:
        config_path = _project_root() / "config.yaml"

    if config_path.exists():
        raw: dict[str, Any] = yaml.safe_load(config_path.read_text()) or {}
        return Config(**raw)

    return Config()
