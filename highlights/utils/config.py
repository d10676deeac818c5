"""Configuration management with YAML support and pydantic models."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from highlights.engine.colors import (
    BASE_PALETTE,
    DEFAULT_LIGHTNESS,
    DEFAULT_SATURATION,
    GOLDEN_ANGLE,
)


class ColorConfig(BaseModel):
    palette: list[str] = Field(default_factory=lambda: list(BASE_PALETTE))
    hue_step: float = GOLDEN_ANGLE
    saturation: float = Field(default=DEFAULT_SATURATION, ge=0, le=100)
    lightness: float = Field(default=DEFAULT_LIGHTNESS, ge=0, le=100)

    def allocator_opts(self) -> dict[str, Any]:
        return {
            "palette": tuple(self.palette),
            "hue_step": self.hue_step,
            "saturation": self.saturation,
            "lightness": self.lightness,
        }


class DragConfig(BaseModel):
    epsilon: float = Field(default=0.01, gt=0)  # seconds; absorbs float jitter on boundaries


class SelectionConfig(BaseModel):
    min_tokens: int = Field(default=2, ge=1)


class LoggingConfig(BaseModel):
    log_dir: str = "data/logs"
    file_logging: bool = False


class AppConfig(BaseModel):
    colors: ColorConfig = ColorConfig()
    drag: DragConfig = DragConfig()
    selection: SelectionConfig = SelectionConfig()
    logging: LoggingConfig = LoggingConfig()


def load_config(path: str | Path | None = None) -> AppConfig:
    if path is None:
        candidates = [Path("highlights.yaml"), Path("highlights.yml"), Path("config.yaml")]
        for c in candidates:
            if c.exists():
                path = c
                break
    if path is not None:
        p = Path(path)
        if p.exists():
            with open(p) as f:
                data = yaml.safe_load(f) or {}
            return AppConfig(**data)
    return AppConfig()


def merge_cli_overrides(cfg: AppConfig, overrides: dict[str, Any]) -> AppConfig:
    data = cfg.model_dump()
    for key, val in overrides.items():
        if val is None:
            continue
        parts = key.split(".")
        d = data
        for p in parts[:-1]:
            d = d.setdefault(p, {})
        d[parts[-1]] = val
    return AppConfig(**data)


DEFAULT_CONFIG_YAML = """\
# highlights configuration

colors:
  palette:                   # tried in order before synthesizing
    - "#ffeb3b"
    - "#81c784"
    - "#64b5f6"
    - "#ff8a65"
    - "#f06292"
  hue_step: 137.508          # degrees between synthesized hues
  saturation: 60
  lightness: 75

drag:
  epsilon: 0.01              # seconds; boundary match tolerance, must be > 0

selection:
  min_tokens: 2              # tokens a drag-selection must span to commit

logging:
  log_dir: data/logs
  file_logging: false
"""
