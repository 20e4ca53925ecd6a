"""
Load and expose app config (YAML). Used by the generators to get grid size, display scale, output dir, etc.
"""
from pathlib import Path
from typing import Any

import yaml


def _project_root() -> Path:
    return Path(__file__).resolve().parent.parent


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load config from YAML. Path is optional; defaults to config/default.yaml."""
    if config_path is None:
        config_path = _project_root() / "config" / "default.yaml"
    path = Path(config_path)
    if not path.exists():
        return _defaults()
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return merge_config(_defaults(), data)


def merge_config(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Merge overrides into base one section deep (sections are dicts, scalars replace)."""
    merged = dict(base)
    for key, value in (overrides or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = {**merged[key], **value}
        else:
            merged[key] = value
    return merged


def _defaults() -> dict[str, Any]:
    return {
        "grid": {
            "width": 64,
            "height": 64,
            "display_scale": 4,
        },
        "palettes": {"default": "IRON"},
        "output": {
            "dir": "output",
            "filename_prefix": "item",
        },
        "logging": {"level": "INFO"},
        "placeholder": {
            "label": "CTX Fail",
            "color": "#FF0000B3",  # rgba(255, 0, 0, 0.7)
        },
    }


def resolve_grid_config(config: dict[str, Any] | None) -> tuple[int, int, int]:
    """Return (width, height, display_scale) with defaults filled in."""
    grid = {**_defaults()["grid"], **((config or {}).get("grid") or {})}
    return int(grid["width"]), int(grid["height"]), int(grid["display_scale"])


def get_output_dir(config: dict[str, Any]) -> Path:
    """Resolve output directory (relative to project root if needed)."""
    out = config.get("output", {})
    d = out.get("dir", "output")
    p = Path(d)
    if not p.is_absolute():
        p = _project_root() / p
    return p
