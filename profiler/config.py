"""YAML configuration for the profiler and the color search."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Dict

import yaml

from profiler.errors import InvalidConfiguration
from profiler.models.color_detector import ColorDetector

DEFAULTS: Dict[str, Any] = {
    "detector": {
        "granularity": 7,
        "center_area_margin": 0.16,
        "palette": None,
        "grayscale_labels": None,
    },
    "profiler": {
        "default_images_path": None,
        "extensions": ["jpg", "jpeg", "png", "gif"],
        "progress": True,
    },
    "retriever": {
        "return_top_k": 12,
        "min_percent": 10,
        "dominant_min_percent": 40,
    },
}


def load_config(path: str | Path | None = "config.yaml") -> Dict[str, Any]:
    """Read `path` over the built-in defaults and validate the detector section."""
    data: Dict[str, Any] = {}
    if path is not None:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise InvalidConfiguration(f"{path}: top level must be a mapping, got {type(data).__name__}")
    cfg = merge_config(DEFAULTS, data)
    validate_config(cfg)
    return cfg


def merge_config(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


def validate_config(cfg: Dict[str, Any]) -> None:
    # building a detector runs every palette/granularity/margin check
    ColorDetector.from_config(cfg)
    retriever_cfg = cfg.get("retriever", {})
    for key in ("min_percent", "dominant_min_percent"):
        value = retriever_cfg.get(key)
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not 0 <= value <= 100:
            raise InvalidConfiguration(f"retriever.{key} must be a percentage in [0, 100], got {value!r}")
    top_k = retriever_cfg.get("return_top_k")
    if isinstance(top_k, bool) or not isinstance(top_k, int) or top_k <= 0:
        raise InvalidConfiguration(f"retriever.return_top_k must be a positive integer, got {top_k!r}")
