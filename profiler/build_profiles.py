"""Batch color profiling over a directory or glob of images."""

from __future__ import annotations

import glob
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

from tqdm import tqdm

from profiler.config import load_config
from profiler.models.color_detector import ColorDetector

logger = logging.getLogger(__name__)

ColorProfile = Dict[str, int]


def collect_image_paths(images: str | Path, extensions: Sequence[str] = ("jpg", "jpeg", "png", "gif")) -> List[str]:
    images_path = Path(images).resolve()
    if images_path.is_dir():
        found = set()
        for ext in extensions:
            found.update(glob.glob(str(images_path / "**" / f"*.{ext}"), recursive=True))
        return sorted(found)
    return sorted(glob.glob(str(images_path)))


def profile_images(
    paths: Iterable[str],
    detector: ColorDetector,
    progress: bool = True,
) -> Dict[str, Optional[ColorProfile]]:
    """Profile every path; undecodable images map to None."""
    paths = list(paths)
    profiles: Dict[str, Optional[ColorProfile]] = {}
    for path in tqdm(paths, desc="Profiling", unit="img", ascii=True, disable=not progress):
        profiles[path] = detector.detect_colors(path)
    skipped = sum(1 for p in profiles.values() if p is None)
    logger.info("Profiled %d images (%d could not be decoded)", len(profiles) - skipped, skipped)
    return profiles


def profile_from_config(images: str | None = None, config: str = "config.yaml") -> Dict[str, Optional[ColorProfile]]:
    cfg = load_config(config)
    profiler_cfg = cfg["profiler"]
    images_arg = images or profiler_cfg.get("default_images_path")
    if not images_arg:
        raise ValueError("No images path provided and profiler.default_images_path missing in config.")
    img_paths = collect_image_paths(images_arg, profiler_cfg.get("extensions", ("jpg", "jpeg", "png", "gif")))
    if not img_paths:
        logger.warning("No images found for: %s", images_arg)
        return {}
    return profile_images(img_paths, ColorDetector.from_config(cfg), progress=profiler_cfg.get("progress", True))
