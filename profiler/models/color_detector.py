"""Grid-sampled palette classification of the central region of an image."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional, Sequence, Tuple

import numpy as np

from profiler.errors import InvalidConfiguration, InvalidRegion
from profiler.models.image_source import PixelImage, open_image
from profiler.models.palette import (
    Palette,
    build_palette,
    palette_labels,
    round_half_up,
)

logger = logging.getLogger(__name__)

DEFAULT_GRANULARITY = 7
DEFAULT_CENTER_AREA_MARGIN = 0.16  # ~1/6


@dataclass(frozen=True)
class Region:
    x_min: int
    x_max: int
    y_min: int
    y_max: int

    @property
    def width(self) -> int:
        return self.x_max - self.x_min

    @property
    def height(self) -> int:
        return self.y_max - self.y_min


def center_area(width: int, height: int, margin: float = DEFAULT_CENTER_AREA_MARGIN) -> Region:
    """Region of interest left after cutting `margin` of each dimension off every edge."""
    if margin >= 0.5:
        raise InvalidRegion(f"margin {margin} leaves no central area")
    region = Region(
        x_min=math.ceil(width * margin),
        x_max=math.floor(width - width * margin),
        y_min=math.ceil(height * margin),
        y_max=math.floor(height - height * margin),
    )
    if region.width < 0 or region.height < 0:
        raise InvalidRegion(f"empty central area for a {width}x{height} image with margin {margin}")
    return region


def grid_step(region: Region, granularity: int = DEFAULT_GRANULARITY) -> float:
    step = max(region.width, region.height) / granularity
    # single-pixel region
    return step if step > 0 else 1.0


def grid_points(region: Region, granularity: int = DEFAULT_GRANULARITY) -> Iterator[Tuple[int, int]]:
    """Yield integer (x, y) sample points over the region, column by column."""
    step = grid_step(region, granularity)
    i = 0
    while region.x_min + i * step <= region.x_max:
        x = int(region.x_min + i * step)
        j = 0
        while region.y_min + j * step <= region.y_max:
            yield x, int(region.y_min + j * step)
            j += 1
        i += 1


def classify_pixel(sample: Sequence[int], palette: Palette) -> str:
    """Label of the nearest palette entry; ties go to the earlier entry."""
    vector = np.asarray(sample[:3], dtype=np.float64)
    best = palette[0].label
    min_dist = math.inf
    for entry in palette:
        dist = entry.distance(vector)
        if dist < min_dist:
            min_dist = dist
            best = entry.label
    return best


def tally_colors(labels: Iterable[str], palette: Palette) -> Dict[str, int]:
    counts = {label: 0 for label in palette_labels(palette)}
    for label in labels:
        counts[label] += 1
    return counts


def to_percentages(tally: Mapping[str, int]) -> Dict[str, int]:
    total = sum(tally.values())
    if total == 0:
        raise InvalidRegion("no points were sampled, percentages are undefined")
    return {label: round_half_up(count / total * 100) for label, count in tally.items()}


class ColorDetector:
    """Estimate the share of each palette color in the center of an image.

    Sampling walks a grid of about `granularity` points per side over the region left
    after trimming `center_area_margin` from every edge. Each sampled pixel
    counts once for its nearest palette color.
    """

    def __init__(
        self,
        palette: Mapping[str, Sequence[int]] | None = None,
        granularity: int = DEFAULT_GRANULARITY,
        center_area_margin: float = DEFAULT_CENTER_AREA_MARGIN,
        grayscale_labels: Iterable[str] | None = None,
    ) -> None:
        self._palette: Palette = build_palette(palette, grayscale_labels)
        self.granularity = granularity
        self.center_area_margin = center_area_margin

    @classmethod
    def from_config(cls, cfg: Mapping[str, Any]) -> "ColorDetector":
        detector_cfg = cfg.get("detector", {})
        return cls(
            palette=detector_cfg.get("palette"),
            granularity=detector_cfg.get("granularity", DEFAULT_GRANULARITY),
            center_area_margin=detector_cfg.get("center_area_margin", DEFAULT_CENTER_AREA_MARGIN),
            grayscale_labels=detector_cfg.get("grayscale_labels"),
        )

    @property
    def palette(self) -> Palette:
        return self._palette

    def set_palette(
        self,
        colors: Mapping[str, Sequence[int]],
        grayscale_labels: Iterable[str] | None = None,
    ) -> "ColorDetector":
        """Replace the whole palette; the previous one is discarded."""
        self._palette = build_palette(colors, grayscale_labels)
        return self

    @property
    def labels(self) -> list[str]:
        return palette_labels(self._palette)

    @property
    def granularity(self) -> int:
        return self._granularity

    @granularity.setter
    def granularity(self, value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value <= 0:
            raise InvalidConfiguration(f"granularity must be a positive integer, got {value!r}")
        self._granularity = int(value)

    @property
    def center_area_margin(self) -> float:
        return self._center_area_margin

    @center_area_margin.setter
    def center_area_margin(self, value: float) -> None:
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not 0 <= value < 1:
            raise InvalidConfiguration(f"center area margin must be in [0, 1), got {value!r}")
        self._center_area_margin = float(value)

    def detect_colors(self, image_path: str | Path) -> Optional[Dict[str, int]]:
        """Return label -> percentage for the image, or None when it cannot be decoded."""
        with open_image(image_path) as image:
            if image is None:
                return None
            colors = self.detect_image_colors(image)
        logger.debug("Detected colors for %s: %s", image_path, colors)
        return colors

    def detect_image_colors(self, image: PixelImage) -> Dict[str, int]:
        return to_percentages(self.count_colors(image))

    def detect_array_colors(self, rgb_image: np.ndarray) -> Dict[str, int]:
        return self.detect_image_colors(PixelImage(np.asarray(rgb_image)))

    def count_colors(self, image: PixelImage) -> Dict[str, int]:
        """Raw number of sampled points classified to each palette label."""
        palette = self._palette
        region = center_area(image.width, image.height, self._center_area_margin)
        labels = (classify_pixel(image.get_rgb(x, y), palette) for x, y in grid_points(region, self._granularity))
        return tally_colors(labels, palette)
