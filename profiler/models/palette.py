"""Reference palette and per-entry distance policies."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Mapping, Sequence, Tuple

import numpy as np

from profiler.errors import InvalidConfiguration

DEFAULT_PALETTE: Dict[str, Tuple[int, int, int]] = {
    "red": (237, 28, 36),
    "orange": (255, 127, 39),
    "yellow": (255, 242, 0),
    "green": (34, 177, 76),
    "turquoise": (85, 213, 253),
    "blue": (63, 72, 204),
    "purple": (163, 73, 164),
    "pink": (255, 174, 201),
    "white": (255, 255, 255),
    "gray": (127, 127, 127),
    "black": (10, 10, 10),
    "brown": (123, 64, 31),
}

DEFAULT_GRAYSCALE_LABELS = ("gray",)

_GRAY_MAX_STD = 13
_GRAY_MIN_CHANNEL = 90
_GRAY_MAX_CHANNEL = 230


class DistancePolicy(Enum):
    EUCLIDEAN = "euclidean"
    GRAYSCALE_BAND = "grayscale_band"


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def color_distance(sample: np.ndarray, reference: np.ndarray) -> int:
    """Euclidean RGB distance, halved when both colors share the same predominant hue.

    Two colors share a predominant hue when `red > green` and `green > blue`
    evaluate the same for both, so dark red stays closer to bright red than
    to a dark blue at the same raw distance.
    """
    sample = np.asarray(sample, dtype=np.float64)
    reference = np.asarray(reference, dtype=np.float64)
    dist = float(np.linalg.norm(sample - reference))
    same_rg = (sample[0] > sample[1]) == (reference[0] > reference[1])
    same_gb = (sample[1] > sample[2]) == (reference[1] > reference[2])
    if same_rg and same_gb:
        dist /= 2
    return round_half_up(dist)


def grayscale_distance(sample: np.ndarray) -> float:
    """0 for mid-brightness achromatic colors, inf otherwise.

    rgb(150, 150, 150) -> 0
    rgb(100, 110, 90)  -> 0   (std ~8.2)
    rgb(5, 5, 5)       -> inf (too dark, left to black)
    rgb(240, 240, 240) -> inf (too bright, left to white)
    """
    sample = np.asarray(sample, dtype=np.float64)
    if (
        float(np.std(sample)) < _GRAY_MAX_STD
        and sample.min() >= _GRAY_MIN_CHANNEL
        and sample.max() <= _GRAY_MAX_CHANNEL
    ):
        return 0
    return math.inf


@dataclass(frozen=True)
class PaletteEntry:
    label: str
    rgb: Tuple[int, int, int]
    policy: DistancePolicy = DistancePolicy.EUCLIDEAN
    reference: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "reference", np.array(self.rgb, dtype=np.float64))

    def distance(self, sample: np.ndarray) -> float:
        if self.policy is DistancePolicy.GRAYSCALE_BAND:
            return grayscale_distance(sample)
        return color_distance(sample, self.reference)


Palette = Tuple[PaletteEntry, ...]


def build_palette(
    colors: Mapping[str, Sequence[int]] | None = None,
    grayscale_labels: Iterable[str] | None = None,
) -> Palette:
    """Validate a label -> RGB mapping and turn it into an ordered palette.

    Without explicit `grayscale_labels`, "gray" uses the grayscale band when
    the palette has it.
    """
    if colors is None:
        colors = DEFAULT_PALETTE
    if not isinstance(colors, Mapping) or not colors:
        raise InvalidConfiguration("palette must be a non-empty mapping of label -> (r, g, b)")
    if grayscale_labels is None:
        grayscale_labels = [label for label in DEFAULT_GRAYSCALE_LABELS if label in colors]
    grayscale_labels = set(grayscale_labels)
    unknown = grayscale_labels - set(colors)
    if unknown:
        raise InvalidConfiguration(f"grayscale labels not in palette: {sorted(unknown)}")
    entries = []
    for label, rgb in colors.items():
        entries.append(
            PaletteEntry(
                label=str(label),
                rgb=_validate_rgb(label, rgb),
                policy=DistancePolicy.GRAYSCALE_BAND if label in grayscale_labels else DistancePolicy.EUCLIDEAN,
            )
        )
    return tuple(entries)


def palette_labels(palette: Palette) -> list[str]:
    return [entry.label for entry in palette]


def _validate_rgb(label: str, rgb: Sequence[int]) -> Tuple[int, int, int]:
    try:
        values = tuple(rgb)
    except TypeError:
        raise InvalidConfiguration(f"palette color {label!r} must be a sequence of 3 ints, got {rgb!r}") from None
    if len(values) != 3:
        raise InvalidConfiguration(f"palette color {label!r} must have 3 channels, got {len(values)}")
    for v in values:
        if isinstance(v, bool) or not isinstance(v, (int, np.integer)) or not 0 <= v <= 255:
            raise InvalidConfiguration(f"palette color {label!r} has channel {v!r} outside 0-255")
    return (int(values[0]), int(values[1]), int(values[2]))
