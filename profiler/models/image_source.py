"""Pillow-backed image decoding with pixel access for the sampler."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional, Tuple

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)

SUPPORTED_MIME_TYPES = ("image/jpeg", "image/png", "image/gif")

# corrupt chunks surface as SyntaxError, oversized images as DecompressionBombError
DECODE_ERRORS = (OSError, SyntaxError, ValueError, Image.DecompressionBombError)


@dataclass
class PixelImage:
    """Decoded RGB pixels (H x W x 3, uint8) plus the detected MIME type."""

    pixels: np.ndarray
    mime: Optional[str] = None

    def __post_init__(self) -> None:
        if self.pixels.ndim != 3 or self.pixels.shape[2] < 3:
            raise ValueError(f"expected an H x W x 3 RGB array, got shape {self.pixels.shape}")
        # alpha is never used for classification
        self.pixels = self.pixels[:, :, :3]

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    def get_rgb(self, x: int, y: int) -> Tuple[int, int, int]:
        # x_max == width when the margin is 0, so the far edge maps to the last column/row
        x = min(max(int(x), 0), self.width - 1)
        y = min(max(int(y), 0), self.height - 1)
        r, g, b = self.pixels[y, x]
        return int(r), int(g), int(b)


def detect_mime(img: Image.Image) -> Optional[str]:
    if img.format is None:
        return None
    return Image.MIME.get(img.format)


@contextmanager
def open_image(path: str | Path) -> Iterator[Optional[PixelImage]]:
    """Decode `path` into a PixelImage, or yield None when it cannot be decoded.

    The format is read from the file header, so a PNG saved as `photo.jpg`
    still decodes. The Pillow handle is closed before the block runs.
    """
    try:
        img = Image.open(path)
    except DECODE_ERRORS as exc:
        logger.warning("Could not open image %s: %s", path, exc)
        yield None
        return
    try:
        mime = detect_mime(img)
        if mime not in SUPPORTED_MIME_TYPES:
            logger.warning("Unsupported image type %s for %s", mime or img.format, path)
            pixels = None
        else:
            pixels = _decode_rgb(img, path)
    finally:
        img.close()
    yield PixelImage(pixels, mime=mime) if pixels is not None else None


def _decode_rgb(img: Image.Image, path: str | Path) -> Optional[np.ndarray]:
    try:
        if img.mode == "I" or img.mode.startswith("I;16"):
            return _wide_gray_to_rgb(np.asarray(img))
        return np.asarray(img.convert("RGB"), dtype=np.uint8)
    except DECODE_ERRORS as exc:
        logger.warning("Could not decode image %s: %s", path, exc)
        return None


def _wide_gray_to_rgb(gray: np.ndarray) -> np.ndarray:
    """Reduce 16-bit grayscale to 8 bits per channel instead of clipping at 255."""
    narrowed = (np.clip(gray.astype(np.int64), 0, 0xFFFF) >> 8).astype(np.uint8)
    return np.stack([narrowed] * 3, axis=-1)
