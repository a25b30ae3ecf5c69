"""Exception taxonomy for color profiling."""

from __future__ import annotations


class ColorProfilerError(Exception):
    """Base exception for the profiler."""


class InvalidRegion(ColorProfilerError, ValueError):
    """Region of interest is empty or inverted, so nothing can be sampled."""


class InvalidConfiguration(ColorProfilerError, ValueError):
    """Palette, granularity or margin outside their accepted ranges."""
