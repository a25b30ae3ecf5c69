"""Scoring of color profiles against the colors a query asks for."""

from __future__ import annotations

from typing import Dict, Iterable


def color_score(query_colors: Iterable[str], profile: Dict[str, int]) -> float:
    """Mean share of the requested colors, in [0, 1]."""
    query_colors = list(query_colors)
    if not query_colors:
        return 0.0
    total = 0.0
    for c in query_colors:
        total += profile.get(c, 0)
    return float(total / len(query_colors) / 100.0)


def match_ratio(wanted: Iterable[str], profile: Dict[str, int], min_percent: float) -> float:
    wanted = set(wanted)
    if not wanted:
        return 1.0
    hits = [key for key in wanted if profile.get(key, 0) >= min_percent]
    return len(hits) / max(1, len(wanted))


def coverage(query_colors: Iterable[str], profile: Dict[str, int]) -> float:
    """Share of the image covered by the requested colors together, in [0, 1]."""
    return float(min(100, sum(profile.get(c, 0) for c in set(query_colors))) / 100.0)
