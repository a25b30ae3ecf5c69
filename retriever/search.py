"""Rank color profiles by how well they match a text query."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional

from profiler.config import load_config
from retriever.query.parse_query import parse_query
from retriever.rerank.scoring import color_score, coverage, match_ratio


def run_search(
    query: str,
    profiles: Mapping[str, Optional[Dict[str, int]]],
    k: Optional[int] = None,
    min_percent: Optional[float] = None,
    cfg: Optional[Dict[str, Any]] = None,
) -> List[Dict[str, Any]]:
    """Return the top `k` profiled images for a query like "mostly red and black".

    Every requested color must cover at least `min_percent` of an image. A
    dominance query ("mostly", "mainly", ...) also needs the requested colors
    together to reach `retriever.dominant_min_percent`, and ranks by that
    combined share instead of the mean share.
    """
    cfg = cfg or load_config(None)
    retriever_cfg = cfg["retriever"]
    k = k if k is not None else retriever_cfg["return_top_k"]
    min_percent = min_percent if min_percent is not None else retriever_cfg["min_percent"]

    parsed = parse_query(query, labels=_known_labels(profiles.values()))
    if not parsed.colors:
        return []
    results = []
    for path, profile in profiles.items():
        if not profile:
            continue
        if match_ratio(parsed.colors, profile, min_percent) < 1.0:
            continue
        covered = coverage(parsed.colors, profile)
        if parsed.dominance and covered * 100 < retriever_cfg["dominant_min_percent"]:
            continue
        score = covered if parsed.dominance else color_score(parsed.colors, profile)
        results.append(
            {
                "path": path,
                "score": score,
                "colors": {c: profile.get(c, 0) for c in sorted(parsed.colors)},
                "profile": profile,
            }
        )
    results = sorted(results, key=lambda r: (-r["score"], r["path"]))[:k]
    return results


def _known_labels(profiles: Iterable[Optional[Dict[str, int]]]) -> Optional[set]:
    labels = set()
    for profile in profiles:
        if profile:
            labels.update(profile)
    return labels or None
