"""Rule-based parser turning a text query into palette colors."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, Optional, Set


COLOR_SYNONYMS = {
    "red": [r"red", r"crimson", r"scarlet", r"maroon", r"burgundy"],
    "orange": [r"orange", r"amber", r"tangerine"],
    "yellow": [r"yellow", r"gold", r"golden", r"lemon"],
    "green": [r"green", r"olive", r"emerald", r"lime"],
    "turquoise": [r"turquoise", r"teal", r"cyan", r"aqua"],
    "blue": [r"blue", r"navy", r"azure", r"cobalt"],
    "purple": [r"purple", r"violet", r"lavender", r"lilac"],
    "pink": [r"pink", r"magenta", r"fuchsia", r"rose"],
    "white": [r"white", r"cream", r"ivory", r"off[-\s]?white"],
    "gray": [r"gray", r"grey", r"silver", r"charcoal"],
    "black": [r"black", r"jet"],
    "brown": [r"brown", r"beige", r"tan", r"khaki", r"chocolate"],
}

DOMINANCE_HINTS = [r"mostly", r"mainly", r"predominantly", r"largely", r"dominant(?:ly)?", r"primarily"]


@dataclass
class ParsedColorQuery:
    colors: Set[str] = field(default_factory=set)
    dominance: Optional[str] = None  # "dominant" or None


def parse_query(text: str, labels: Optional[Iterable[str]] = None) -> ParsedColorQuery:
    """Extract canonical color labels, restricted to `labels` when given."""
    lower = text.lower()
    colors = _extract_terms(lower, COLOR_SYNONYMS)
    if labels is not None:
        allowed = set(labels)
        colors = {c for c in colors if c in allowed}
        # labels of a custom palette match literally
        colors |= {label for label in allowed if re.search(rf"\b{re.escape(label.lower())}\b", lower)}
    dominance = "dominant" if any(re.search(rf"\b{pattern}\b", lower) for pattern in DOMINANCE_HINTS) else None
    return ParsedColorQuery(colors=colors, dominance=dominance)


def _extract_terms(text: str, vocab: dict) -> Set[str]:
    found: Set[str] = set()
    for canonical, patterns in vocab.items():
        for pattern in patterns:
            if re.search(rf"\b{pattern}\b", text):
                found.add(canonical)
                break
    return found
