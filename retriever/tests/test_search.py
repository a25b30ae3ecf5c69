from profiler.models.palette import DEFAULT_PALETTE
from retriever.rerank.scoring import color_score, coverage, match_ratio
from retriever.search import run_search


def _profile(**shares):
    profile = {label: 0 for label in DEFAULT_PALETTE}
    profile.update(shares)
    return profile


PROFILES = {
    "a.jpg": _profile(red=60, black=30, white=10),
    "b.jpg": _profile(red=20, black=5, white=75),
    "c.jpg": None,
    "d.jpg": _profile(red=35, black=35, blue=30),
}


def test_scores():
    profile = PROFILES["a.jpg"]
    assert color_score(["red", "black"], profile) == 0.45
    assert coverage(["red", "black"], profile) == 0.9
    assert match_ratio(["red", "blue"], profile, 10) == 0.5
    assert match_ratio([], profile, 10) == 1.0
    assert color_score([], profile) == 0.0


def test_dominance_query_ranks_by_combined_share():
    results = run_search("mostly red and black", PROFILES)
    assert [r["path"] for r in results] == ["a.jpg", "d.jpg"]
    assert results[0]["colors"] == {"black": 30, "red": 60}


def test_plain_query_ranks_by_share():
    results = run_search("red", PROFILES, k=2)
    assert [r["path"] for r in results] == ["a.jpg", "d.jpg"]


def test_min_percent_filters():
    results = run_search("red", PROFILES, min_percent=50)
    assert [r["path"] for r in results] == ["a.jpg"]


def test_unknown_or_absent_colors():
    assert run_search("purple", PROFILES) == []
    assert run_search("nothing to see here", PROFILES) == []
