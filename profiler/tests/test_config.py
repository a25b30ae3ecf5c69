from pathlib import Path

import pytest

from profiler.config import DEFAULTS, load_config, merge_config
from profiler.errors import InvalidConfiguration
from profiler.models.color_detector import ColorDetector
from profiler.models.palette import DEFAULT_PALETTE, DistancePolicy

REPO_CONFIG = Path(__file__).resolve().parents[2] / "config.yaml"


def test_defaults_without_file():
    cfg = load_config(None)
    assert cfg == DEFAULTS
    detector = ColorDetector.from_config(cfg)
    assert detector.granularity == 7
    assert detector.center_area_margin == pytest.approx(0.16)
    assert detector.labels == list(DEFAULT_PALETTE)


def test_repo_config_matches_defaults():
    cfg = load_config(REPO_CONFIG)
    detector = ColorDetector.from_config(cfg)
    assert detector.labels == list(DEFAULT_PALETTE)
    assert [e.rgb for e in detector.palette] == list(DEFAULT_PALETTE.values())
    gray = [e for e in detector.palette if e.label == "gray"][0]
    assert gray.policy is DistancePolicy.GRAYSCALE_BAND


def test_file_overrides_merge_over_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "detector:\n"
        "  granularity: 11\n"
        "  palette:\n"
        "    light: [250, 250, 250]\n"
        "    dark: [5, 5, 5]\n",
        encoding="utf-8",
    )
    cfg = load_config(path)
    assert cfg["detector"]["center_area_margin"] == 0.16
    assert cfg["retriever"]["return_top_k"] == 12
    detector = ColorDetector.from_config(cfg)
    assert detector.granularity == 11
    assert detector.labels == ["light", "dark"]
    assert all(e.policy is DistancePolicy.EUCLIDEAN for e in detector.palette)


@pytest.mark.parametrize(
    "body",
    [
        "detector:\n  granularity: 0\n",
        "detector:\n  center_area_margin: 1.2\n",
        "detector:\n  palette: {}\n",
        "detector:\n  palette:\n    red: [256, 0, 0]\n",
        "retriever:\n  min_percent: 140\n",
        "retriever:\n  return_top_k: 0\n",
        "- just\n- a list\n",
    ],
)
def test_invalid_config_fails_at_load(tmp_path, body):
    path = tmp_path / "config.yaml"
    path.write_text(body, encoding="utf-8")
    with pytest.raises(InvalidConfiguration):
        load_config(path)


def test_merge_config_does_not_mutate_base():
    base = {"a": {"b": 1, "c": 2}}
    merged = merge_config(base, {"a": {"b": 5}})
    assert merged == {"a": {"b": 5, "c": 2}}
    assert base == {"a": {"b": 1, "c": 2}}
