from pathlib import Path

from PIL import Image

from profiler.build_profiles import collect_image_paths, profile_from_config, profile_images
from profiler.models.color_detector import ColorDetector


def _make_images(root: Path):
    (root / "nested").mkdir()
    Image.new("RGB", (60, 60), (255, 255, 255)).save(root / "white.png")
    Image.new("RGB", (60, 60), (10, 10, 10)).save(root / "nested" / "black.gif")
    (root / "broken.jpg").write_bytes(b"not really a jpeg")
    (root / "notes.txt").write_text("skip me", encoding="utf-8")


def test_collect_image_paths_walks_directory(tmp_path):
    _make_images(tmp_path)
    paths = collect_image_paths(tmp_path)
    names = sorted(Path(p).name for p in paths)
    assert names == ["black.gif", "broken.jpg", "white.png"]


def test_collect_image_paths_glob(tmp_path):
    _make_images(tmp_path)
    paths = collect_image_paths(tmp_path / "*.png")
    assert [Path(p).name for p in paths] == ["white.png"]


def test_profile_images_marks_undecodable(tmp_path):
    _make_images(tmp_path)
    paths = collect_image_paths(tmp_path)
    profiles = profile_images(paths, ColorDetector(), progress=False)
    by_name = {Path(p).name: v for p, v in profiles.items()}
    assert by_name["broken.jpg"] is None
    assert by_name["white.png"]["white"] == 100
    assert by_name["black.gif"]["black"] == 100


def test_profile_from_config_uses_default_images_path(tmp_path):
    _make_images(tmp_path)
    config = tmp_path / "config.yaml"
    config.write_text(
        f"profiler:\n  default_images_path: '{tmp_path.as_posix()}'\n  extensions: [png]\n  progress: false\n",
        encoding="utf-8",
    )
    profiles = profile_from_config(config=str(config))
    assert [Path(p).name for p in profiles] == ["white.png"]


def test_profile_from_config_no_matches(tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("profiler:\n  progress: false\n", encoding="utf-8")
    assert profile_from_config(images=str(tmp_path / "missing" / "*.png"), config=str(config)) == {}
