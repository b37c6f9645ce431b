from pathlib import Path

from PIL import Image

from ..assets import DRUM_CHIP_FILES, load_chip_images


def test_that_missing_chip_images_are_skipped(tmp_path: Path) -> None:
    Image.new("RGB", (22, 7), "#ffff00").save(tmp_path / "snare_chip.png")
    images = load_chip_images(tmp_path, DRUM_CHIP_FILES)
    assert list(images) == ["SD"]
    assert images["SD"].mode == "RGBA"
    assert images["SD"].size == (22, 7)
