"""Optional chip images. When present, an image replaces the plain colored
rectangle of a glyph and its size replaces the default glyph size"""

from pathlib import Path
from typing import Dict, Mapping

from PIL import Image

DRUM_CHIP_FILES = {
    "LC": "leftcymbal_chip.png",
    "HH": "hihat_chip.png",
    "SD": "snare_chip.png",
    "LB": "leftbass_chip.png",
    "LP": "lefthihatpedal_chip.png",
    "HT": "hitom_chip.png",
    "BD": "rightbass_chip.png",
    "LT": "lowtom_chip.png",
    "FT": "floortom_chip.png",
    "RC": "rightcymbal_chip.png",
    "RD": "ridecymbal_chip.png",
}

BUTTON_CHIP_FILES = {
    "GFR": "red_gfchip.png",
    "GFG": "green_gfchip.png",
    "GFB": "blue_gfchip.png",
    "GFY": "yellow_gfchip.png",
    "GFM": "mag_gfchip.png",
    "GFO": "open_gfchip.png",
    "GFOV": "open_gfvchip.png",
    "GFW": "wail_gfchip.png",
}


def load_chip_images(folder: Path, files: Mapping[str, str]) -> Dict[str, Image.Image]:
    """Missing files are skipped, those glyphs keep their default look"""
    images = {}
    for glyph, name in files.items():
        path = folder / name
        if not path.is_file():
            continue

        with Image.open(path) as image:
            images[glyph] = image.convert("RGBA")

    return images
