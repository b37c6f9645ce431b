"""Note drawers : how the chips of each instrument land on the sheet

Horizontal positions are offsets from the left edge of a page. Besides the
glyphs, every position table has the same fixed entries :

    BarNum      : measure number
    LeftBorder  : left border of the lanes
    RightBorder : right border of the lanes
    Bpm         : tempo change label
    width       : full width of a page
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Sequence, Tuple

from PIL import Image

from dtxtools.chart import ButtonCombination, DrumLane, Half, LaneLabel

from .config import ChartType
from .geometry import PixelPosition
from .surface import FillOptions, Rect, Surface, VerticalOrigin

BAR_NUMBER_X = 5
LEFT_BORDER_X = 47
FIRST_LANE_X = 50
BPM_LABEL_GAP = 8
BPM_LABEL_WIDTH = 48

Size = Tuple[int, int]


@dataclass
class DrawParameters:
    positions: Dict[str, int]
    sizes: Dict[str, Size]
    colors: Dict[str, str]
    images: Mapping[str, Image.Image]
    id_prefix: str
    # Glyphs of the buttons, in the order their flags appear in a label
    flag_glyphs: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def bar_number_x(self) -> int:
        return self.positions["BarNum"]

    @property
    def left_border(self) -> int:
        return self.positions["LeftBorder"]

    @property
    def right_border(self) -> int:
        return self.positions["RightBorder"]

    @property
    def bpm_x(self) -> int:
        return self.positions["Bpm"]

    @property
    def width(self) -> int:
        return self.positions["width"]

    def draw_glyph(
        self, glyph: str, surface: Surface, position: PixelPosition
    ) -> None:
        width, height = self.sizes[glyph]
        surface.add_chip(
            Rect(
                x=position.x + self.positions[glyph],
                y=position.y,
                width=width,
                height=height,
            ),
            FillOptions(fill=self.colors[glyph], vertical_origin=VerticalOrigin.CENTER),
            self.images.get(glyph),
        )


def glyph_size(
    glyph: str, default_sizes: Mapping[str, Size], images: Mapping[str, Image.Image]
) -> Size:
    if glyph in images:
        return images[glyph].size
    else:
        return default_sizes[glyph]


def lay_out_lanes(
    order: Sequence[str], sizes: Mapping[str, Size], lane_border: int
) -> Dict[str, int]:
    """Place the lanes side by side, left to right"""
    positions = {"BarNum": BAR_NUMBER_X, "LeftBorder": LEFT_BORDER_X}
    x = FIRST_LANE_X
    for glyph in order:
        positions[glyph] = x
        x += sizes[glyph][0] + lane_border

    positions["RightBorder"] = x
    positions["Bpm"] = x + BPM_LABEL_GAP
    positions["width"] = x + BPM_LABEL_GAP + BPM_LABEL_WIDTH
    return positions


class NoteDrawer(ABC):
    @abstractmethod
    def accepts(self, label: LaneLabel) -> bool:
        ...

    @abstractmethod
    def draw_note(
        self,
        label: LaneLabel,
        surface: Surface,
        position: PixelPosition,
        parameters: DrawParameters,
    ) -> None:
        ...


DRUM_CHIP_WIDTH = 18
DRUM_CHIP_HEIGHT = 5
DRUM_LANE_BORDER = 1

DRUM_EXTRA_WIDTH = {
    DrumLane.LC: 6,
    DrumLane.SD: 3,
    DrumLane.BD: 5,
    DrumLane.RC: 6,
    DrumLane.RD: 1,
}

DRUM_CHIP_SIZES: Dict[str, Size] = {
    lane.value: (DRUM_CHIP_WIDTH + DRUM_EXTRA_WIDTH.get(lane, 0), DRUM_CHIP_HEIGHT)
    for lane in DrumLane
}

DRUM_CHIP_COLORS = {
    "LC": "#ff4ca1",
    "HH": "#00ffff",
    "LB": "#e7baff",
    "LP": "#ffd3f0",
    "SD": "#fff040",
    "HT": "#00ff00",
    "BD": "#e7baff",
    "LT": "#ff0000",
    "FT": "#fea101",
    "RC": "#00ccff",
    "RD": "#5a9cf9",
}

DRUM_LANE_ORDER = {
    ChartType.FULL: ["LC", "HH", "LP", "SD", "HT", "BD", "LT", "FT", "RC", "RD"],
    ChartType.GITADORA: ["LC", "HH", "LP", "SD", "HT", "BD", "LT", "FT", "RC"],
    ChartType.VMIX: ["HH", "SD", "BD", "HT", "LT", "RC"],
}

# Lanes drawn on top of another one : alias -> lane it shares
DRUM_LANE_ALIASES = {
    ChartType.FULL: {"LB": "LP"},
    ChartType.GITADORA: {"RD": "RC", "LB": "LP"},
    ChartType.VMIX: {
        "LC": "HH",
        "LP": "HH",
        "FT": "LT",
        "RD": "RC",
        "LB": "BD",
    },
}

DRUM_ID_PREFIX = "dtxdrums"


def drum_draw_parameters(
    chart_type: ChartType = ChartType.FULL,
    images: Optional[Mapping[str, Image.Image]] = None,
) -> DrawParameters:
    images = images or {}
    sizes = {
        glyph: glyph_size(glyph, DRUM_CHIP_SIZES, images) for glyph in DRUM_CHIP_SIZES
    }
    positions = lay_out_lanes(DRUM_LANE_ORDER[chart_type], sizes, DRUM_LANE_BORDER)
    for alias, lane in DRUM_LANE_ALIASES[chart_type].items():
        positions[alias] = positions[lane]
        sizes[alias] = sizes[lane]

    return DrawParameters(
        positions=positions,
        sizes=sizes,
        colors=dict(DRUM_CHIP_COLORS),
        images=images,
        id_prefix=DRUM_ID_PREFIX,
    )


class DrumDrawer(NoteDrawer):
    """One chip per note, in the lane's column"""

    def accepts(self, label: LaneLabel) -> bool:
        return isinstance(label, DrumLane)

    def draw_note(
        self,
        label: LaneLabel,
        surface: Surface,
        position: PixelPosition,
        parameters: DrawParameters,
    ) -> None:
        assert isinstance(label, DrumLane)
        parameters.draw_glyph(label.value, surface, position)


BUTTON_CHIP_WIDTH = 19
BUTTON_CHIP_HEIGHT = 5
BUTTON_LANE_BORDER = 0

BUTTON_CHIP_SIZES: Dict[str, Size] = {
    "GFR": (BUTTON_CHIP_WIDTH, BUTTON_CHIP_HEIGHT),
    "GFG": (BUTTON_CHIP_WIDTH, BUTTON_CHIP_HEIGHT),
    "GFB": (BUTTON_CHIP_WIDTH, BUTTON_CHIP_HEIGHT),
    "GFY": (BUTTON_CHIP_WIDTH, BUTTON_CHIP_HEIGHT),
    "GFM": (BUTTON_CHIP_WIDTH, BUTTON_CHIP_HEIGHT),
    # open notes span every button lane
    "GFO": (BUTTON_CHIP_WIDTH * 5, BUTTON_CHIP_HEIGHT),
    "GFOV": (BUTTON_CHIP_WIDTH * 3, BUTTON_CHIP_HEIGHT),
    "GFW": (BUTTON_CHIP_WIDTH, 19),
}

BUTTON_CHIP_COLORS = {
    "GFR": "#ff0000",
    "GFG": "#00ff00",
    "GFB": "#0000ff",
    "GFY": "#ffff00",
    "GFM": "#ff00ff",
    "GFO": "#ffffff",
    "GFOV": "#ffffff",
    "GFW": "#654321",
}

BUTTON_LANE_ORDER = {
    ChartType.FULL: ["GFR", "GFG", "GFB", "GFY", "GFM", "GFW"],
    ChartType.GITADORA: ["GFR", "GFG", "GFB", "GFY", "GFM", "GFW"],
    ChartType.VMIX: ["GFR", "GFG", "GFB", "GFW"],
}

FIVE_BUTTONS = ("GFR", "GFG", "GFB", "GFY", "GFM")
THREE_BUTTONS = ("GFR", "GFG", "GFB")

OPEN_GLYPH_OFFSET = 3
WAIL_GLYPH = "GFW"


def button_draw_parameters(
    chart_type: ChartType = ChartType.FULL,
    half: Half = Half.GUITAR,
    images: Optional[Mapping[str, Image.Image]] = None,
) -> DrawParameters:
    images = images or {}
    sizes = {
        glyph: glyph_size(glyph, BUTTON_CHIP_SIZES, images)
        for glyph in BUTTON_CHIP_SIZES
    }
    positions = lay_out_lanes(BUTTON_LANE_ORDER[chart_type], sizes, BUTTON_LANE_BORDER)
    open_x = positions["LeftBorder"] + OPEN_GLYPH_OFFSET
    if chart_type == ChartType.VMIX:
        positions["GFY"] = positions["GFG"]
        positions["GFM"] = positions["GFB"]
        sizes["GFY"] = sizes["GFG"]
        sizes["GFM"] = sizes["GFB"]
        positions["GFOV"] = open_x
        flag_glyphs = THREE_BUTTONS
    else:
        positions["GFO"] = open_x
        flag_glyphs = FIVE_BUTTONS

    return DrawParameters(
        positions=positions,
        sizes=sizes,
        colors=dict(BUTTON_CHIP_COLORS),
        images=images,
        id_prefix=f"dtxGF{half.value}",
        flag_glyphs=flag_glyphs,
    )


class ButtonDrawer(NoteDrawer):
    """Guitar and bass : one chip per held button, a single wide chip for
    open picks. Only the first buttons that the layout has room for are
    looked at"""

    def __init__(self, half: Half):
        self.half = half

    def accepts(self, label: LaneLabel) -> bool:
        return isinstance(label, ButtonCombination) and label.half == self.half

    def draw_note(
        self,
        label: LaneLabel,
        surface: Surface,
        position: PixelPosition,
        parameters: DrawParameters,
    ) -> None:
        if not self.accepts(label):
            return

        assert isinstance(label, ButtonCombination)
        if label.wail:
            parameters.draw_glyph(WAIL_GLYPH, surface, position)
            return

        held = [
            glyph
            for glyph, flag in zip(parameters.flag_glyphs, label.flags)
            if flag
        ]
        if not held:
            open_glyph = "GFOV" if len(parameters.flag_glyphs) == 3 else "GFO"
            parameters.draw_glyph(open_glyph, surface, position)
            return

        for glyph in held:
            parameters.draw_glyph(glyph, surface, position)
