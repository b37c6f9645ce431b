"""Note count graph : one vertical bar per lane, in the style of the
in-game result screens. A bar is full when its lane holds a third of the
chart's notes, with the reference count kept between 150 and 250"""

import warnings
from dataclasses import dataclass, replace
from enum import Enum
from fractions import Fraction
from math import ceil
from typing import List, Optional, Union

from dtxtools.chart import (
    ButtonCounts,
    ChartDocument,
    DrumCounts,
    Instrument,
    NoteCounts,
    empty_counts,
)
from dtxtools.utils import clamp

from .geometry import CanvasConfig
from .surface import (
    FillOptions,
    HorizontalOrigin,
    Rect,
    StrokeOptions,
    Surface,
    SurfaceFactory,
    TextOptions,
    TextPosition,
    VerticalOrigin,
)

GRAPH_HEIGHT = 750
REFERENCE_HEIGHT = 505
ASPECT_RATIO = Fraction(190, 505)
GRAPH_WIDTH = GRAPH_HEIGHT * ASPECT_RATIO
REFERENCE_WIDTH = REFERENCE_HEIGHT * ASPECT_RATIO
BAR_WIDTH = 6 * GRAPH_WIDTH / REFERENCE_WIDTH
BAR_GAP = BAR_WIDTH * 2

# Margins are designed on the reference height then scaled up
MARGIN_SCALE = Fraction(GRAPH_HEIGHT, REFERENCE_HEIGHT)
MARGIN_B = 86 * MARGIN_SCALE
MARGIN_C = 12 * MARGIN_SCALE
MARGIN_D = 3 * MARGIN_SCALE
MARGIN_E = 16 * MARGIN_SCALE
MARGIN_F = 40 * MARGIN_SCALE
DIAGRAM_HEIGHT = GRAPH_HEIGHT - MARGIN_B - MARGIN_C - MARGIN_D
BASELINE_Y = GRAPH_HEIGHT - MARGIN_B - MARGIN_C

PROPORTION = Fraction(33, 100)
MIN_REFERENCE_COUNT = 150
MAX_REFERENCE_COUNT = 250

LANE_FONT_SIZE = 12
TOTAL_COUNT_FONT_SIZE = 48
TOTAL_LABEL_FONT_SIZE = 24

BACKGROUND_COLOR = "#111111"
EMPTY_BAR_COLOR = "#2f2f2f"
TEXT_COLOR = "#ffffff"
BASELINE_COLOR = "#b7b7b7"
DEFAULT_ID = "dtxgraph"

LANE_COLORS = {
    "LC": "#ff1f7b",
    "HH": "#6ac0ff",
    "LB": "#ff4bed",
    "LP": "#ff4bed",
    "SD": "#fcfe16",
    "HT": "#02ff00",
    "BD": "#9b81ff",
    "LT": "#ff0000",
    "FT": "#ffa919",
    "RC": "#00ccff",
    "RD": "#5eb5ff",
    "R": "#ff0000",
    "G": "#00ff00",
    "B": "#0000ff",
    "Y": "#ffff00",
    "M": "#ff00ff",
    "O": "#ffffff",
}


class GraphOption(str, Enum):
    """Which drum lanes are merged together, guitar and bass graphs always
    show the 5 buttons and open picks"""

    FULL = "full"
    LP_LB = "LP+LB"
    RC_RD = "RC+RD"
    GITADORA = "Gitadora"


@dataclass(frozen=True)
class GraphLane:
    name: str
    count: int

    @property
    def color(self) -> str:
        return LANE_COLORS[self.name]


def drum_lanes(counts: DrumCounts, option: GraphOption) -> List[GraphLane]:
    merge_pedals = option in (GraphOption.LP_LB, GraphOption.GITADORA)
    merge_cymbals = option in (GraphOption.RC_RD, GraphOption.GITADORA)
    lanes = []
    for name in ("LC", "HH", "LP", "LB", "SD", "HT", "BD", "LT", "FT", "RC", "RD"):
        count = counts[name]
        if name == "LP" and merge_pedals:
            count += counts.LB
        elif name == "RC" and merge_cymbals:
            count += counts.RD
        elif (name == "LB" and merge_pedals) or (name == "RD" and merge_cymbals):
            continue
        lanes.append(GraphLane(name, count))
    return lanes


def button_lanes(counts: ButtonCounts) -> List[GraphLane]:
    lanes = [GraphLane(name, counts[name]) for name in ("R", "G", "B", "Y", "M")]
    lanes.append(GraphLane("O", counts.open))
    return lanes


class Graph:
    def __init__(
        self,
        document: ChartDocument,
        instrument: Instrument,
        option: Union[GraphOption, str] = GraphOption.GITADORA,
        id: Optional[str] = None,
    ):
        self.instrument = Instrument(instrument)
        try:
            self.option = GraphOption(option)
        except ValueError:
            warnings.warn(f"Unknown graph option {option!r}, using full")
            self.option = GraphOption.FULL

        self.counts: NoteCounts = document.metadata.get(
            self.instrument, empty_counts(self.instrument)
        )
        self.config = CanvasConfig(
            pages=1,
            width=ceil(GRAPH_WIDTH),
            height=GRAPH_HEIGHT,
            id=id or DEFAULT_ID,
            background_color=BACKGROUND_COLOR,
        )

    def lanes(self) -> List[GraphLane]:
        if isinstance(self.counts, DrumCounts):
            return drum_lanes(self.counts, self.option)
        else:
            return button_lanes(self.counts)

    def reference_count(self) -> Fraction:
        return clamp(
            self.counts.total * PROPORTION,
            Fraction(MIN_REFERENCE_COUNT),
            Fraction(MAX_REFERENCE_COUNT),
        )

    def draw(self, factory: SurfaceFactory) -> Surface:
        surface = factory(self.config)
        lanes = self.lanes()
        reference = self.reference_count()
        diagram_width = len(lanes) * (BAR_WIDTH + BAR_GAP) - BAR_GAP
        margin = max(Fraction(0), (GRAPH_WIDTH - diagram_width) / 2)
        for index, lane in enumerate(lanes):
            x = index * (BAR_WIDTH + BAR_GAP) + margin
            surface.add_rectangle(
                Rect(x=x, y=BASELINE_Y, width=BAR_WIDTH, height=DIAGRAM_HEIGHT),
                FillOptions(
                    fill=EMPTY_BAR_COLOR, vertical_origin=VerticalOrigin.BOTTOM
                ),
            )
            proportion = min(Fraction(lane.count) / reference, Fraction(1))
            surface.add_rectangle(
                Rect(
                    x=x,
                    y=BASELINE_Y,
                    width=BAR_WIDTH,
                    height=proportion * DIAGRAM_HEIGHT,
                ),
                FillOptions(fill=lane.color, vertical_origin=VerticalOrigin.BOTTOM),
            )
            surface.add_text(
                TextPosition(x=x + BAR_WIDTH / 2, y=GRAPH_HEIGHT - MARGIN_B),
                str(lane.count),
                TextOptions(
                    fill=TEXT_COLOR,
                    font_size=LANE_FONT_SIZE,
                    font_family="Arial",
                    horizontal_origin=HorizontalOrigin.CENTER,
                    vertical_origin=VerticalOrigin.BOTTOM,
                ),
            )

        surface.add_line(
            Rect(x=margin, y=BASELINE_Y, width=diagram_width),
            StrokeOptions(stroke=BASELINE_COLOR, stroke_width=2),
        )
        label_options = TextOptions(
            fill=TEXT_COLOR,
            font_size=TOTAL_LABEL_FONT_SIZE,
            font_family="Verdana",
            horizontal_origin=HorizontalOrigin.RIGHT,
            vertical_origin=VerticalOrigin.BOTTOM,
        )
        surface.add_text(
            TextPosition(x=GRAPH_WIDTH - margin, y=GRAPH_HEIGHT - MARGIN_E - MARGIN_F),
            "Total Notes",
            label_options,
        )
        surface.add_text(
            TextPosition(x=GRAPH_WIDTH - margin, y=GRAPH_HEIGHT - MARGIN_E),
            str(self.counts.total),
            replace(label_options, font_size=TOTAL_COUNT_FONT_SIZE),
        )
        return surface

    def render(self, factory: SurfaceFactory) -> bytes:
        return self.draw(factory).finalize()
