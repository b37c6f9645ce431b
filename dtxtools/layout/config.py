from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from dtxtools.chart import Instrument
from dtxtools.utils import clamp

DEFAULT_SCALE = Decimal("1.0")
MIN_SCALE = Decimal("0.5")
MAX_SCALE = Decimal("3.0")

DEFAULT_PAGE_HEIGHT = 720
MIN_PAGE_HEIGHT = 480
MAX_PAGE_HEIGHT = 3840

DEFAULT_PAGES_PER_CANVAS = 20
MIN_PAGES_PER_CANVAS = 6
MAX_PAGES_PER_CANVAS = 25


class Alignment(str, Enum):
    """How measures are distributed among pages"""

    # Every page has the same height, measures may be cut across two pages
    FIXED = "fixed"
    # Pages only hold whole measures
    MEASURE = "measure"


class Direction(str, Enum):
    """Where the first measure of a page sits"""

    UP = "up"  # at the bottom, drum sheets style
    DOWN = "down"  # at the top, guitar sheets style


class ChartType(str, Enum):
    """Which set of lanes the sheet shows"""

    FULL = "full"
    GITADORA = "Gitadora"
    VMIX = "Vmix"


@dataclass
class LayoutConfig:
    """Every value is clamped to its allowed range on construction"""

    instrument: Instrument = Instrument.DRUM
    scale: Decimal = DEFAULT_SCALE
    page_height: int = DEFAULT_PAGE_HEIGHT
    pages_per_canvas: int = DEFAULT_PAGES_PER_CANVAS
    alignment: Alignment = Alignment.FIXED
    direction: Direction = Direction.UP
    chart_type: ChartType = ChartType.FULL

    def __post_init__(self) -> None:
        self.instrument = Instrument(self.instrument)
        self.scale = clamp(Decimal(str(self.scale)), MIN_SCALE, MAX_SCALE)
        self.page_height = clamp(
            int(self.page_height), MIN_PAGE_HEIGHT, MAX_PAGE_HEIGHT
        )
        self.pages_per_canvas = clamp(
            int(self.pages_per_canvas), MIN_PAGES_PER_CANVAS, MAX_PAGES_PER_CANVAS
        )
        self.alignment = Alignment(self.alignment)
        self.direction = Direction(self.direction)
        self.chart_type = ChartType(self.chart_type)
