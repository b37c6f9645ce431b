"""
Turns a ChartDocument into printable sheets.

Sheets are made of pages, each page being a vertical strip of measures,
pages are grouped on canvases. The layout only ever talks to an abstract
Surface, the Pillow surface turns the instructions into PNG images.
"""

from .charter import Charter, drawer_for, make_charter
from .config import Alignment, ChartType, Direction, LayoutConfig
from .geometry import CanvasConfig, Geometry, Page, PixelPosition
from .graph import Graph, GraphOption
from .surface import RecordingSurface, Surface, SurfaceFactory, SurfaceUnavailable
