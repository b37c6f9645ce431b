from decimal import Decimal
from io import BytesIO

import pytest
from PIL import Image

from dtxtools.chart import BarGroup, ChartDocument, ChartInfo, DrumLane

from ..charter import make_charter
from ..config import LayoutConfig
from ..geometry import CanvasConfig
from ..pillow_surface import PillowSurface, load_font
from ..surface import (
    FillOptions,
    HorizontalOrigin,
    Rect,
    StrokeOptions,
    SurfaceUnavailable,
    TextOptions,
    TextPosition,
    VerticalOrigin,
)

RED = (255, 0, 0)
GREEN = (0, 255, 0)
BLUE = (0, 0, 255)
WHITE = (255, 255, 255)


def small_surface() -> PillowSurface:
    return PillowSurface(CanvasConfig(pages=1, width=100, height=50, id="small"))


def decoded(surface: PillowSurface) -> Image.Image:
    image = Image.open(BytesIO(surface.finalize()))
    return image.convert("RGB")


def test_that_surfaces_finalize_to_png() -> None:
    png = small_surface().finalize()
    assert png.startswith(b"\x89PNG")
    assert Image.open(BytesIO(png)).size == (100, 50)


def test_rectangles() -> None:
    surface = small_surface()
    surface.add_rectangle(Rect(x=10, y=10, width=20, height=10), FillOptions("#ff0000"))
    surface.add_rectangle(
        Rect(x=50, y=40, width=10, height=20),
        FillOptions("#0000ff", vertical_origin=VerticalOrigin.BOTTOM),
    )
    image = decoded(surface)
    assert image.getpixel((15, 15)) == RED
    assert image.getpixel((55, 30)) == BLUE
    assert image.getpixel((55, 45)) == WHITE
    assert image.getpixel((5, 5)) == WHITE


def test_lines() -> None:
    surface = small_surface()
    surface.add_line(Rect(x=0, y=45, width=100), StrokeOptions("#0000ff"))
    assert decoded(surface).getpixel((50, 45)) == BLUE


def test_chips_are_centered_on_their_line() -> None:
    surface = small_surface()
    surface.add_chip(
        Rect(x=70, y=10, width=10, height=6),
        FillOptions("#ff0000", vertical_origin=VerticalOrigin.CENTER),
    )
    surface.add_chip(
        Rect(x=80, y=30),
        FillOptions("#ff0000", vertical_origin=VerticalOrigin.CENTER),
        Image.new("RGBA", (4, 4), GREEN + (255,)),
    )
    image = decoded(surface)
    assert image.getpixel((75, 8)) == RED
    assert image.getpixel((75, 12)) == RED
    assert image.getpixel((81, 29)) == GREEN
    assert image.getpixel((81, 33)) == WHITE


def test_text() -> None:
    surface = small_surface()
    options = TextOptions(
        fill="#000000",
        font_size=12,
        font_family="Arial",
        horizontal_origin=HorizontalOrigin.RIGHT,
    )
    surface.add_text(TextPosition(x=95, y=25), "", options)
    assert decoded(surface).getcolors(100 * 50) == [(100 * 50, WHITE)]

    surface.add_text(TextPosition(x=95, y=25, max_width=40), "A long title", options)
    colors = decoded(surface).getcolors(100 * 50)
    assert colors is not None and len(colors) > 1


def test_that_unknown_fonts_fall_back() -> None:
    assert load_font("Some Font Nobody Has", 12) is not None


def test_that_huge_canvases_are_unavailable() -> None:
    with pytest.raises(SurfaceUnavailable):
        PillowSurface(CanvasConfig(pages=1, width=20000, height=20000, id="huge"))


def test_a_whole_sheet() -> None:
    document = ChartDocument(
        chart_info=ChartInfo(title="Song", bpm=Decimal(140)),
        bar_groups=[BarGroup(notes={DrumLane.BD: "01000100"}) for _ in range(4)],
    )
    charter = make_charter(document, LayoutConfig())
    (png,) = charter.render(PillowSurface)
    assert png is not None
    image = Image.open(BytesIO(png))
    assert image.size == (charter.canvas_configs()[0].width, 834)
