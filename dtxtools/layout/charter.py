"""Chart sheets

A Charter lays a ChartDocument out on one or more canvases and issues the
drawing instructions, in this order :

    1. the info band of every canvas
    2. the frame of every page
    3. for each measure : beat lines, measure number, tempo changes, chips
    4. the start (background music) and end lines
    5. "Part X of N" on every canvas when there is more than one

Positions outside of the chart raise PositionOutOfRange and abort the whole
drawing. A canvas whose surface could not be created is None, everything that
should have been drawn on it is skipped with a warning.
"""

import warnings
from decimal import Decimal
from fractions import Fraction
from math import floor
from typing import List, Mapping, Optional, Tuple

from PIL import Image

from dtxtools.chart import (
    INSTRUMENT_HALF,
    ChartDocument,
    Instrument,
    iter_chips,
)
from dtxtools.timemap import QUARTER_BEAT_LINES, AbsolutePosition, TimeMap
from dtxtools.utils import none_or, pretty_print_decimal

from .config import MIN_PAGES_PER_CANVAS, ChartType, Direction, LayoutConfig
from .drawers import (
    ButtonDrawer,
    DrawParameters,
    DrumDrawer,
    NoteDrawer,
    button_draw_parameters,
    drum_draw_parameters,
)
from .geometry import (
    MARGIN_A,
    MARGIN_C,
    MARGIN_D,
    MARGIN_F,
    MARGIN_G,
    MARGIN_H,
    CanvasConfig,
    Geometry,
    PixelPosition,
)
from .surface import (
    FillOptions,
    HorizontalOrigin,
    Rect,
    StrokeOptions,
    Surface,
    SurfaceFactory,
    SurfaceUnavailable,
    TextOptions,
    TextPosition,
    VerticalOrigin,
)

INFO_BAND_COLOR = "#221e1a"
PAGE_FILL_COLOR = "#221e1a"

BAR_LINE_COLOR = "#707070"
QUARTER_LINE_COLOR = "#4b4c4a"
END_LINE_COLOR = "#ff0000"
START_LINE_COLOR = "#00ff00"
TITLE_LINE_COLOR = "#707070"
BORDER_LINE_COLOR = "#707070"
BPM_MARKER_LINE_COLOR = "#eeffab"

BAR_NUMBER_TEXT_COLOR = "#000000"
BPM_MARKER_TEXT_COLOR = "#ffffff"
INFO_TEXT_COLOR = "#ffffff"
PART_NUMBER_TEXT_COLOR = "#000000"

BAR_NUMBER_FONT_SIZE = 24
BPM_MARKER_FONT_SIZE = 14
TITLE_FONT_SIZE = 30
ARTIST_FONT_SIZE = 16
INFO_FONT_SIZE = 24
PART_NUMBER_FONT_SIZE = 18

TITLE_FONT = "Meiryo UI"
TEXT_FONT = "Arial"

# The title sits this far above the divider line, the artist right on it
TITLE_RAISE = 19
# Only valid for the bar number font size and family
BAR_NUMBER_RAISE = 5
PART_NUMBER_WIDTH = 85
MAX_BAR_NUMBER = 999


def format_song_length(seconds: Fraction) -> str:
    total = floor(seconds + Fraction(1, 2))
    minutes, rest = divmod(total, 60)
    return f"{minutes}:{rest:02d}"


def format_level(level: Decimal, chart_type: ChartType) -> str:
    """V-mix levels go from 1 to 100"""
    if chart_type == ChartType.VMIX:
        return str(floor(level * 10))
    else:
        return f"{level:.2f}"


class Charter:
    def __init__(
        self,
        document: ChartDocument,
        time_map: TimeMap,
        config: LayoutConfig,
        drawer: NoteDrawer,
        parameters: DrawParameters,
    ):
        self.document = document
        self.time_map = time_map
        self.config = config
        self.drawer = drawer
        self.parameters = parameters
        self.geometry = Geometry(
            time_map, config, parameters.width, parameters.id_prefix
        )
        self._surfaces: List[Optional[Surface]] = []

    def canvas_configs(self) -> List[CanvasConfig]:
        return self.geometry.canvases

    def pixel_of(self, position: AbsolutePosition) -> PixelPosition:
        return self.geometry.pixel_of(position)

    def draw(self, factory: SurfaceFactory) -> List[Optional[Surface]]:
        self._surfaces = [self._make_surface(factory, c) for c in self.canvas_configs()]
        if not self.time_map.bars:
            return self._surfaces

        self._draw_chart_info()
        self._draw_page_frames()
        for index, bar_group in enumerate(self.document.bar_groups):
            self._draw_lines_in_bar(index)
            self._draw_bar_number(index)
            for bpm_change in self.time_map.bars[index].bpm_changes:
                self._draw_bpm_marker(bpm_change.position, bpm_change.BPM)

            for label, raw in bar_group.notes.items():
                if not self.drawer.accepts(label):
                    continue

                for chip in iter_chips(raw, bar_group.line_count):
                    position = self.time_map.position_at(index, chip.line)
                    pixel = self.pixel_of(position)
                    surface = self._surface(pixel.canvas)
                    if surface is not None:
                        self.drawer.draw_note(label, surface, pixel, self.parameters)

        self._draw_chart_line(self.time_map.bgm_start(), START_LINE_COLOR)
        self._draw_chart_line(self.time_map.chart_length(), END_LINE_COLOR)
        if len(self._surfaces) > 1:
            for canvas in range(len(self._surfaces)):
                self._draw_part_number(canvas)

        return self._surfaces

    def render(self, factory: SurfaceFactory) -> List[Optional[bytes]]:
        """Draw then finalize every canvas"""
        return [none_or(lambda s: s.finalize(), s) for s in self.draw(factory)]

    def _make_surface(
        self, factory: SurfaceFactory, config: CanvasConfig
    ) -> Optional[Surface]:
        try:
            return factory(config)
        except SurfaceUnavailable as e:
            warnings.warn(f"Canvas {config.id} is unavailable : {e}")
            return None

    def _surface(self, canvas: int) -> Optional[Surface]:
        surface = self._surfaces[canvas]
        if surface is None:
            warnings.warn(f"Canvas {canvas} is unavailable, skipping")
        return surface

    def _draw_chart_info(self) -> None:
        info = self.document.chart_info
        instrument = self.config.instrument
        counts = self.document.metadata.get(instrument)
        total = counts.total if counts is not None else 0
        level = format_level(info.level(instrument), self.config.chart_type)
        upper_line = (
            f"{instrument.value.upper()} Level: {level}  "
            f"BPM: {pretty_print_decimal(info.bpm)}"
        )
        length = format_song_length(self.time_map.fractional_duration())
        lower_line = f"Length: {length}  Total Notes: {total}"

        stride = self.parameters.width + MARGIN_F
        info_x = MARGIN_C + stride * MIN_PAGES_PER_CANVAS
        max_title_width = stride * Fraction("3.8") + MARGIN_C
        max_info_width = stride * 2 + MARGIN_D
        title_options = TextOptions(
            fill=INFO_TEXT_COLOR,
            font_size=TITLE_FONT_SIZE,
            font_family=TITLE_FONT,
            vertical_origin=VerticalOrigin.BOTTOM,
        )
        info_options = TextOptions(
            fill=INFO_TEXT_COLOR,
            font_size=INFO_FONT_SIZE,
            font_family=TEXT_FONT,
            horizontal_origin=HorizontalOrigin.RIGHT,
            vertical_origin=VerticalOrigin.BOTTOM,
        )
        for canvas, config in enumerate(self.canvas_configs()):
            surface = self._surface(canvas)
            if surface is None:
                continue

            surface.add_rectangle(
                Rect(x=-1, y=-1, width=config.width + 2, height=MARGIN_A + 3),
                FillOptions(fill=INFO_BAND_COLOR),
            )
            surface.add_text(
                TextPosition(
                    x=MARGIN_C + 2, y=MARGIN_A - TITLE_RAISE, max_width=max_title_width
                ),
                info.title,
                title_options,
            )
            if info.artist:
                surface.add_text(
                    TextPosition(x=MARGIN_C + 2, y=MARGIN_A, max_width=max_title_width),
                    info.artist,
                    TextOptions(
                        fill=INFO_TEXT_COLOR,
                        font_size=ARTIST_FONT_SIZE,
                        font_family=TITLE_FONT,
                        vertical_origin=VerticalOrigin.BOTTOM,
                    ),
                )

            surface.add_text(
                TextPosition(
                    x=info_x, y=MARGIN_A - TITLE_RAISE, max_width=max_info_width
                ),
                upper_line,
                info_options,
            )
            surface.add_text(
                TextPosition(x=info_x, y=MARGIN_A, max_width=max_info_width),
                lower_line,
                TextOptions(
                    fill=INFO_TEXT_COLOR,
                    font_size=ARTIST_FONT_SIZE,
                    font_family=TEXT_FONT,
                    horizontal_origin=HorizontalOrigin.RIGHT,
                    vertical_origin=VerticalOrigin.BOTTOM,
                ),
            )
            surface.add_line(
                Rect(x=MARGIN_C, y=MARGIN_A, width=config.width - MARGIN_C - MARGIN_D),
                StrokeOptions(stroke=TITLE_LINE_COLOR, stroke_width=2),
            )

    def _draw_page_frames(self) -> None:
        p = self.parameters
        if self.config.direction == Direction.UP:
            origin = VerticalOrigin.BOTTOM
        else:
            origin = VerticalOrigin.TOP

        border = StrokeOptions(stroke=BORDER_LINE_COLOR, stroke_width=3)
        for canvas, config in enumerate(self.canvas_configs()):
            surface = self._surface(canvas)
            if surface is None:
                continue

            frame = self.geometry.vertical_frame(canvas)
            for page_in_canvas in range(config.pages):
                page = canvas * self.config.pages_per_canvas + page_in_canvas
                height = self.geometry.page_height(page)
                x = self.geometry.page_x(page_in_canvas) + p.left_border
                inner_width = p.width - p.left_border
                bottom = frame.y(0)
                frame_height = frame.direction * (height + 2 * MARGIN_G)
                surface.add_rectangle(
                    Rect(
                        x=x, y=bottom, width=inner_width, height=height + 2 * MARGIN_G
                    ),
                    FillOptions(fill=PAGE_FILL_COLOR, vertical_origin=origin),
                )
                if self.geometry.measure_aligned:
                    surface.add_line(
                        Rect(x=x, y=frame.y(MARGIN_G + height), width=inner_width),
                        StrokeOptions(stroke=BAR_LINE_COLOR, stroke_width=2),
                    )

                surface.add_line(
                    Rect(x=x, y=frame.y(height + 2 * MARGIN_G), width=inner_width),
                    border,
                )
                surface.add_line(Rect(x=x, y=bottom, width=inner_width), border)
                page_x = self.geometry.page_x(page_in_canvas)
                for column in (p.left_border, p.right_border, p.width):
                    surface.add_line(
                        Rect(x=page_x + column, y=bottom, height=frame_height), border
                    )

    def _draw_lines_in_bar(self, bar: int) -> None:
        p = self.parameters
        lane_width = p.right_border - p.left_border
        for line in range(0, self.time_map.bars[bar].line_count, QUARTER_BEAT_LINES):
            pixel = self.pixel_of(self.time_map.position_at(bar, Fraction(line)))
            surface = self._surface(pixel.canvas)
            if surface is None:
                continue

            if line == 0:
                # measure lines run under the measure number
                rect = Rect(x=pixel.x, y=pixel.y, width=lane_width + p.left_border)
                color = BAR_LINE_COLOR
            else:
                rect = Rect(x=pixel.x + p.left_border, y=pixel.y, width=lane_width)
                color = QUARTER_LINE_COLOR

            surface.add_line(rect, StrokeOptions(stroke=color, stroke_width=1))

    def _draw_bar_number(self, bar: int) -> None:
        if bar > MAX_BAR_NUMBER:
            warnings.warn(f"Measure {bar} does not fit in 3 digits")

        pixel = self.pixel_of(self.time_map.position_at(bar, Fraction(0)))
        surface = self._surface(pixel.canvas)
        if surface is None:
            return

        if self.config.direction == Direction.UP:
            y = pixel.y + BAR_NUMBER_RAISE
            origin = VerticalOrigin.BOTTOM
        else:
            y = pixel.y
            origin = VerticalOrigin.TOP

        surface.add_text(
            TextPosition(x=pixel.x + self.parameters.bar_number_x, y=y),
            f"{bar:03d}",
            TextOptions(
                fill=BAR_NUMBER_TEXT_COLOR,
                font_size=BAR_NUMBER_FONT_SIZE,
                font_family=TEXT_FONT,
                vertical_origin=origin,
            ),
        )

    def _draw_bpm_marker(self, position: AbsolutePosition, bpm: Fraction) -> None:
        p = self.parameters
        pixel = self.pixel_of(position)
        surface = self._surface(pixel.canvas)
        if surface is None:
            return

        surface.add_line(
            Rect(
                x=pixel.x + p.right_border,
                y=pixel.y,
                width=p.bpm_x - p.right_border,
            ),
            StrokeOptions(stroke=BPM_MARKER_LINE_COLOR, stroke_width=1),
        )
        surface.add_text(
            TextPosition(x=pixel.x + p.bpm_x, y=pixel.y),
            f"{float(bpm):.2f}",
            TextOptions(
                fill=BPM_MARKER_TEXT_COLOR,
                font_size=BPM_MARKER_FONT_SIZE,
                font_family=TEXT_FONT,
            ),
        )

    def _draw_chart_line(self, position: AbsolutePosition, color: str) -> None:
        p = self.parameters
        pixel = self.pixel_of(position)
        surface = self._surface(pixel.canvas)
        if surface is None:
            return

        surface.add_line(
            Rect(
                x=pixel.x + p.left_border,
                y=pixel.y,
                width=p.right_border - p.left_border,
            ),
            StrokeOptions(stroke=color, stroke_width=3),
        )

    def _draw_part_number(self, canvas: int) -> None:
        surface = self._surface(canvas)
        if surface is None:
            return

        config = self.canvas_configs()[canvas]
        surface.add_text(
            TextPosition(
                x=config.width - MARGIN_D - PART_NUMBER_WIDTH,
                y=config.height - MARGIN_H,
            ),
            f"Part {canvas + 1} of {len(self._surfaces)}",
            TextOptions(
                fill=PART_NUMBER_TEXT_COLOR,
                font_size=PART_NUMBER_FONT_SIZE,
                font_family=TEXT_FONT,
                vertical_origin=VerticalOrigin.BOTTOM,
            ),
        )


def make_charter(
    document: ChartDocument,
    config: LayoutConfig,
    images: Optional[Mapping[str, Image.Image]] = None,
) -> Charter:
    """Picks the drawer and draw parameters that match the instrument"""
    time_map = TimeMap.from_document(document)
    drawer, parameters = drawer_for(config.instrument, config.chart_type, images)
    return Charter(document, time_map, config, drawer, parameters)


def drawer_for(
    instrument: Instrument,
    chart_type: ChartType,
    images: Optional[Mapping[str, Image.Image]] = None,
) -> Tuple[NoteDrawer, DrawParameters]:
    if instrument == Instrument.DRUM:
        return DrumDrawer(), drum_draw_parameters(chart_type, images)
    else:
        half = INSTRUMENT_HALF[instrument]
        return ButtonDrawer(half), button_draw_parameters(chart_type, half, images)
