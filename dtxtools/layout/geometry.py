"""Page and canvas geometry

A sheet is cut into pages laid side by side, a canvas holds up to
`pages_per_canvas` pages. Vertical positions are absolute positions (see
`dtxtools.timemap`) multiplied by the scale factor.

Fixed margins, in pixels :

    A : height of the info band at the top of each canvas
    B : gap between the info band and the top of the pages
    C : left margin of the canvas
    D : right margin of the canvas
    E : gap between the bottom of the pages and the bottom of the canvas
    F : gap between two pages
    G : gap between a page border and the first / last line in it
    H : gap between the "Part X of N" text and the bottom of the canvas
"""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from math import ceil
from typing import List, Optional, Tuple, Union

from more_itertools import chunked
from sortedcontainers import SortedKeyList

from dtxtools.timemap import AbsolutePosition, PositionOutOfRange, TimeMap

from .config import MIN_PAGES_PER_CANVAS, Alignment, Direction, LayoutConfig

MARGIN_A = 58
MARGIN_B = 2
MARGIN_C = 3
MARGIN_D = 3
MARGIN_E = 30
MARGIN_F = 0
MARGIN_G = 12
MARGIN_H = 2

BACKGROUND_COLOR = "#ffffff"

Pixels = Union[int, Fraction]


@dataclass(frozen=True)
class Page:
    """A page of a measure-aligned sheet, bars are inclusive"""

    start_bar: int
    end_bar: int
    start: AbsolutePosition
    height: Fraction


@dataclass(frozen=True)
class CanvasConfig:
    pages: int
    width: int
    height: int
    id: str
    background_color: str = BACKGROUND_COLOR


@dataclass(frozen=True)
class PixelPosition:
    canvas: int
    x: Pixels
    y: Pixels


@dataclass(frozen=True)
class VerticalFrame:
    """y = start + direction × (edge + offset)"""

    start: Pixels
    edge: Pixels
    direction: int

    def y(self, offset: Pixels) -> Pixels:
        return self.start + self.direction * (self.edge + offset)


def fixed_page_count(
    time_map: TimeMap, scale: Fraction, page_height: Union[int, Fraction]
) -> int:
    return ceil(time_map.chart_length() * scale / page_height)


def measure_aligned_pages(
    time_map: TimeMap, scale: Fraction, page_height: Union[int, Fraction]
) -> List[Page]:
    """Greedily fill pages with whole measures. A measure taller than a page
    gets a page of its own. The last page is drawn as tall as the one before
    it so the sheet does not end on a stub"""
    pages: List[Page] = []
    if not time_map.bars:
        return pages

    start_bar = 0
    accumulated = Fraction(0)
    for index, bar in enumerate(time_map.bars):
        bar_height = (time_map.bar_end(index) - bar.start) * scale
        if index > start_bar and accumulated + bar_height > page_height:
            pages.append(
                Page(
                    start_bar=start_bar,
                    end_bar=index - 1,
                    start=time_map.bars[start_bar].start,
                    height=accumulated,
                )
            )
            start_bar = index
            accumulated = Fraction(0)

        accumulated += bar_height

    last_height = accumulated
    if pages:
        last_height = max(pages[-1].height, accumulated)

    pages.append(
        Page(
            start_bar=start_bar,
            end_bar=len(time_map.bars) - 1,
            start=time_map.bars[start_bar].start,
            height=last_height,
        )
    )
    return pages


class Geometry:
    """Turns absolute positions into pixel positions on the canvases"""

    def __init__(
        self,
        time_map: TimeMap,
        config: LayoutConfig,
        page_width: int,
        id_prefix: str,
    ):
        self.time_map = time_map
        self.config = config
        self.page_width = page_width
        self.id_prefix = id_prefix
        self.scale = Fraction(config.scale)
        self.pages: Optional[SortedKeyList[Page, AbsolutePosition]] = None
        if config.alignment == Alignment.MEASURE:
            self.pages = SortedKeyList(
                measure_aligned_pages(time_map, self.scale, config.page_height),
                key=lambda p: p.start,
            )
            self.page_count = len(self.pages)
        else:
            self.page_count = fixed_page_count(
                time_map, self.scale, config.page_height
            )

        self.canvases = self._make_canvas_configs()

    @property
    def measure_aligned(self) -> bool:
        return self.pages is not None

    @property
    def page_stride(self) -> int:
        return self.page_width + MARGIN_F

    def page_x(self, page_in_canvas: int) -> int:
        return MARGIN_C + self.page_stride * page_in_canvas

    def page_height(self, page: int) -> Pixels:
        if self.pages is not None:
            return self.pages[page].height
        else:
            return self.config.page_height

    def canvas_width(self, pages: int) -> int:
        return MARGIN_C + self.page_stride * pages + MARGIN_D

    def _make_canvas_configs(self) -> List[CanvasConfig]:
        configs = []
        pages_per_canvas = self.config.pages_per_canvas
        for index, pages in enumerate(
            chunked(range(self.page_count), pages_per_canvas)
        ):
            # The last canvas may hold only a few pages, it still has to be
            # wide enough for the info band
            width = self.canvas_width(max(len(pages), MIN_PAGES_PER_CANVAS))
            content_height = max(self.page_height(p) for p in pages)
            height = (
                ceil(content_height)
                + MARGIN_A
                + MARGIN_B
                + MARGIN_E
                + 2 * MARGIN_G
            )
            configs.append(
                CanvasConfig(
                    pages=len(pages),
                    width=width,
                    height=height,
                    id=f"{self.id_prefix}_{index}",
                )
            )

        return configs

    def vertical_frame(self, canvas: int) -> VerticalFrame:
        if self.config.direction == Direction.UP:
            return VerticalFrame(
                start=self.canvases[canvas].height, edge=MARGIN_E, direction=-1
            )
        else:
            return VerticalFrame(start=0, edge=MARGIN_A + MARGIN_B, direction=1)

    def _locate(self, position: AbsolutePosition) -> Tuple[int, Fraction]:
        """Page index and scaled offset from the start of that page"""
        if self.pages is not None:
            index = self.pages.bisect_key_right(position) - 1
            page: Page = self.pages[index]
            return index, (position - page.start) * self.scale

        scaled = position * self.scale
        page_index, offset = divmod(scaled, self.config.page_height)
        if page_index >= self.page_count:
            # The very end of the chart falls on the last line of the last page
            page_index = self.page_count - 1
            offset = scaled - page_index * self.config.page_height

        return int(page_index), Fraction(offset)

    def pixel_of(self, position: AbsolutePosition) -> PixelPosition:
        if self.page_count == 0:
            raise PositionOutOfRange("The chart has no pages")

        length = self.time_map.chart_length()
        if not 0 <= position <= length:
            raise PositionOutOfRange(
                f"Position {position} is outside of the chart (0 to {length})"
            )

        page, offset = self._locate(position)
        canvas, page_in_canvas = divmod(page, self.config.pages_per_canvas)
        frame = self.vertical_frame(canvas)
        return PixelPosition(
            canvas=canvas,
            x=self.page_x(page_in_canvas),
            y=frame.y(MARGIN_G + offset),
        )
