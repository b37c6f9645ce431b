"""Rendering surfaces

The layout engine never rasterizes anything itself, it issues drawing
instructions against one Surface per canvas. Surfaces are created by a
SurfaceFactory, which may refuse to create one by raising
SurfaceUnavailable."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from fractions import Fraction
from typing import Callable, List, Optional, Protocol, Tuple, Union

from PIL import Image

from .geometry import CanvasConfig

Number = Union[int, float, Fraction]


class SurfaceUnavailable(Exception):
    pass


class VerticalOrigin(str, Enum):
    TOP = "top"
    CENTER = "center"
    BOTTOM = "bottom"


class HorizontalOrigin(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


@dataclass(frozen=True)
class Rect:
    """Lines go from (x, y) to (x + width, y + height)"""

    x: Number
    y: Number
    width: Number = 0
    height: Number = 0


@dataclass(frozen=True)
class TextPosition:
    x: Number
    y: Number
    max_width: Optional[Number] = None


@dataclass(frozen=True)
class FillOptions:
    fill: str
    vertical_origin: VerticalOrigin = VerticalOrigin.TOP


@dataclass(frozen=True)
class StrokeOptions:
    stroke: str
    stroke_width: int = 1


@dataclass(frozen=True)
class TextOptions:
    fill: str = "#ffffff"
    font_size: int = 20
    font_family: str = "Times New Roman"
    horizontal_origin: HorizontalOrigin = HorizontalOrigin.LEFT
    vertical_origin: VerticalOrigin = VerticalOrigin.CENTER


class Surface(Protocol):
    def add_rectangle(self, rect: Rect, options: FillOptions) -> None:
        ...

    def add_line(self, rect: Rect, options: StrokeOptions) -> None:
        ...

    def add_text(self, position: TextPosition, text: str, options: TextOptions) -> None:
        ...

    def add_chip(
        self, rect: Rect, options: FillOptions, image: Optional[Image.Image] = None
    ) -> None:
        """Chips are vertically centered on rect.y, an image replaces the
        plain colored rectangle and dictates the size"""
        ...

    def finalize(self) -> bytes:
        ...


SurfaceFactory = Callable[[CanvasConfig], Surface]


@dataclass(frozen=True)
class RectangleInstruction:
    rect: Rect
    options: FillOptions


@dataclass(frozen=True)
class LineInstruction:
    rect: Rect
    options: StrokeOptions


@dataclass(frozen=True)
class TextInstruction:
    position: TextPosition
    text: str
    options: TextOptions


@dataclass(frozen=True)
class ChipInstruction:
    rect: Rect
    options: FillOptions
    image_size: Optional[Tuple[int, int]] = None


Instruction = Union[
    RectangleInstruction, LineInstruction, TextInstruction, ChipInstruction
]


@dataclass
class RecordingSurface:
    """Keeps the instructions in the order they were issued, finalizing it
    gives back a plain text listing"""

    config: CanvasConfig
    instructions: List[Instruction] = field(default_factory=list)

    def add_rectangle(self, rect: Rect, options: FillOptions) -> None:
        self.instructions.append(RectangleInstruction(rect, options))

    def add_line(self, rect: Rect, options: StrokeOptions) -> None:
        self.instructions.append(LineInstruction(rect, options))

    def add_text(self, position: TextPosition, text: str, options: TextOptions) -> None:
        self.instructions.append(TextInstruction(position, text, options))

    def add_chip(
        self, rect: Rect, options: FillOptions, image: Optional[Image.Image] = None
    ) -> None:
        size = None if image is None else image.size
        self.instructions.append(ChipInstruction(rect, options, size))

    def of_type(self, type_: type) -> List[Instruction]:
        return [i for i in self.instructions if isinstance(i, type_)]

    def finalize(self) -> bytes:
        lines = [f"{self.config.id} {self.config.width}x{self.config.height}"]
        lines.extend(repr(i) for i in self.instructions)
        return "\n".join(lines).encode("utf-8")
