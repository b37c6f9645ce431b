"""Raster surface backed by Pillow, finalizes to PNG"""

from functools import lru_cache
from io import BytesIO
from typing import Dict, Optional, Tuple, Union

from PIL import Image, ImageDraw, ImageFont

from .geometry import CanvasConfig
from .surface import (
    FillOptions,
    HorizontalOrigin,
    Number,
    Rect,
    StrokeOptions,
    SurfaceUnavailable,
    TextOptions,
    TextPosition,
    VerticalOrigin,
)

Font = Union[ImageFont.FreeTypeFont, ImageFont.ImageFont]

# Tried in order when the requested family is not installed
FALLBACK_FONT_FILES = (
    "DejaVuSans.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
)

FONT_FILES: Dict[str, Tuple[str, ...]] = {
    "Arial": ("arial.ttf", "Arial.ttf"),
    "Verdana": ("verdana.ttf", "Verdana.ttf"),
    "Meiryo UI": ("meiryo.ttc", "Meiryo.ttc"),
    "Times New Roman": ("times.ttf", "Times New Roman.ttf"),
}


@lru_cache(maxsize=None)
def load_font(family: str, size: int) -> Font:
    candidates = FONT_FILES.get(family, (f"{family}.ttf",)) + FALLBACK_FONT_FILES
    for candidate in candidates:
        try:
            return ImageFont.truetype(candidate, size=size)
        except OSError:
            continue

    return ImageFont.load_default(size=size)


def vertical_shift(origin: VerticalOrigin, height: float) -> float:
    if origin == VerticalOrigin.TOP:
        return 0
    elif origin == VerticalOrigin.CENTER:
        return -height / 2
    else:
        return -height


def horizontal_shift(origin: HorizontalOrigin, width: float) -> float:
    if origin == HorizontalOrigin.LEFT:
        return 0
    elif origin == HorizontalOrigin.CENTER:
        return -width / 2
    else:
        return -width


def box(x: Number, y: Number, width: Number, height: Number) -> Tuple[float, ...]:
    x0, x1 = sorted((float(x), float(x + width)))
    y0, y1 = sorted((float(y), float(y + height)))
    return (x0, y0, x1, y1)


class PillowSurface:
    def __init__(self, config: CanvasConfig):
        self.config = config
        max_pixels = Image.MAX_IMAGE_PIXELS
        if max_pixels is not None and config.width * config.height > max_pixels:
            raise SurfaceUnavailable(
                f"Canvas {config.id} is too large ({config.width}x{config.height})"
            )

        try:
            self.image = Image.new(
                "RGB", (config.width, config.height), config.background_color
            )
        except (ValueError, MemoryError) as e:
            raise SurfaceUnavailable(f"Could not create canvas {config.id}") from e

        self.draw = ImageDraw.Draw(self.image)

    def add_rectangle(self, rect: Rect, options: FillOptions) -> None:
        y = float(rect.y) + vertical_shift(
            options.vertical_origin, float(rect.height)
        )
        self.draw.rectangle(
            box(rect.x, y, rect.width, rect.height), fill=options.fill
        )

    def add_line(self, rect: Rect, options: StrokeOptions) -> None:
        start = (float(rect.x), float(rect.y))
        end = (float(rect.x + rect.width), float(rect.y + rect.height))
        self.draw.line([start, end], fill=options.stroke, width=options.stroke_width)

    def add_text(self, position: TextPosition, text: str, options: TextOptions) -> None:
        if not text:
            return

        font = load_font(options.font_family, options.font_size)
        left, top, right, bottom = self.draw.textbbox((0, 0), text, font=font)
        if position.max_width is not None and right - left > position.max_width:
            ratio = position.max_width / (right - left)
            size = max(1, int(options.font_size * ratio))
            font = load_font(options.font_family, size)
            left, top, right, bottom = self.draw.textbbox((0, 0), text, font=font)

        x = (
            float(position.x)
            + horizontal_shift(options.horizontal_origin, right - left)
            - left
        )
        y = (
            float(position.y)
            + vertical_shift(options.vertical_origin, bottom - top)
            - top
        )
        self.draw.text((x, y), text, fill=options.fill, font=font)

    def add_chip(
        self, rect: Rect, options: FillOptions, image: Optional[Image.Image] = None
    ) -> None:
        if image is None:
            y = float(rect.y) - float(rect.height) / 2
            self.draw.rectangle(
                box(rect.x, y, rect.width, rect.height), fill=options.fill
            )
            return

        corner = (round(rect.x), round(float(rect.y) - image.height / 2))
        mask = image if image.mode == "RGBA" else None
        self.image.paste(image, corner, mask)

    def finalize(self) -> bytes:
        output = BytesIO()
        self.image.save(output, format="PNG")
        return output.getvalue()
