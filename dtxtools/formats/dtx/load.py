import codecs
import math
import re
import warnings
from decimal import Decimal
from fractions import Fraction
from pathlib import Path
from typing import Any, Dict, List, Optional

from dtxtools.chart import (
    EMPTY_CHIP,
    LINES_PER_MEASURE,
    BarGroup,
    BGMMarker,
    BPMMarker,
    ButtonCombination,
    ButtonCounts,
    ChartDocument,
    ChartInfo,
    DrumCounts,
    DrumLane,
    Instrument,
    NoteCounts,
    ShowHideMarker,
    count_chips,
    empty_counts,
    is_chip,
    iter_chips,
    split_slots,
)
from dtxtools.utils import lcm

from ..command import is_directive, is_supported_header, parse_directive
from ..enum import Dialect
from ..lanes import ReservedLane, classify_lane, reserved_lane
from ..load_tools import parse_leading_decimal, parse_level

MEASURE_KEY = re.compile(r"(\d{3})([0-9A-Z]{2})")
MIN_BAR_LENGTH = Fraction(1, LINES_PER_MEASURE)
MAX_BAR_LENGTH = Fraction(10)
SHOW_LINE = "01"

BYTE_ORDER_MARKS = [
    (codecs.BOM_UTF8, "utf-8"),
    (codecs.BOM_UTF16_LE, "utf-16-le"),
    (codecs.BOM_UTF16_BE, "utf-16-be"),
]


class DecodeError(ValueError):
    pass


class EmptyChartError(DecodeError):
    pass


def parse_bar_length(value: str) -> Fraction:
    """Out of range or garbage values fall back to a regular 4/4 measure"""
    parsed = parse_leading_decimal(value)
    if parsed is None:
        return Fraction(1)

    length = Fraction(parsed)
    if MIN_BAR_LENGTH <= length < MAX_BAR_LENGTH:
        return length
    else:
        return Fraction(1)


def line_count_for(bar_length: Fraction) -> int:
    return math.floor(LINES_PER_MEASURE * bar_length)


def merge_lane_strings(first: str, second: str) -> str:
    """Overlays two lane strings on a common grid, chips from the first one
    win when both land on the same slot"""
    first_slots = split_slots(first)
    second_slots = split_slots(second)
    if not first_slots:
        return second
    if not second_slots:
        return first

    size = lcm(len(first_slots), len(second_slots))
    merged = [EMPTY_CHIP] * size
    for slots in (second_slots, first_slots):
        step = size // len(slots)
        for i, slot in enumerate(slots):
            if is_chip(slot):
                merged[i * step] = slot

    return "".join(merged)


class DtxParser:
    def __init__(self, dialect: Dialect) -> None:
        self.dialect = dialect
        self.chart_info = ChartInfo()
        self.bpm_labels: Dict[str, Decimal] = {}
        self.raw_bars: Dict[int, Dict[str, str]] = {}
        self.last_bar = -1

    def handle_line(self, line: str) -> None:
        if is_directive(line):
            self.handle_directive(*parse_directive(line))

    def handle_directive(self, key: str, value: str) -> None:
        key = key.upper()
        method = getattr(self, f"do_{key}", None)
        if method is not None:
            method(value)
        elif len(key) == 5 and key.startswith("BPM"):
            self.define_bpm_label(key[3:], value)
        else:
            match = MEASURE_KEY.fullmatch(key)
            if match is not None:
                self.buffer_lane(int(match.group(1)), match.group(2), value)
            # anything else (#WAVxx, #VOLUMExx, #BMPxx, #DTXC_...) is ignored

    def do_TITLE(self, value: str) -> None:
        self.chart_info.title = value

    def do_ARTIST(self, value: str) -> None:
        self.chart_info.artist = value

    def do_BPM(self, value: str) -> None:
        bpm = parse_leading_decimal(value)
        if bpm is None:
            warnings.warn(f"Ignoring invalid #BPM value : {value!r}")
        else:
            self.chart_info.bpm = bpm

    def do_DLEVEL(self, value: str) -> None:
        self.chart_info.levels[Instrument.DRUM] = parse_level(value)

    def do_GLEVEL(self, value: str) -> None:
        self.chart_info.levels[Instrument.GUITAR] = parse_level(value)

    def do_BLEVEL(self, value: str) -> None:
        self.chart_info.levels[Instrument.BASS] = parse_level(value)

    def do_PREVIEW(self, value: str) -> None:
        self.chart_info.preview = value

    def do_PREIMAGE(self, value: str) -> None:
        self.chart_info.preimage = value

    def define_bpm_label(self, label: str, value: str) -> None:
        bpm = parse_leading_decimal(value)
        if bpm is None:
            warnings.warn(f"Ignoring invalid value for #BPM{label} : {value!r}")
        else:
            self.bpm_labels[label] = bpm

    def buffer_lane(self, bar: int, code: str, value: str) -> None:
        self.last_bar = max(self.last_bar, bar)
        self.raw_bars.setdefault(bar, {})[code] = value

    def document(self) -> ChartDocument:
        metadata = {
            i: empty_counts(i) for i in Instrument if self.chart_info.level(i) != 0
        }
        bar_groups: List[BarGroup] = []
        bar_length = Fraction(1)
        for index in range(self.last_bar + 1):
            lanes = self.raw_bars.get(index)
            if lanes is None:
                bar_groups.append(BarGroup(line_count=line_count_for(bar_length)))
                continue

            if ReservedLane.BAR_LENGTH.value in lanes:
                bar_length = parse_bar_length(lanes[ReservedLane.BAR_LENGTH.value])

            bar_groups.append(
                self.bar_group(index, lanes, line_count_for(bar_length), metadata)
            )

        return ChartDocument(
            chart_info=self.chart_info, metadata=metadata, bar_groups=bar_groups
        )

    def bar_group(
        self,
        index: int,
        lanes: Dict[str, str],
        line_count: int,
        metadata: Dict[Instrument, NoteCounts],
    ) -> BarGroup:
        bar = BarGroup(line_count=line_count)
        for code, raw in sorted(lanes.items()):
            reserved = reserved_lane(code)
            if reserved == ReservedLane.BPM_CHANGE:
                bar.bpm_markers = self.bpm_markers(index, raw, line_count)
            elif reserved == ReservedLane.SHOW_HIDE:
                bar.show_hide_markers = [
                    ShowHideMarker(line=c.line, show=c.code == SHOW_LINE)
                    for c in iter_chips(raw, line_count)
                ]
            elif reserved == ReservedLane.BGM:
                bar.bgm_markers = [
                    BGMMarker(line=c.line) for c in iter_chips(raw, line_count)
                ]
            elif reserved is None:
                self.add_notes(bar, code, raw, metadata)

        return bar

    def bpm_markers(self, index: int, raw: str, line_count: int) -> List[BPMMarker]:
        markers = []
        for chip in iter_chips(raw, line_count):
            bpm = self.bpm_labels.get(chip.code)
            if bpm is None or bpm <= 0:
                warnings.warn(
                    f"Measure {index:03} uses BPM label {chip.code!r} which is "
                    "not defined or not positive, the tempo change is ignored"
                )
                continue
            markers.append(BPMMarker(line=chip.line, bpm=bpm))

        return markers

    def add_notes(
        self,
        bar: BarGroup,
        code: str,
        raw: str,
        metadata: Dict[Instrument, NoteCounts],
    ) -> None:
        for instrument, counts in metadata.items():
            label = classify_lane(code, instrument, self.dialect)
            if label is None:
                continue

            if label in bar.notes:
                bar.notes[label] = merge_lane_strings(bar.notes[label], raw)
            else:
                bar.notes[label] = raw

            chip_count = count_chips(raw)
            if isinstance(label, DrumLane) and isinstance(counts, DrumCounts):
                counts.add(label, chip_count)
            elif isinstance(label, ButtonCombination) and isinstance(
                counts, ButtonCounts
            ):
                counts.add(label, chip_count)


def decode(text: str, dialect: Dialect) -> ChartDocument:
    """Decodes the contents of a DTX or GDA file. The dialect decides which
    lane code tables are used"""
    lines = text.splitlines()
    if not lines:
        raise EmptyChartError("The chart is empty")

    header, *rest = lines
    if not is_supported_header(header):
        warnings.warn(
            f"Unknown file header : {header.strip()!r}, the chart might not be "
            "decoded correctly"
        )

    parser = DtxParser(dialect)
    for line in rest:
        parser.handle_line(line)

    return parser.document()


def read_text(path: Path, encoding: str) -> str:
    """Undecodable bytes become U+FFFD instead of aborting the load"""
    raw = path.read_bytes()
    for bom, codec in BYTE_ORDER_MARKS:
        if raw.startswith(bom):
            return raw[len(bom) :].decode(codec, errors="replace")

    return raw.decode(encoding, errors="replace")


def load_file(
    path: Path, dialect: Dialect, encoding: Optional[str] = None
) -> ChartDocument:
    text = read_text(path, encoding or "shift-jis-2004")
    return decode(text, dialect)


def load_dtx(path: Path, **kwargs: Any) -> ChartDocument:
    return load_file(path, Dialect.DTX, **kwargs)


def load_gda(path: Path, **kwargs: Any) -> ChartDocument:
    return load_file(path, Dialect.GDA, **kwargs)
