"""Provides the ChartDocument class, the central model for DTX / GDA charts
Every input dialect is decoded to a ChartDocument instance

Positions inside a measure are counted in lines, a 4/4 measure is 192 lines
long. Lane contents are kept as the raw two-character chip codes found in the
file, decoding them into chips is done on demand"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from typing import Dict, Iterator, List, Optional, Set, Tuple, Union

LINES_PER_MEASURE = 192
EMPTY_CHIP = "00"

# Fraction of a line, chips positions inside a measure can fall between lines
LineTime = Fraction


class Instrument(str, Enum):
    DRUM = "drum"
    GUITAR = "guitar"
    BASS = "bass"


class DrumLane(str, Enum):
    LC = "LC"  # left cymbal
    HH = "HH"  # hi-hat, closed or open
    LP = "LP"  # left pedal
    LB = "LB"  # left bass drum
    SD = "SD"  # snare
    HT = "HT"  # high tom
    BD = "BD"  # bass drum
    LT = "LT"  # low tom
    FT = "FT"  # floor tom
    RC = "RC"  # right cymbal
    RD = "RD"  # ride

    @property
    def label(self) -> str:
        return self.value


class Half(str, Enum):
    """Guitar and bass share the same kind of chips, the half tells them
    apart"""

    GUITAR = "G"
    BASS = "B"


INSTRUMENT_HALF = {
    Instrument.GUITAR: Half.GUITAR,
    Instrument.BASS: Half.BASS,
}

BUTTON_NAMES = ("R", "G", "B", "Y", "M")


@dataclass(frozen=True)
class ButtonCombination:
    """A guitar or bass chip : the set of buttons to hold while picking, or
    a wail. DTX charts use 5 buttons, GDA charts only 3"""

    half: Half
    flags: Tuple[bool, ...] = ()
    wail: bool = False

    def __post_init__(self) -> None:
        if self.wail:
            if self.flags:
                raise ValueError("A wail chip cannot have buttons pressed")
        elif len(self.flags) not in (3, 5):
            raise ValueError(
                f"A button combination has 3 or 5 buttons, not {len(self.flags)}"
            )

    @property
    def label(self) -> str:
        if self.wail:
            return f"{self.half.value}Wail"
        return self.half.value + "".join("1" if f else "0" for f in self.flags)

    @classmethod
    def from_label(cls, label: str) -> ButtonCombination:
        half = Half(label[:1])
        rest = label[1:]
        if rest == "Wail":
            return cls(half=half, wail=True)

        if len(rest) not in (3, 5) or set(rest) - {"0", "1"}:
            raise ValueError(f"Invalid button combination label : {label!r}")

        return cls(half=half, flags=tuple(c == "1" for c in rest))

    @property
    def bits(self) -> int:
        """Flags as an integer, R is the most significant bit"""
        if self.wail:
            raise ValueError("A wail chip has no button pattern")
        value = 0
        for flag in self.flags:
            value = (value << 1) | int(flag)
        return value

    @classmethod
    def from_bits(cls, half: Half, bits: int, width: int) -> ButtonCombination:
        if not 0 <= bits < 2 ** width:
            raise ValueError(f"{bits} does not fit in {width} buttons")
        return cls(
            half=half,
            flags=tuple(bool((bits >> (width - 1 - i)) & 1) for i in range(width)),
        )

    @property
    def is_open(self) -> bool:
        """Picking with no button held"""
        return not self.wail and not any(self.flags)

    def pressed(self) -> Iterator[str]:
        for name, flag in zip(BUTTON_NAMES, self.flags):
            if flag:
                yield name

    def __str__(self) -> str:
        return self.label


LaneLabel = Union[DrumLane, ButtonCombination]


@dataclass(frozen=True)
class Chip:
    line: LineTime
    code: str


def split_slots(raw: str) -> List[str]:
    """A dangling last character makes up a slot of its own"""
    return [raw[i : i + 2] for i in range(0, len(raw), 2)]


def is_chip(slot: str) -> bool:
    return len(slot) == 2 and slot != EMPTY_CHIP


def iter_chips(raw: str, line_count: int) -> Iterator[Chip]:
    """Slot i out of k lands on line i × line_count / k"""
    slots = split_slots(raw)
    for i, slot in enumerate(slots):
        if is_chip(slot):
            yield Chip(line=LineTime(i * line_count, len(slots)), code=slot)


def count_chips(raw: str) -> int:
    return sum(1 for slot in split_slots(raw) if is_chip(slot))


@dataclass(frozen=True)
class BPMMarker:
    line: LineTime
    bpm: Decimal


@dataclass(frozen=True)
class ShowHideMarker:
    line: LineTime
    show: bool


@dataclass(frozen=True)
class BGMMarker:
    line: LineTime


@dataclass
class BarGroup:
    """Everything that happens in one measure"""

    line_count: int = LINES_PER_MEASURE
    notes: Dict[LaneLabel, str] = field(default_factory=dict)
    bpm_markers: List[BPMMarker] = field(default_factory=list)
    show_hide_markers: List[ShowHideMarker] = field(default_factory=list)
    bgm_markers: List[BGMMarker] = field(default_factory=list)

    def chips(self, label: LaneLabel) -> List[Chip]:
        return list(iter_chips(self.notes[label], self.line_count))


@dataclass
class DrumCounts:
    total: int = 0
    LC: int = 0
    HH: int = 0
    LP: int = 0
    LB: int = 0
    SD: int = 0
    HT: int = 0
    BD: int = 0
    LT: int = 0
    FT: int = 0
    RC: int = 0
    RD: int = 0

    def add(self, lane: DrumLane, count: int) -> None:
        setattr(self, lane.value, self[lane] + count)
        self.total += count

    def __getitem__(self, lane: Union[DrumLane, str]) -> int:
        name = lane.value if isinstance(lane, DrumLane) else lane
        return int(getattr(self, name))


@dataclass
class ButtonCounts:
    total: int = 0
    R: int = 0
    G: int = 0
    B: int = 0
    Y: int = 0
    M: int = 0
    open: int = 0
    wail: int = 0

    def add(self, buttons: ButtonCombination, count: int) -> None:
        """Wails do not count as notes"""
        if buttons.wail:
            self.wail += count
            return

        self.total += count
        if buttons.is_open:
            self.open += count
        for name in buttons.pressed():
            setattr(self, name, self[name] + count)

    def __getitem__(self, name: str) -> int:
        return int(getattr(self, name))


NoteCounts = Union[DrumCounts, ButtonCounts]


def empty_counts(instrument: Instrument) -> NoteCounts:
    if instrument == Instrument.DRUM:
        return DrumCounts()
    else:
        return ButtonCounts()


def empty_levels() -> Dict[Instrument, Decimal]:
    return {i: Decimal("0.00") for i in Instrument}


@dataclass
class ChartInfo:
    title: str = ""
    artist: str = ""
    bpm: Decimal = Decimal(0)
    levels: Dict[Instrument, Decimal] = field(default_factory=empty_levels)
    preview: Optional[str] = None
    preimage: Optional[str] = None

    def level(self, instrument: Instrument) -> Decimal:
        return self.levels.get(instrument, Decimal(0))


@dataclass
class ChartDocument:
    """The decoded form of a DTX or GDA file. Holds every instrument found
    in the file, instruments with a level of zero are treated as absent"""

    chart_info: ChartInfo = field(default_factory=ChartInfo)
    metadata: Dict[Instrument, NoteCounts] = field(default_factory=dict)
    bar_groups: List[BarGroup] = field(default_factory=list)

    def available_charts(self) -> Set[Instrument]:
        return {i for i in Instrument if self.chart_info.level(i) != 0}

    def number_of_bars(self) -> int:
        return len(self.bar_groups)


def parse_lane_label(label: str) -> LaneLabel:
    try:
        return DrumLane(label)
    except ValueError:
        return ButtonCombination.from_label(label)
