"""
Hypothesis strategies to generate lanes, measures and whole charts
"""

from decimal import Decimal
from fractions import Fraction
from typing import Dict, List, Optional

import hypothesis.strategies as st

from dtxtools.chart import (
    EMPTY_CHIP,
    LINES_PER_MEASURE,
    BarGroup,
    BGMMarker,
    BPMMarker,
    ButtonCombination,
    ChartDocument,
    ChartInfo,
    DrumCounts,
    DrumLane,
    Half,
    Instrument,
    LaneLabel,
    ShowHideMarker,
    count_chips,
    empty_levels,
)

CHIP_ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"

chip_code = st.text(alphabet=CHIP_ALPHABET, min_size=2, max_size=2).filter(
    lambda c: c != EMPTY_CHIP
)


@st.composite
def lane_string(draw: st.DrawFn, min_slots: int = 1, max_slots: int = 16) -> str:
    slots = draw(
        st.lists(
            st.one_of(st.just(EMPTY_CHIP), chip_code),
            min_size=min_slots,
            max_size=max_slots,
        )
    )
    return "".join(slots)


@st.composite
def bpm(draw: st.DrawFn, min_value: str = "30", max_value: str = "400") -> Decimal:
    return draw(
        st.decimals(
            min_value=Decimal(min_value),
            max_value=Decimal(max_value),
            places=2,
        )
    )


@st.composite
def line_in_measure(draw: st.DrawFn, line_count: int = LINES_PER_MEASURE) -> Fraction:
    slots = draw(st.integers(min_value=1, max_value=64))
    slot = draw(st.integers(min_value=0, max_value=slots - 1))
    return Fraction(slot * line_count, slots)


@st.composite
def button_combination(
    draw: st.DrawFn, half: Optional[Half] = None
) -> ButtonCombination:
    if half is None:
        half = draw(st.sampled_from(Half))
    if draw(st.booleans()):
        return ButtonCombination(half=half, wail=True)
    width = draw(st.sampled_from([3, 5]))
    flags = draw(st.lists(st.booleans(), min_size=width, max_size=width))
    return ButtonCombination(half=half, flags=tuple(flags))


@st.composite
def bar_group(
    draw: st.DrawFn,
    labels: st.SearchStrategy[LaneLabel] = st.sampled_from(DrumLane),
    line_count_strat: st.SearchStrategy[int] = st.sampled_from([192, 96, 144, 288]),
    tempo_changes: bool = True,
) -> BarGroup:
    line_count = draw(line_count_strat)
    notes: Dict[LaneLabel, str] = draw(
        st.dictionaries(labels, lane_string(), max_size=4)
    )
    bpm_markers: List[BPMMarker] = []
    if tempo_changes:
        lines = draw(
            st.lists(line_in_measure(line_count), max_size=3, unique=True)
        )
        bpm_markers = [BPMMarker(line=line, bpm=draw(bpm())) for line in sorted(lines)]

    show_hide_markers = [
        ShowHideMarker(line=line, show=draw(st.booleans()))
        for line in sorted(
            draw(st.lists(line_in_measure(line_count), max_size=2, unique=True))
        )
    ]
    bgm_markers = [
        BGMMarker(line=line)
        for line in sorted(
            draw(st.lists(line_in_measure(line_count), max_size=1, unique=True))
        )
    ]
    return BarGroup(
        line_count=line_count,
        notes=notes,
        bpm_markers=bpm_markers,
        show_hide_markers=show_hide_markers,
        bgm_markers=bgm_markers,
    )


def drum_counts(bar_groups: List[BarGroup]) -> DrumCounts:
    counts = DrumCounts()
    for bar in bar_groups:
        for label, raw in bar.notes.items():
            if isinstance(label, DrumLane):
                counts.add(label, count_chips(raw))
    return counts


@st.composite
def drum_document(
    draw: st.DrawFn,
    min_bars: int = 1,
    max_bars: int = 12,
    tempo_changes: bool = True,
) -> ChartDocument:
    bar_groups = draw(
        st.lists(
            bar_group(tempo_changes=tempo_changes),
            min_size=min_bars,
            max_size=max_bars,
        )
    )
    levels = empty_levels()
    levels[Instrument.DRUM] = draw(
        st.decimals(min_value=Decimal("0.01"), max_value=Decimal("9.99"), places=2)
    )
    info = ChartInfo(
        title=draw(st.text(max_size=20)),
        artist=draw(st.text(max_size=20)),
        bpm=draw(bpm()),
        levels=levels,
        preview=draw(st.one_of(st.none(), st.just("preview.ogg"))),
    )
    return ChartDocument(
        chart_info=info,
        metadata={Instrument.DRUM: drum_counts(bar_groups)},
        bar_groups=bar_groups,
    )


@st.composite
def guitar_document(draw: st.DrawFn, max_bars: int = 8) -> ChartDocument:
    """Guitar chart made of 5 button chips"""
    five_buttons = button_combination(Half.GUITAR).filter(
        lambda b: b.wail or len(b.flags) == 5
    )
    bar_groups = draw(
        st.lists(
            bar_group(labels=five_buttons, tempo_changes=False),
            min_size=1,
            max_size=max_bars,
        )
    )
    levels = empty_levels()
    levels[Instrument.GUITAR] = Decimal("5.00")
    return ChartDocument(
        chart_info=ChartInfo(title="guitar", bpm=draw(bpm()), levels=levels),
        bar_groups=bar_groups,
    )
