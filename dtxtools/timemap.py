"""Tempo normalization

Measures are made of lines but the time a line takes depends on the tempo in
effect. To lay charts out on paper every (measure, line) position is mapped
to an absolute position : the number of lines that would have elapsed at a
constant 180 BPM, where a line is 1/192 of a 4/4 measure."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from fractions import Fraction
from typing import List, Union

from sortedcontainers import SortedKeyList

from dtxtools.chart import BarGroup, ChartDocument, LineTime
from dtxtools.utils import fraction_to_decimal

REFERENCE_BPM = 180
QUARTER_BEAT_LINES = 48

AbsolutePosition = Fraction


class PositionOutOfRange(ValueError):
    pass


def distance(lines: Union[int, LineTime], bpm: Fraction) -> AbsolutePosition:
    """Absolute distance covered by a number of lines at a given tempo"""
    return Fraction(lines) * REFERENCE_BPM / bpm


@dataclass
class BPMChange:
    line: LineTime
    BPM: Fraction
    position: AbsolutePosition


@dataclass
class BarPosition:
    index: int
    line_count: int
    start: AbsolutePosition
    start_BPM: Fraction
    bpm_changes: SortedKeyList[BPMChange, LineTime]

    def position_at(self, line: LineTime) -> AbsolutePosition:
        """Compute forward from the last tempo change at or before the line,
        or from the start of the measure if there is none"""
        index = self.bpm_changes.bisect_key_right(line)
        if index == 0:
            return self.start + distance(line, self.start_BPM)

        bpm_change: BPMChange = self.bpm_changes[index - 1]
        return bpm_change.position + distance(line - bpm_change.line, bpm_change.BPM)


@dataclass
class TimeMap:
    """Wraps a ChartDocument to allow converting (measure, line) positions
    to absolute positions"""

    bars: List[BarPosition]
    end: AbsolutePosition
    bgm: AbsolutePosition

    @classmethod
    def from_document(cls, document: ChartDocument) -> TimeMap:
        if document.chart_info.bpm <= 0:
            raise ValueError("No BPM defined")

        current_bpm = Fraction(document.chart_info.bpm)
        current_position = Fraction(0)
        bars = []
        for index, bar_group in enumerate(document.bar_groups):
            bar = BarPosition(
                index=index,
                line_count=bar_group.line_count,
                start=current_position,
                start_BPM=current_bpm,
                bpm_changes=SortedKeyList(key=lambda b: b.line),
            )
            segment_start = LineTime(0)
            for marker in sorted(bar_group.bpm_markers, key=lambda m: m.line):
                current_position += distance(marker.line - segment_start, current_bpm)
                current_bpm = Fraction(marker.bpm)
                segment_start = marker.line
                bar.bpm_changes.add(
                    BPMChange(marker.line, current_bpm, current_position)
                )

            current_position += distance(
                bar_group.line_count - segment_start, current_bpm
            )
            bars.append(bar)

        time_map = cls(bars=bars, end=current_position, bgm=Fraction(0))
        time_map.bgm = time_map._first_bgm_position(document.bar_groups)
        return time_map

    def _first_bgm_position(self, bar_groups: List[BarGroup]) -> AbsolutePosition:
        """Only the first background music chip is the playback start, later
        ones are ignored"""
        for index, bar_group in enumerate(bar_groups):
            if bar_group.bgm_markers:
                return self.position_at(index, bar_group.bgm_markers[0].line)

        return Fraction(0)

    def position_at(self, bar: int, line: LineTime) -> AbsolutePosition:
        if not 0 <= bar < len(self.bars):
            raise PositionOutOfRange(
                f"Measure {bar} is out of range, the chart has {len(self.bars)} "
                "measures"
            )

        bar_position = self.bars[bar]
        if not 0 <= line < bar_position.line_count:
            raise PositionOutOfRange(
                f"Line {line} is out of range, measure {bar} has "
                f"{bar_position.line_count} lines"
            )

        return bar_position.position_at(line)

    @property
    def bar_positions(self) -> List[BarPosition]:
        return self.bars

    def bar_end(self, bar: int) -> AbsolutePosition:
        """The end of a measure is the start of the next one"""
        if bar + 1 < len(self.bars):
            return self.bars[bar + 1].start
        else:
            return self.end

    def chart_length(self) -> AbsolutePosition:
        return self.end

    def bgm_start(self) -> AbsolutePosition:
        return self.bgm

    def fractional_duration(self) -> Fraction:
        """Song duration in seconds, counted from the background music
        start"""
        return (self.end - self.bgm) * 60 / (REFERENCE_BPM * QUARTER_BEAT_LINES)

    def duration(self) -> Decimal:
        return fraction_to_decimal(self.fractional_duration())
