from decimal import Decimal
from fractions import Fraction

import pytest
from hypothesis import given

from dtxtools.chart import (
    BarGroup,
    BGMMarker,
    BPMMarker,
    ChartDocument,
    ChartInfo,
)
from dtxtools.testutils.strategies import drum_document
from dtxtools.timemap import PositionOutOfRange, TimeMap


def document_with(*bar_groups: BarGroup, bpm: str = "180") -> ChartDocument:
    return ChartDocument(
        chart_info=ChartInfo(bpm=Decimal(bpm)), bar_groups=list(bar_groups)
    )


def test_that_a_constant_180_bpm_chart_is_the_identity() -> None:
    time_map = TimeMap.from_document(document_with(*(BarGroup() for _ in range(4))))
    for bar in range(4):
        assert time_map.position_at(bar, Fraction(0)) == bar * 192
    assert time_map.position_at(2, Fraction(96)) == 480
    assert time_map.chart_length() == 768


def test_that_half_the_tempo_doubles_the_distance() -> None:
    time_map = TimeMap.from_document(document_with(BarGroup(), BarGroup(), bpm="90"))
    assert time_map.position_at(1, Fraction(0)) == 384
    assert time_map.chart_length() == 768


def test_that_a_tempo_change_applies_from_its_line_on() -> None:
    bar = BarGroup(bpm_markers=[BPMMarker(line=Fraction(96), bpm=Decimal(90))])
    time_map = TimeMap.from_document(document_with(bar, BarGroup()))
    assert time_map.position_at(0, Fraction(48)) == 48
    assert time_map.position_at(0, Fraction(96)) == 96
    assert time_map.position_at(0, Fraction(144)) == 192
    assert time_map.bar_end(0) == 288
    # the new tempo carries over to the next measure
    assert time_map.position_at(1, Fraction(96)) == 288 + 192
    assert time_map.chart_length() == 288 + 384


def test_that_a_tempo_change_on_the_first_line_replaces_the_start_tempo() -> None:
    bar = BarGroup(bpm_markers=[BPMMarker(line=Fraction(0), bpm=Decimal(360))])
    time_map = TimeMap.from_document(document_with(bar))
    assert time_map.position_at(0, Fraction(96)) == 48
    assert time_map.chart_length() == 96


def test_that_shorter_measures_take_less_room() -> None:
    time_map = TimeMap.from_document(
        document_with(BarGroup(line_count=144), BarGroup())
    )
    assert time_map.position_at(1, Fraction(0)) == 144
    assert time_map.bar_end(1) == time_map.chart_length() == 336


def test_that_the_duration_counts_from_the_background_music() -> None:
    first = BarGroup(bgm_markers=[BGMMarker(line=Fraction(96))])
    time_map = TimeMap.from_document(document_with(first, BarGroup()))
    assert time_map.bgm_start() == 96
    # 288 lines at 180 BPM are 6 quarter beats, 2 seconds
    assert time_map.fractional_duration() == 2
    assert time_map.duration() == Decimal(2)


def test_that_only_the_first_background_music_chip_counts() -> None:
    first = BarGroup()
    second = BarGroup(
        bgm_markers=[BGMMarker(line=Fraction(48)), BGMMarker(line=Fraction(96))]
    )
    time_map = TimeMap.from_document(document_with(first, second, BarGroup()))
    assert time_map.bgm_start() == 240


def test_that_the_duration_starts_at_zero_without_background_music() -> None:
    time_map = TimeMap.from_document(document_with(BarGroup()))
    assert time_map.bgm_start() == 0
    assert time_map.fractional_duration() == Fraction(1, 3) * 4


@pytest.mark.parametrize("bpm", ["0", "-120"])
def test_that_a_chart_needs_a_positive_bpm(bpm: str) -> None:
    with pytest.raises(ValueError):
        TimeMap.from_document(document_with(BarGroup(), bpm=bpm))


def test_that_out_of_range_positions_are_rejected() -> None:
    time_map = TimeMap.from_document(document_with(BarGroup(), BarGroup()))
    with pytest.raises(PositionOutOfRange):
        time_map.position_at(2, Fraction(0))
    with pytest.raises(PositionOutOfRange):
        time_map.position_at(-1, Fraction(0))
    with pytest.raises(PositionOutOfRange):
        time_map.position_at(0, Fraction(192))


def test_that_an_empty_chart_has_no_length() -> None:
    time_map = TimeMap.from_document(document_with())
    assert time_map.chart_length() == 0
    assert time_map.bar_positions == []


@given(drum_document())
def test_that_positions_never_go_back(document: ChartDocument) -> None:
    time_map = TimeMap.from_document(document)
    previous = Fraction(0)
    for index, bar in enumerate(document.bar_groups):
        for line in (Fraction(0), Fraction(bar.line_count, 3), bar.line_count - 1):
            position = time_map.position_at(index, Fraction(line))
            assert position >= previous
            previous = position
        assert time_map.bar_end(index) >= previous
    assert time_map.chart_length() == time_map.bar_end(len(document.bar_groups) - 1)


@given(drum_document(min_bars=2))
def test_that_measures_start_strictly_in_order(document: ChartDocument) -> None:
    time_map = TimeMap.from_document(document)
    starts = [
        time_map.position_at(bar, Fraction(0))
        for bar in range(len(document.bar_groups))
    ]
    assert starts == sorted(set(starts))
