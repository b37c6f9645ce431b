from fractions import Fraction

import pytest
from hypothesis import given
from hypothesis import strategies as st

from dtxtools.chart import (
    ButtonCombination,
    ButtonCounts,
    Chip,
    DrumCounts,
    DrumLane,
    Half,
    count_chips,
    iter_chips,
    parse_lane_label,
    split_slots,
)
from dtxtools.formats.lanes import LANE_TABLES
from dtxtools.testutils.strategies import button_combination, lane_string


def test_that_a_dangling_character_is_its_own_slot() -> None:
    assert split_slots("01020") == ["01", "02", "0"]


def test_that_chips_land_on_the_slot_grid() -> None:
    assert list(iter_chips("00110000", 192)) == [Chip(line=Fraction(48), code="11")]


def test_that_chips_can_land_between_lines() -> None:
    chips = list(iter_chips("000000000000000000000001", 96))
    assert chips == [Chip(line=Fraction(88), code="01")]
    chips = list(iter_chips("00000001", 100))
    assert chips[0].line == Fraction(75)
    chips = list(iter_chips("000001", 100))
    assert chips[0].line == Fraction(200, 3)


def test_that_the_dangling_slot_is_never_a_chip() -> None:
    assert count_chips("0101010") == 3
    assert [c.line for c in iter_chips("0101010", 192)] == [0, 48, 96]


@given(lane_string())
def test_that_every_chip_lands_inside_the_measure(raw: str) -> None:
    for chip in iter_chips(raw, 192):
        assert 0 <= chip.line < 192


@given(lane_string())
def test_that_counting_and_iterating_agree(raw: str) -> None:
    assert count_chips(raw) == len(list(iter_chips(raw, 192)))


def test_that_every_table_label_survives_a_round_trip() -> None:
    for table in LANE_TABLES.values():
        for label in table.values():
            assert parse_lane_label(label.label) == label


@given(button_combination())
def test_that_button_labels_round_trip(buttons: ButtonCombination) -> None:
    assert ButtonCombination.from_label(buttons.label) == buttons


@given(st.sampled_from(Half), st.sampled_from([3, 5]), st.data())
def test_that_bits_round_trip(half: Half, width: int, data: st.DataObject) -> None:
    bits = data.draw(st.integers(min_value=0, max_value=2 ** width - 1))
    buttons = ButtonCombination.from_bits(half, bits, width)
    assert buttons.bits == bits
    assert len(buttons.flags) == width


def test_that_red_is_the_most_significant_bit() -> None:
    assert ButtonCombination.from_label("G10000").bits == 0b10000
    assert ButtonCombination.from_label("B001").bits == 0b001


@pytest.mark.parametrize("label", ["G", "G0000", "G1111111", "G01a", "XWail"])
def test_that_invalid_labels_are_rejected(label: str) -> None:
    with pytest.raises(ValueError):
        ButtonCombination.from_label(label)


def test_that_a_wail_cannot_have_buttons() -> None:
    with pytest.raises(ValueError):
        ButtonCombination(half=Half.GUITAR, flags=(True, False, False), wail=True)


def test_that_drum_labels_take_precedence() -> None:
    assert parse_lane_label("HH") is DrumLane.HH
    assert parse_lane_label("B010") == ButtonCombination(
        half=Half.BASS, flags=(False, True, False)
    )


def test_that_drum_counts_track_the_total() -> None:
    counts = DrumCounts()
    counts.add(DrumLane.HH, 4)
    counts.add(DrumLane.SD, 2)
    assert counts.HH == 4
    assert counts[DrumLane.SD] == 2
    assert counts["BD"] == 0
    assert counts.total == 6


def test_that_open_notes_are_counted_apart() -> None:
    counts = ButtonCounts()
    counts.add(ButtonCombination.from_label("G00000"), 3)
    counts.add(ButtonCombination.from_label("G10100"), 2)
    assert counts.open == 3
    assert counts.R == 2
    assert counts.G == 0
    assert counts.B == 2
    assert counts.total == 5


def test_that_wails_are_not_notes() -> None:
    counts = ButtonCounts()
    counts.add(ButtonCombination(half=Half.BASS, wail=True), 4)
    assert counts.wail == 4
    assert counts.total == 0
