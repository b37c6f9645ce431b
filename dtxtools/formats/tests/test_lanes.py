import pytest

from dtxtools.chart import ButtonCombination, DrumLane, Half, Instrument

from ..enum import Dialect
from ..lanes import (
    GDA_GUITAR_LANES,
    LANE_TABLES,
    ReservedLane,
    classify_lane,
    reserved_lane,
)


@pytest.mark.parametrize(
    "code,lane",
    [
        ("1A", DrumLane.LC),
        ("11", DrumLane.HH),
        ("18", DrumLane.HH),
        ("1C", DrumLane.LB),
        ("1B", DrumLane.LP),
        ("12", DrumLane.SD),
        ("14", DrumLane.HT),
        ("13", DrumLane.BD),
        ("15", DrumLane.LT),
        ("17", DrumLane.FT),
        ("16", DrumLane.RC),
        ("19", DrumLane.RD),
    ],
)
def test_dtx_drum_codes(code: str, lane: DrumLane) -> None:
    assert classify_lane(code, Instrument.DRUM, Dialect.DTX) is lane


def test_that_gda_cymbals_are_right_cymbals() -> None:
    assert classify_lane("CY", Instrument.DRUM, Dialect.GDA) is DrumLane.RC


def test_that_codes_depend_on_the_dialect() -> None:
    assert classify_lane("SD", Instrument.DRUM, Dialect.DTX) is None
    assert classify_lane("12", Instrument.DRUM, Dialect.GDA) is None


def test_that_codes_depend_on_the_instrument() -> None:
    assert classify_lane("12", Instrument.GUITAR, Dialect.DTX) is None
    assert classify_lane("20", Instrument.DRUM, Dialect.DTX) is None


def test_dtx_button_codes() -> None:
    assert classify_lane("20", Instrument.GUITAR, Dialect.DTX) == ButtonCombination(
        half=Half.GUITAR, flags=(False,) * 5
    )
    assert classify_lane("D3", Instrument.GUITAR, Dialect.DTX) == ButtonCombination(
        half=Half.GUITAR, flags=(True,) * 5
    )
    assert classify_lane("A8", Instrument.BASS, Dialect.DTX) == ButtonCombination(
        half=Half.BASS, wail=True
    )


def test_that_dtx_tables_hold_every_five_button_pattern() -> None:
    for instrument, half in ((Instrument.GUITAR, "G"), (Instrument.BASS, "B")):
        table = LANE_TABLES[Dialect.DTX, instrument]
        labels = {label.label for label in table.values()}
        assert labels == {f"{half}{i:05b}" for i in range(32)} | {f"{half}Wail"}


def test_that_gda_button_codes_are_octal_patterns() -> None:
    assert GDA_GUITAR_LANES["G5"].label == "G101"
    assert GDA_GUITAR_LANES["G0"].is_open
    assert GDA_GUITAR_LANES["GW"].wail
    assert classify_lane("B6", Instrument.BASS, Dialect.GDA) == ButtonCombination(
        half=Half.BASS, flags=(True, True, False)
    )


def test_reserved_codes() -> None:
    assert reserved_lane("01") is ReservedLane.BGM
    assert reserved_lane("02") is ReservedLane.BAR_LENGTH
    assert reserved_lane("08") is ReservedLane.BPM_CHANGE
    assert reserved_lane("C2") is ReservedLane.SHOW_HIDE
    assert reserved_lane("11") is None
