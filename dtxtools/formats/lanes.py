"""Lane code tables

Every "<measure><lane>" key names a lane with a two character code. A few
codes are reserved for measure-wide information (bar length, tempo changes
...), the other ones are looked up in the table of the instrument being
decoded, for the dialect the file is written in. Codes found in none of the
tables are ignored"""

from enum import Enum
from typing import Dict, Mapping, Optional, Tuple

from dtxtools.chart import ButtonCombination, DrumLane, Instrument, LaneLabel

from .enum import Dialect


class ReservedLane(str, Enum):
    BGM = "01"
    BAR_LENGTH = "02"
    BPM_CHANGE = "08"
    SHOW_HIDE = "C2"


RESERVED_CODES = {r.value: r for r in ReservedLane}


def reserved_lane(code: str) -> Optional[ReservedLane]:
    return RESERVED_CODES.get(code)


DTX_DRUM_LANES = {
    "1A": DrumLane.LC,
    "11": DrumLane.HH,
    "18": DrumLane.HH,  # open hi-hat
    "1C": DrumLane.LB,
    "1B": DrumLane.LP,
    "12": DrumLane.SD,
    "14": DrumLane.HT,
    "13": DrumLane.BD,
    "15": DrumLane.LT,
    "17": DrumLane.FT,
    "16": DrumLane.RC,
    "19": DrumLane.RD,
}

GDA_DRUM_LANES = {
    "SD": DrumLane.SD,
    "BD": DrumLane.BD,
    "CY": DrumLane.RC,
    "HT": DrumLane.HT,
    "LT": DrumLane.LT,
    "FT": DrumLane.FT,
    "HH": DrumLane.HH,
}


def _button_table(raw: Mapping[str, str]) -> Dict[str, ButtonCombination]:
    return {code: ButtonCombination.from_label(label) for code, label in raw.items()}


DTX_GUITAR_LANES = _button_table(
    {
        "20": "G00000",
        "21": "G00100",
        "22": "G01000",
        "24": "G10000",
        "93": "G00010",
        "9B": "G00001",
        "23": "G01100",
        "25": "G10100",
        "26": "G11000",
        "94": "G00110",
        "95": "G01010",
        "97": "G10010",
        "9C": "G00101",
        "9D": "G01001",
        "9F": "G10001",
        "AC": "G00011",
        "27": "G11100",
        "96": "G01110",
        "98": "G10110",
        "99": "G11010",
        "9E": "G01101",
        "A9": "G10101",
        "AA": "G11001",
        "AD": "G00111",
        "AE": "G01011",
        "D0": "G10011",
        "9A": "G11110",
        "AB": "G11101",
        "AF": "G01111",
        "D1": "G10111",
        "D2": "G11011",
        "D3": "G11111",
        "28": "GWail",
    }
)

DTX_BASS_LANES = _button_table(
    {
        "A0": "B00000",
        "A1": "B00100",
        "A2": "B01000",
        "A4": "B10000",
        "C5": "B00010",
        "CE": "B00001",
        "A3": "B01100",
        "A5": "B10100",
        "A6": "B11000",
        "C6": "B00110",
        "C8": "B01010",
        "CA": "B10010",
        "CF": "B00101",
        "DA": "B01001",
        "DC": "B10001",
        "E1": "B00011",
        "A7": "B11100",
        "C9": "B01110",
        "CB": "B10110",
        "CC": "B11010",
        "DB": "B01101",
        "DD": "B10101",
        "DE": "B11001",
        "E2": "B00111",
        "E3": "B01011",
        "E5": "B10011",
        "CD": "B11110",
        "DF": "B11101",
        "E4": "B01111",
        "E6": "B10111",
        "E7": "B11011",
        "E8": "B11111",
        "A8": "BWail",
    }
)


def _gda_button_table(half: str) -> Dict[str, ButtonCombination]:
    """GDA codes are the half letter followed by the octal digit of the
    RGB pattern"""
    raw = {f"{half}{i}": f"{half}{i:03b}" for i in range(8)}
    raw[f"{half}W"] = f"{half}Wail"
    return _button_table(raw)


GDA_GUITAR_LANES = _gda_button_table("G")
GDA_BASS_LANES = _gda_button_table("B")

LaneTable = Mapping[str, LaneLabel]

LANE_TABLES: Dict[Tuple[Dialect, Instrument], LaneTable] = {
    (Dialect.DTX, Instrument.DRUM): DTX_DRUM_LANES,
    (Dialect.DTX, Instrument.GUITAR): DTX_GUITAR_LANES,
    (Dialect.DTX, Instrument.BASS): DTX_BASS_LANES,
    (Dialect.GDA, Instrument.DRUM): GDA_DRUM_LANES,
    (Dialect.GDA, Instrument.GUITAR): GDA_GUITAR_LANES,
    (Dialect.GDA, Instrument.BASS): GDA_BASS_LANES,
}


def classify_lane(
    code: str, instrument: Instrument, dialect: Dialect
) -> Optional[LaneLabel]:
    """Returns the drum lane or button combination the code stands for, or
    None if the code means nothing for this instrument"""
    return LANE_TABLES[dialect, instrument].get(code)
