from pathlib import Path
from typing import Any

import simplejson as json

from dtxtools.chart import (
    BarGroup,
    BGMMarker,
    BPMMarker,
    ButtonCounts,
    ChartDocument,
    ChartInfo,
    DrumCounts,
    Instrument,
    NoteCounts,
    ShowHideMarker,
    parse_lane_label,
)

from . import schema


def _load_counts(instrument: Instrument, raw_counts: dict) -> NoteCounts:
    counts_class = DrumCounts if instrument == Instrument.DRUM else ButtonCounts
    try:
        return counts_class(**raw_counts)
    except TypeError:
        raise ValueError(
            f"Invalid note counts for the {instrument.value} chart : {raw_counts}"
        ) from None


def _load_bar_group(raw_bar: dict) -> BarGroup:
    return BarGroup(
        line_count=raw_bar["lines"],
        notes={parse_lane_label(k): v for k, v in raw_bar["notes"].items()},
        bpm_markers=[BPMMarker(**m) for m in raw_bar["bpm_markers"]],
        show_hide_markers=[ShowHideMarker(**m) for m in raw_bar["show_hide_markers"]],
        bgm_markers=[BGMMarker(**m) for m in raw_bar["bgm_markers"]],
    )


def load_document(raw: bytes) -> ChartDocument:
    file = schema.ChartData().load(json.loads(raw, use_decimal=True))
    info = file["chart_info"]
    return ChartDocument(
        chart_info=ChartInfo(
            title=info["title"],
            artist=info["artist"],
            bpm=info["bpm"],
            levels={Instrument(k): v for k, v in info["levels"].items()},
            preview=info["preview"],
            preimage=info["preimage"],
        ),
        metadata={
            Instrument(k): _load_counts(Instrument(k), v)
            for k, v in file["metadata"].items()
        },
        bar_groups=[_load_bar_group(b) for b in file["bar_groups"]],
    )


def load_json(path: Path, **kwargs: Any) -> ChartDocument:
    return load_document(path.read_bytes())
