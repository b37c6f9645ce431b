from dataclasses import asdict
from io import StringIO
from pathlib import Path
from typing import Any, Dict

import simplejson as json

from dtxtools.chart import BarGroup, ChartDocument

from . import schema

VERSION = "1.0.0"


def _dump_bar_group(bar: BarGroup) -> dict:
    return {
        "lines": bar.line_count,
        "notes": {label.label: raw for label, raw in bar.notes.items()},
        "bpm_markers": [asdict(m) for m in bar.bpm_markers],
        "show_hide_markers": [asdict(m) for m in bar.show_hide_markers],
        "bgm_markers": [asdict(m) for m in bar.bgm_markers],
    }


def _dump_document(document: ChartDocument) -> dict:
    info = document.chart_info
    return {
        "version": VERSION,
        "chart_info": {
            "title": info.title,
            "artist": info.artist,
            "bpm": info.bpm,
            "levels": {i.value: level for i, level in info.levels.items()},
            "preview": info.preview,
            "preimage": info.preimage,
        },
        "metadata": {i.value: asdict(c) for i, c in document.metadata.items()},
        "bar_groups": [_dump_bar_group(b) for b in document.bar_groups],
    }


def dump_document(document: ChartDocument) -> bytes:
    chart_data = schema.ChartData().dump(_dump_document(document))
    chart_data_fp = StringIO()
    json.dump(chart_data, chart_data_fp, use_decimal=True, indent=4)
    return chart_data_fp.getvalue().encode("utf-8")


def dump_json(document: ChartDocument, path: Path, **kwargs: Any) -> Dict[Path, bytes]:
    if path.is_dir():
        name = document.chart_info.title or "chart"
        path = path / f"{name}.json"

    return {path: dump_document(document)}
