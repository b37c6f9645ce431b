from fractions import Fraction

import pytest

from dtxtools.chart import ButtonCounts, ChartDocument, DrumCounts, Instrument

from ..graph import (
    DIAGRAM_HEIGHT,
    Graph,
    GraphOption,
    button_lanes,
    drum_lanes,
)
from ..surface import (
    LineInstruction,
    RecordingSurface,
    RectangleInstruction,
    TextInstruction,
)

COUNTS = DrumCounts(total=16, HH=4, LP=3, LB=2, SD=2, RC=4, RD=1)


def names(option: GraphOption) -> list:
    return [lane.name for lane in drum_lanes(COUNTS, option)]


def test_full_graphs_show_every_lane() -> None:
    assert names(GraphOption.FULL) == [
        "LC",
        "HH",
        "LP",
        "LB",
        "SD",
        "HT",
        "BD",
        "LT",
        "FT",
        "RC",
        "RD",
    ]


def test_lane_merges() -> None:
    assert "LB" not in names(GraphOption.LP_LB)
    assert "RD" in names(GraphOption.LP_LB)
    assert "RD" not in names(GraphOption.RC_RD)
    assert "LB" in names(GraphOption.RC_RD)

    lanes = {lane.name: lane.count for lane in drum_lanes(COUNTS, GraphOption.GITADORA)}
    assert len(lanes) == 9
    assert lanes["LP"] == 5
    assert lanes["RC"] == 5


def test_button_lanes() -> None:
    counts = ButtonCounts(total=6, R=1, G=2, B=3, open=2)
    lanes = button_lanes(counts)
    assert [(lane.name, lane.count) for lane in lanes] == [
        ("R", 1),
        ("G", 2),
        ("B", 3),
        ("Y", 0),
        ("M", 0),
        ("O", 2),
    ]


def graph_of(total: int, **counts: int) -> Graph:
    document = ChartDocument(
        metadata={Instrument.DRUM: DrumCounts(total=total, **counts)}
    )
    return Graph(document, Instrument.DRUM, GraphOption.FULL)


@pytest.mark.parametrize(
    "total,expected",
    [
        (0, Fraction(150)),
        (300, Fraction(150)),
        (600, Fraction(198)),
        (1000, Fraction(250)),
    ],
)
def test_reference_counts(total: int, expected: Fraction) -> None:
    assert graph_of(total).reference_count() == expected


def test_that_an_unknown_option_falls_back_to_full() -> None:
    with pytest.warns(UserWarning):
        graph = Graph(ChartDocument(), Instrument.DRUM, "cowbell")
    assert graph.option == GraphOption.FULL


def test_that_missing_counts_draw_an_empty_graph() -> None:
    graph = Graph(ChartDocument(), Instrument.BASS)
    assert [lane.count for lane in graph.lanes()] == [0] * 6


def test_the_graph_canvas() -> None:
    graph = Graph(ChartDocument(), Instrument.DRUM, id="song_graph")
    assert (graph.config.width, graph.config.height) == (283, 750)
    assert graph.config.id == "song_graph"
    assert graph.config.background_color == "#111111"


def test_graph_drawing() -> None:
    graph = graph_of(300, HH=200, SD=75)
    surface = graph.draw(RecordingSurface)
    assert isinstance(surface, RecordingSurface)
    bars = surface.of_type(RectangleInstruction)
    assert len(bars) == 2 * 11
    heights = {
        i.rect.x: i.rect.height
        for i in bars[1::2]
        if isinstance(i, RectangleInstruction)
    }
    hi_hat, snare = list(heights.values())[1], list(heights.values())[4]
    # full once a lane reaches the reference count
    assert hi_hat == DIAGRAM_HEIGHT
    assert snare == DIAGRAM_HEIGHT / 2
    assert len(surface.of_type(LineInstruction)) == 1

    *lane_counts, label, total = [
        i.text for i in surface.instructions if isinstance(i, TextInstruction)
    ]
    assert lane_counts[1] == "200"
    assert (label, total) == ("Total Notes", "300")


def test_graph_rendering() -> None:
    rendered = graph_of(10, SD=10).render(RecordingSurface)
    assert rendered.startswith(b"dtxgraph 283x750")
