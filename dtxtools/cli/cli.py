"""Command Line Interface"""

from pathlib import Path
from typing import Any, Dict, Optional

import click

from dtxtools.chart import Instrument
from dtxtools.formats import LOADERS, Dialect
from dtxtools.formats.dtx import DecodeError
from dtxtools.formats.json import dump_json
from dtxtools.formats.typing import Dumper
from dtxtools.layout import ChartType, Direction, Graph, GraphOption, LayoutConfig
from dtxtools.layout.assets import (
    BUTTON_CHIP_FILES,
    DRUM_CHIP_FILES,
    load_chip_images,
)
from dtxtools.layout.charter import make_charter
from dtxtools.layout.pillow_surface import PillowSurface
from dtxtools.version import __version__

from .helpers import layout_option, loader_option


def write_files(files: Dict[Path, bytes]) -> None:
    for path, contents in files.items():
        with path.open("wb") as f:
            f.write(contents)


@click.group()
@click.version_option(__version__, prog_name="dtxtools")
def dtxtools() -> None:
    """Tools for DTX and GDA charts"""


@dtxtools.command()
@click.argument("src", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("dst", type=click.Path(file_okay=False, path_type=Path))
@click.option(
    "--dialect",
    "dialect",
    required=True,
    type=click.Choice([d.value for d in LOADERS.keys()]),
    help="Dialect of the input file, DTX and GDA use different lane codes",
)
@click.option(
    "--instrument",
    "instrument",
    required=True,
    type=click.Choice([i.value for i in Instrument]),
    help="Which part of the chart to draw",
)
@loader_option("--encoding", "encoding", help="Text encoding of the input file")
@layout_option(
    "--chart-type",
    "chart_type",
    type=click.Choice([c.value for c in ChartType]),
    help="Which set of lanes the sheet shows",
)
@layout_option(
    "--scale",
    "scale",
    type=click.FloatRange(min=0.5, max=3.0),
    help="Vertical zoom factor",
)
@layout_option(
    "--page-height",
    "page_height",
    type=click.IntRange(min=480, max=3840),
    help="Height of a page in pixels",
)
@layout_option(
    "--pages-per-canvas",
    "pages_per_canvas",
    type=click.IntRange(min=6, max=25),
    help="Maximum number of pages in a single image",
)
@layout_option(
    "--measure-aligned",
    "alignment",
    flag_value="measure",
    help="Never cut a measure across two pages",
)
@layout_option(
    "--direction",
    "direction",
    type=click.Choice([d.value for d in Direction]),
    help="up : measures go up the page, down : measures go down the page",
)
@click.option(
    "--chip-images",
    "chip_images",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Folder containing chip images to use instead of plain rectangles",
)
@click.option(
    "--graph",
    "graph",
    is_flag=True,
    help="Also draw the note count graph",
)
@click.option(
    "--graph-option",
    "graph_option",
    type=click.Choice([o.value for o in GraphOption]),
    default=GraphOption.GITADORA.value,
    show_default=True,
    help="Which drum lanes are merged together on the graph",
)
def render(
    src: Path,
    dst: Path,
    dialect: str,
    instrument: str,
    chip_images: Optional[Path],
    graph: bool,
    graph_option: str,
    loader_options: Optional[Dict[str, Any]] = None,
    layout_options: Optional[Dict[str, Any]] = None,
) -> None:
    """Draw the chart sheets of SRC as PNG images in the DST folder"""
    loader = LOADERS[Dialect(dialect)]
    try:
        document = loader(src, **(loader_options or {}))
    except DecodeError as e:
        raise click.ClickException(str(e))

    config = LayoutConfig(instrument=Instrument(instrument), **(layout_options or {}))
    if config.instrument not in document.available_charts():
        click.echo(f"Warning : the chart has no {config.instrument.value} level")

    images = None
    if chip_images is not None:
        if config.instrument == Instrument.DRUM:
            images = load_chip_images(chip_images, DRUM_CHIP_FILES)
        else:
            images = load_chip_images(chip_images, BUTTON_CHIP_FILES)

    try:
        charter = make_charter(document, config, images)
        canvases = charter.render(PillowSurface)
    except ValueError as e:
        raise click.ClickException(str(e))

    dst.mkdir(parents=True, exist_ok=True)
    files = {}
    for canvas_config, png in zip(charter.canvas_configs(), canvases):
        if png is None:
            click.echo(f"Skipped {canvas_config.id}")
            continue
        files[dst / f"{canvas_config.id}.png"] = png

    if graph:
        prefix = charter.parameters.id_prefix
        note_graph = Graph(
            document, config.instrument, graph_option, id=f"{prefix}_graph"
        )
        files[dst / f"{note_graph.config.id}.png"] = note_graph.render(PillowSurface)

    write_files(files)


@dtxtools.command()
@click.argument("src", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("dst", type=click.Path(path_type=Path))
@click.option(
    "--dialect",
    "dialect",
    required=True,
    type=click.Choice([d.value for d in LOADERS.keys()]),
    help="Dialect of the input file, DTX and GDA use different lane codes",
)
@loader_option("--encoding", "encoding", help="Text encoding of the input file")
def export(
    src: Path,
    dst: Path,
    dialect: str,
    loader_options: Optional[Dict[str, Any]] = None,
) -> None:
    """Convert SRC to JSON chart data, DST can be a file or a folder"""
    loader = LOADERS[Dialect(dialect)]
    try:
        document = loader(src, **(loader_options or {}))
    except DecodeError as e:
        raise click.ClickException(str(e))

    dumper: Dumper = dump_json
    write_files(dumper(document, dst))


if __name__ == "__main__":
    dtxtools()
