from importlib import resources
from pathlib import Path

from click.testing import CliRunner

from dtxtools.formats import LOADERS, Dialect
from dtxtools.formats.dtx.tests import data
from dtxtools.formats.json import load_json
from dtxtools.version import __version__

from ..cli import dtxtools, render


def test_drum_sheets() -> None:
    runner = CliRunner()
    with runner.isolated_filesystem(), resources.path(data, "simple.dtx") as p:
        result = runner.invoke(
            dtxtools,
            [
                "render",
                str(p.resolve(strict=True)),
                "out",
                "--dialect",
                "dtx",
                "--instrument",
                "drum",
            ],
        )
        if result.exception:
            raise result.exception
        assert result.exit_code == 0
        sheet = Path("out") / "dtxdrums_0.png"
        assert sheet.read_bytes().startswith(b"\x89PNG")


def test_guitar_sheets_with_a_graph(tmp_path: Path) -> None:
    runner = CliRunner()
    with runner.isolated_filesystem(), resources.path(data, "simple.gda") as p:
        result = runner.invoke(
            dtxtools,
            [
                "render",
                str(p.resolve(strict=True)),
                "out",
                "--dialect",
                "gda",
                "--instrument",
                "guitar",
                "--chart-type",
                "Vmix",
                "--direction",
                "down",
                "--measure-aligned",
                "--chip-images",
                str(tmp_path),
                "--graph",
            ],
        )
        if result.exception:
            raise result.exception
        assert result.exit_code == 0
        assert sorted(f.name for f in Path("out").iterdir()) == [
            "dtxGFG_0.png",
            "dtxGFG_graph.png",
        ]


def test_that_a_missing_part_is_reported() -> None:
    runner = CliRunner()
    with runner.isolated_filesystem(), resources.path(data, "simple.dtx") as p:
        result = runner.invoke(
            dtxtools,
            [
                "render",
                str(p.resolve(strict=True)),
                "out",
                "--dialect",
                "dtx",
                "--instrument",
                "bass",
            ],
        )
        assert result.exit_code == 0
        assert "no bass level" in result.output
        assert (Path("out") / "dtxGFB_0.png").exists()


def test_that_only_given_layout_options_are_forwarded() -> None:
    with resources.path(data, "simple.dtx") as p:
        src = str(p.resolve(strict=True))
        with_options = render.make_context(
            "render",
            [src, "out", "--dialect", "dtx", "--instrument", "drum"]
            + ["--scale", "2", "--measure-aligned"],
        )
        assert with_options.params["layout_options"] == {
            "scale": 2.0,
            "alignment": "measure",
        }

        without_options = render.make_context(
            "render", [src, "out", "--dialect", "dtx", "--instrument", "drum"]
        )
        assert not without_options.params.get("layout_options")


def test_that_decoding_errors_are_reported() -> None:
    runner = CliRunner()
    with runner.isolated_filesystem():
        Path("empty.dtx").write_bytes(b"")
        result = runner.invoke(
            dtxtools,
            ["render", "empty.dtx", "out", "--dialect", "dtx", "--instrument", "drum"],
        )
        assert result.exit_code == 1
        assert "empty" in result.output


def test_that_undecodable_bytes_do_not_stop_rendering() -> None:
    runner = CliRunner()
    with runner.isolated_filesystem():
        Path("broken.dtx").write_bytes(
            b"; Created by DTXCreator 024\r\n#TITLE: \x80\xff\r\n"
            b"#BPM: 120\r\n#DLEVEL: 50\r\n#00012: 01\r\n"
        )
        result = runner.invoke(
            dtxtools,
            ["render", "broken.dtx", "out", "--dialect", "dtx", "--instrument", "drum"],
        )
        if result.exception:
            raise result.exception
        assert result.exit_code == 0
        assert (Path("out") / "dtxdrums_0.png").exists()


def test_export() -> None:
    runner = CliRunner()
    with runner.isolated_filesystem(), resources.path(data, "simple.dtx") as p:
        result = runner.invoke(
            dtxtools,
            ["export", str(p.resolve(strict=True)), "chart.json", "--dialect", "dtx"],
        )
        if result.exception:
            raise result.exception
        assert result.exit_code == 0
        assert load_json(Path("chart.json")) == LOADERS[Dialect.DTX](p)


def test_version() -> None:
    result = CliRunner().invoke(dtxtools, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output
