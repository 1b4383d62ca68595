import io

from tagmark.core.languages import language_for_file
from tagmark.core.models import MatchRange, TagSpec
from tagmark.main import StartupMode, parse_arguments, run_report
from tagmark.services.report import ReportRenderer, TagHit, TextPositions
from tagmark.services.settings import HighlightSettings


def test_text_positions():
    positions = TextPositions("ab\ncd\n\nef")

    assert positions.line_count == 4
    assert positions.position_at(0) == (0, 0)
    assert positions.position_at(2) == (0, 2)
    assert positions.position_at(3) == (1, 0)
    assert positions.position_at(7) == (3, 0)
    assert positions.position_at(100) == (3, 2)


def test_report_renderer_collects_hits():
    text = "x\n  // TODO later  \n"
    renderer = ReportRenderer()
    renderer.begin(text)
    renderer.apply(renderer.create_style({}, "TODO"), [MatchRange(7, 19)])

    assert renderer.hits == [TagHit(tag="TODO", line=2, column=6, text="TODO later")]
    assert renderer.hits[0].format("a.c") == "a.c:2:6: TODO TODO later"


def test_language_for_file():
    assert language_for_file("pkg/module.py") == "python"
    assert language_for_file("App.TSX") == "typescriptreact"
    assert language_for_file("Makefile") == "makefile"
    assert language_for_file("query.sql") == "sql"
    assert language_for_file("job.sas") == "SAS"
    assert language_for_file("README") == "plaintext"


def test_run_report(tmp_path):
    source = tmp_path / "tool.py"
    source.write_text("#!/usr/bin/env python\nimport os\n# TODO: tidy\nx = 1  # fixme later\n", encoding="utf-8")
    settings = HighlightSettings(tags=[TagSpec(tags=("TODO",)), TagSpec(tags=("FIXME",))])
    out = io.StringIO()

    assert run_report([str(source)], settings, out=out) == 0
    assert out.getvalue().splitlines() == [
        f"{source}:3:3: TODO TODO: tidy",
        f"{source}:4:10: FIXME fixme later",
    ]


def test_run_report_language_override(tmp_path):
    notes = tmp_path / "notes"
    notes.write_text("TODO buy milk\n", encoding="utf-8")
    out = io.StringIO()

    settings = HighlightSettings(highlight_plain_text=True, tags=[TagSpec(tags=("TODO",))])
    run_report([str(notes)], settings, language="plaintext", out=out)

    assert out.getvalue() == f"{notes}:1:1: TODO TODO buy milk\n"


def test_run_report_missing_file(tmp_path):
    out = io.StringIO()
    assert run_report([str(tmp_path / "nope.c")], HighlightSettings(), out=out) == 1
    assert out.getvalue() == ""


def test_parse_arguments():
    args = parse_arguments(["--report", "-l", "c", "--debug", "a.c", "b.c"])

    assert args.mode == StartupMode.REPORT
    assert args.paths == ["a.c", "b.c"]
    assert args.language == "c"
    assert args.log_level == "DEBUG"

    assert parse_arguments([]).mode == StartupMode.VIEWER
