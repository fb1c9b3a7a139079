import json

from reportlab.lib.pagesizes import A4
from reportlab.platypus import SimpleDocTemplate

from lycans.ingest import FetchMeta
from lycans.render import render_text
from lycans.report import build_report
from lycans.report_pdf import _build_players_table, build_pdf, build_pdf_from_report


def _meta(games) -> FetchMeta:
    return FetchMeta(
        source="tests/fixtures/game_log_sample.json",
        mod_version="0.243",
        total_records=len(games),
        games_loaded=len(games),
        games_analyzed=len(games),
    )


def test_build_report_sections(games) -> None:
    report = build_report(games, _meta(games))
    assert {
        "meta",
        "data_coverage",
        "overview",
        "players",
        "camp_performance",
        "talking",
        "series",
        "voting",
        "deaths",
        "hunters",
        "validation",
    } <= set(report)
    assert report["deaths"]["total_deaths"] == 2
    assert "player" not in report
    assert report["overview"]["games"] == 3
    assert report["validation"]["total"] == 3
    assert report["series"]["total_games_analyzed"] == 3
    # report is plain JSON
    json.dumps(report)


def test_build_report_for_player(games) -> None:
    report = build_report(games, _meta(games), roster={"100": "Alice the Great"}, player_id="100")
    player = report["player"]
    assert player["player_id"] == "100"
    assert set(player["achievements"]) == {"all_games", "modded_only"}


def test_render_text(games) -> None:
    text = render_text(build_report(games, _meta(games)))
    assert "LYCANS STATS REPORT" in text
    assert "Alice" in text


def test_pdf_output(games, tmp_path) -> None:
    report = build_report(games, _meta(games))
    out = tmp_path / "report.pdf"
    build_pdf_from_report(report, str(out))
    assert out.read_bytes().startswith(b"%PDF")

    report_json = tmp_path / "report.json"
    report_json.write_text(json.dumps(report), encoding="utf-8")
    out2 = tmp_path / "from_json.pdf"
    build_pdf(str(report_json), str(out2))
    assert out2.exists()


def test_players_table_fits_the_page(games, tmp_path) -> None:
    table = _build_players_table(build_report(games, _meta(games)))
    doc = SimpleDocTemplate(str(tmp_path / "unused.pdf"), pagesize=A4)
    assert sum(table._colWidths) <= doc.width
