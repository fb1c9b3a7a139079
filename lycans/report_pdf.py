from __future__ import annotations

import argparse
import json
import os
import tempfile
from typing import Any, Dict, List, Optional

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

from reportlab.lib import colors  # noqa: E402
from reportlab.lib.pagesizes import A4  # noqa: E402
from reportlab.lib.styles import getSampleStyleSheet  # noqa: E402
from reportlab.lib.units import inch  # noqa: E402
from reportlab.platypus import Image, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle  # noqa: E402

from .timeline import format_duration  # noqa: E402


CAMP_COLORS = {
    "Villageois": "#4a9a4a",
    "Loup": "#c0392b",
    "Amoureux": "#e377c2",
}


def _load_report(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _save_plot(fig, path: str) -> str:
    fig.tight_layout()
    fig.savefig(path, dpi=160)
    plt.close(fig)
    return path


def _plot_camp_win_rates(report: Dict[str, Any], out_path: str) -> Optional[str]:
    rows = (report.get("overview") or {}).get("winner_camps") or []
    if not rows:
        return None
    labels = [r.get("camp") for r in rows]
    values = [float(r.get("win_rate") or 0.0) for r in rows]
    fig, ax = plt.subplots(figsize=(6.5, 3.2))
    ax.bar(labels, values, color=[CAMP_COLORS.get(c, "#7f7f7f") for c in labels])
    ax.set_ylim(0, 100)
    ax.set_ylabel("% of games")
    ax.set_title("Winning Camp")
    ax.tick_params(axis="x", labelrotation=30, labelsize=8)
    return _save_plot(fig, out_path)


def _plot_talking_leaders(report: Dict[str, Any], out_path: str) -> Optional[str]:
    rows = (report.get("talking") or {}).get("player_stats") or []
    if not rows:
        return None
    top = rows[:10]
    labels = [r.get("player") for r in top]
    outside = [float(r.get("seconds_outside_per_60min") or 0.0) / 60.0 for r in top]
    during = [float(r.get("seconds_during_per_60min") or 0.0) / 60.0 for r in top]
    fig, ax = plt.subplots(figsize=(6.5, 3.5))
    ax.barh(labels[::-1], outside[::-1], color="#4a7ebb", label="outside meetings")
    ax.barh(labels[::-1], during[::-1], left=outside[::-1], color="#f0a030", label="during meetings")
    ax.set_xlabel("Minutes per hour of play")
    ax.set_title("Talk Time Leaders")
    ax.legend(loc="lower right", fontsize=8)
    return _save_plot(fig, out_path)


def _plot_longest_series(report: Dict[str, Any], out_path: str) -> Optional[str]:
    series = report.get("series") or {}
    kinds = [("villageois", "Villageois"), ("loup", "Loups"), ("win", "Victoires"), ("loss", "Défaites")]
    kinds = [(k, label) for k, label in kinds if series.get(k)]
    if not kinds:
        return None

    fig, axes = plt.subplots(1, len(kinds), figsize=(3.2 * len(kinds), 3.2))
    if len(kinds) == 1:
        axes = [axes]
    for ax, (key, label) in zip(axes, kinds):
        top = series[key][:5]
        names = [r.get("player_name") for r in top]
        lengths = [int(r.get("series_length") or 0) for r in top]
        bar_colors = ["#2a6fdb" if r.get("is_ongoing") else "#9aa5b1" for r in top]
        ax.barh(names[::-1], lengths[::-1], color=bar_colors[::-1])
        ax.set_title(label, fontsize=9)
        ax.tick_params(axis="y", labelsize=7)
    return _save_plot(fig, out_path)


def _build_players_table(report: Dict[str, Any]) -> Table:
    players = (report.get("players") or {}).get("player_stats") or []
    rows: List[List[str]] = [["Player", "Games", "Wins", "Win %", "Villageois", "Loup", "Solo"]]
    for p in players[:15]:
        camps = p.get("camps") or {}
        rows.append(
            [
                str(p.get("player_name")),
                str(p.get("games_played", 0)),
                str(p.get("wins", 0)),
                f"{(p.get('win_percent') or 0):.1f}",
                str((camps.get("villageois") or {}).get("played", 0)),
                str((camps.get("loup") or {}).get("played", 0)),
                str((camps.get("solo") or {}).get("played", 0)),
            ]
        )
    table = Table(rows, colWidths=[1.75 * inch] + [0.75 * inch] * 6)
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
                ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
                ("FONT", (0, 0), (-1, -1), "Helvetica", 8),
            ]
        )
    )
    return table


def build_pdf_from_report(report: Dict[str, Any], output_path: str) -> None:
    styles = getSampleStyleSheet()
    story: List[Any] = []
    story.append(Paragraph("Lycans Stats Report", styles["Title"]))
    meta = report.get("meta") or {}
    story.append(Paragraph(f"Source: {meta.get('source')}", styles["Heading2"]))
    story.append(Spacer(1, 0.2 * inch))

    overview = report.get("overview") or {}
    story.append(Paragraph("Snapshot", styles["Heading3"]))
    story.append(
        Paragraph(
            f"Games analyzed: <b>{overview.get('games', 0)}</b> • Modded: "
            f"<b>{overview.get('modded_games', 0)}</b> • Players: <b>{overview.get('players', 0)}</b>",
            styles["BodyText"],
        )
    )
    if overview.get("first_game"):
        story.append(
            Paragraph(
                f"From {overview.get('first_game')} to {overview.get('last_game')}",
                styles["BodyText"],
            )
        )
    story.append(Spacer(1, 0.2 * inch))

    story.append(Paragraph("Most Active Players", styles["Heading3"]))
    story.append(_build_players_table(report))
    story.append(Spacer(1, 0.2 * inch))

    talking = (report.get("talking") or {}).get("player_stats") or []
    if talking:
        story.append(Paragraph("Talk Time", styles["Heading3"]))
        for row in talking[:5]:
            story.append(
                Paragraph(
                    f"{row.get('player')}: <b>{format_duration(row.get('seconds_all_per_60min') or 0)}</b> "
                    f"per hour over {row.get('games_played', 0)} games",
                    styles["BodyText"],
                )
            )
        story.append(Spacer(1, 0.2 * inch))

    validation = report.get("validation") or {}
    story.append(Paragraph("Data Consistency", styles["Heading3"]))
    story.append(
        Paragraph(
            f"<b>{validation.get('total', 0)}</b> issue(s) in {validation.get('games', 0)} game(s).",
            styles["BodyText"],
        )
    )
    story.append(Spacer(1, 0.2 * inch))

    with tempfile.TemporaryDirectory() as tmp:
        plots = [
            ("camps.png", _plot_camp_win_rates, "Winning camp: share of games won by each camp."),
            (
                "talking.png",
                _plot_talking_leaders,
                "Talk time: minutes of voice activity per hour of play, split by meeting phase.",
            ),
            (
                "series.png",
                _plot_longest_series,
                "Longest series: top 5 per kind; highlighted bars are still ongoing.",
            ),
        ]
        for name, fn, caption in plots:
            path = os.path.join(tmp, name)
            img = fn(report, path)
            if img and os.path.exists(img):
                story.append(Paragraph(caption, styles["BodyText"]))
                story.append(Image(img, width=6.5 * inch, height=3.5 * inch))
                story.append(Spacer(1, 0.2 * inch))

        doc = SimpleDocTemplate(output_path, pagesize=A4)
        doc.build(story)


def build_pdf(input_path: str, output_path: str) -> None:
    build_pdf_from_report(_load_report(input_path), output_path)


def main() -> None:
    parser = argparse.ArgumentParser(description="Render Lycans stats report JSON to PDF.")
    parser.add_argument("--input", required=True, help="Path to report.json")
    parser.add_argument("--output", required=True, help="Path to output PDF")
    args = parser.parse_args()
    build_pdf(args.input, args.output)


if __name__ == "__main__":
    main()
