from __future__ import annotations

import argparse
import json
import logging
import os
from dataclasses import asdict
from typing import Any

from dotenv import load_dotenv

from .config import DATA_SOURCES, data_config_from_env
from .ingest import filter_games, load_game_log, resolve_player_id
from .normalize import load_roster
from .render import render_text
from .report import build_report
from .report_pdf import build_pdf_from_report
from .validate import validate_game_log


logger = logging.getLogger(__name__)


def _write_json(path: str, obj: Any) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(obj, f, indent=2, ensure_ascii=False)


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Lycans game log statistics")
    parser.add_argument("--data", default=None, help="Game log path or URL (defaults to LYCANS_DATA_FILE / LYCANS_DATA_URL)")
    parser.add_argument("--roster", default=None, help="Player roster JSON (joueurs.json)")
    parser.add_argument("--source", choices=sorted(DATA_SOURCES), default=None, help="Only keep games of one data source")
    parser.add_argument("--modded-only", action="store_true", help="Only keep modded games")
    parser.add_argument("--player", default=None, help="Player id or name to include achievements for")
    parser.add_argument("--save-normalized", default=None, help="Path to save normalized games JSON")
    parser.add_argument("--output", default=None, help="Path to output report JSON/text/PDF")
    parser.add_argument(
        "--output-format", choices=["json", "text", "pdf"], default="json", help="Output format"
    )
    parser.add_argument("--validate", action="store_true", help="Only check the game log for inconsistencies")
    parser.add_argument("--cache", action="store_true", help="Enable on-disk cache")
    parser.add_argument("--debug", action="store_true", help="Print debug logs")
    return parser.parse_args()


def main() -> None:
    load_dotenv()
    args = _parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.cache:
        os.environ["LYCANS_CACHE"] = "1"

    data_config = data_config_from_env()
    data = args.data or (str(data_config.data_file) if data_config.data_file else data_config.data_url)
    if not data:
        raise SystemExit(
            "No game log given. Pass --data or set LYCANS_DATA_FILE / LYCANS_DATA_URL in your shell or .env file."
        )

    try:
        games, meta = load_game_log(data)
    except (ValueError, RuntimeError) as exc:
        raise SystemExit(f"Could not load game log: {exc}")

    games = filter_games(games, source=args.source, modded_only=args.modded_only)
    meta.games_analyzed = len(games)
    meta.data_source = args.source
    meta.modded_only = args.modded_only

    if args.save_normalized:
        _write_json(args.save_normalized, [asdict(g) for g in games])

    if args.validate:
        issues = validate_game_log(games)
        for issue in issues:
            print(f"[{issue.type}] {issue.game_id}: {issue.message}")
        if issues:
            raise SystemExit(1)
        print(f"No issue found in {len(games)} games.")
        return

    roster_path = args.roster or (str(data_config.roster_file) if data_config.roster_file else None)
    roster = load_roster(roster_path)

    player_id = None
    if args.player:
        try:
            player_id, player_name = resolve_player_id(games, args.player, roster)
        except ValueError as exc:
            raise SystemExit(str(exc))
        logger.info("Including achievements for %s (%s)", player_name, player_id)

    report = build_report(games, meta, roster=roster, player_id=player_id)

    if args.output_format == "pdf":
        if not args.output:
            raise SystemExit("--output is required for PDF output.")
        build_pdf_from_report(report, args.output)
        logger.info("Wrote %s", args.output)
        return

    if args.output_format == "json":
        output_text = json.dumps(report, indent=2, ensure_ascii=False)
    else:
        output_text = render_text(report)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(output_text)
    else:
        print(output_text)


if __name__ == "__main__":
    main()
