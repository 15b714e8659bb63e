"""lzv-stats – CLI for social credit rankings and league match sides."""

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

from lzv import MatchRecord, PlayerRecord
from lzv.dates import parse_date
from lzv.history import build_score_history
from lzv.names import cluster_team_names
from lzv.reader import read_league_matches, read_snapshot
from lzv.repository import InMemoryRepository
from lzv.reporter import (
    print_summary,
    write_csv_report,
    write_history_csv,
    write_html_report,
)
from lzv.scoring import build_leaderboard
from lzv.sides import opponent_name, resolve_side, team_match_result, team_recent_form


def _evaluation_time(value: str) -> datetime:
    parsed = parse_date(value)
    if parsed is None:
        raise argparse.ArgumentTypeError(f"Ungueltiges Datum: {value!r}")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        description='Social-Credit-Rangliste und Heim/Auswaerts-Zuordnung fuer LZV-Teams.',
        prog='lzvstats.py',
    )
    parser.add_argument(
        '--verbose', '-v', action='store_true',
        help='Debug-Ausgaben aktivieren',
    )
    sub = parser.add_subparsers(dest='command', required=True)

    board = sub.add_parser('leaderboard', help='Rangliste aller Spieler berechnen')
    board.add_argument(
        '--data', required=True, type=Path,
        help='Verzeichnis mit players.csv, matches.csv und attendances.csv',
    )
    board.add_argument(
        '--output', type=Path,
        help='Pfad fuer die Report-Ausgabe (CSV)',
    )
    board.add_argument(
        '--html', action='store_true',
        help='Zusaetzlich einen HTML-Report erzeugen',
    )
    board.add_argument(
        '--summary', action='store_true',
        help='Zusammenfassung auf stdout ausgeben',
    )
    board.add_argument(
        '--title', default='',
        help='Titel fuer Reports',
    )
    board.add_argument(
        '--now', type=_evaluation_time,
        help='Auswertungszeitpunkt (ISO 8601, Standard: jetzt)',
    )

    history = sub.add_parser('history', help='Punkteverlauf eines Spielers')
    history.add_argument('--data', required=True, type=Path)
    history.add_argument('--player', required=True, type=int, help='Spieler-ID')
    history.add_argument('--output', type=Path, help='Pfad fuer den Verlauf (CSV)')
    history.add_argument('--now', type=_evaluation_time)

    sides = sub.add_parser('sides', help='Heim/Auswaerts fuer gescrapte Spiele bestimmen')
    sides.add_argument(
        '--league', required=True, type=Path,
        help='CSV-Datei mit gescrapten Spielen',
    )
    sides.add_argument('--team', required=True, help='Eigener Teamname')

    teams = sub.add_parser('teams', help='Teamnamen aus gescrapten Spielen gruppieren')
    teams.add_argument('--league', required=True, type=Path)
    return parser


def load_snapshot(data_dir: Path) -> tuple[tuple[PlayerRecord, ...], tuple[MatchRecord, ...]]:
    """Load the CSV snapshot into repositories and return stable copies."""
    players, matches = read_snapshot(data_dir)
    player_repo: InMemoryRepository[PlayerRecord] = InMemoryRepository()
    match_repo: InMemoryRepository[MatchRecord] = InMemoryRepository()
    player_repo.insert_many(players)
    match_repo.insert_many(matches)
    return player_repo.snapshot(), match_repo.snapshot()


def run_leaderboard(args: argparse.Namespace, parser: argparse.ArgumentParser) -> None:
    if not args.output and not args.summary:
        parser.error('--output oder --summary muss angegeben werden.')
    if args.html and not args.output:
        parser.error('--html erfordert --output.')

    players, matches = load_snapshot(args.data)
    leaderboard = build_leaderboard(list(players), list(matches), args.now)

    if args.output:
        write_csv_report(leaderboard, args.output)
        if args.html:
            write_html_report(leaderboard, args.output.with_suffix('.html'), args.title)

    if args.summary:
        print_summary(leaderboard, args.title or args.data.name)


def run_history(args: argparse.Namespace, parser: argparse.ArgumentParser) -> None:
    players, matches = load_snapshot(args.data)
    player = next((p for p in players if p.id == args.player), None)
    if player is None:
        parser.error(f'Spieler {args.player} nicht gefunden.')

    history = build_score_history(player, list(matches), args.now)
    if args.output:
        write_history_csv(history, args.output)
        return

    print(f"\n=== Verlauf: {player.name} ===")
    for point in history:
        print(f"{point.index:>3}. {point.label:<40} {point.delta:>+5} {point.score:>6}")
    print()


def run_sides(args: argparse.Namespace) -> None:
    matches = read_league_matches(args.league)
    for match in matches:
        side = resolve_side(args.team, match.home_team, match.away_team)
        line = f"{side.value:<5} vs {opponent_name(args.team, match)}"
        if match.status == 'Played':
            line += (
                f"  {match.home_score}-{match.away_score}"
                f"  {team_match_result(args.team, match)}"
            )
        print(line)
    form = team_recent_form(args.team, matches)
    print(f"Form: {' '.join(form) if form else '-'}")


def run_teams(args: argparse.Namespace) -> None:
    matches = read_league_matches(args.league)
    names = sorted({n for m in matches for n in (m.home_team, m.away_team)})
    for cluster in cluster_team_names(names):
        print(' = '.join(cluster))


def main() -> None:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(levelname)s: %(message)s',
    )

    try:
        if args.command == 'leaderboard':
            run_leaderboard(args, parser)
        elif args.command == 'history':
            run_history(args, parser)
        elif args.command == 'sides':
            run_sides(args)
        elif args.command == 'teams':
            run_teams(args)
    except (FileNotFoundError, ValueError) as exc:
        logging.error("%s", exc)
        sys.exit(1)


if __name__ == '__main__':
    main()
