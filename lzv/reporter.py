"""Report generation for leaderboards and score histories (CSV, HTML, summary)."""

import csv
import logging
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from lzv import AttendanceStatus, ScoreHistoryPoint
from lzv.scoring import LeaderboardEntry, find_highlights

log = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent / 'templates'

CSV_COLUMNS = [
    'Position',
    'Player_ID',
    'Player_Name',
    'Score',
    'Rank',
    'Present',
    'Maybe',
    'Not_Present',
    'Ghost',
    'Matches',
    'Recent_Form',
]

NUMERIC_COLUMNS = frozenset({
    'Position', 'Player_ID', 'Score', 'Present', 'Maybe', 'Not_Present', 'Ghost', 'Matches',
})

HISTORY_COLUMNS = ['Index', 'Label', 'Status', 'Delta', 'Score']

FORM_SYMBOLS = {
    AttendanceStatus.PRESENT: 'P',
    AttendanceStatus.MAYBE: '?',
    AttendanceStatus.NOT_PRESENT: 'X',
    AttendanceStatus.UNKNOWN: 'G',
}


def format_form(form: list[AttendanceStatus]) -> str:
    """Render recent form as a compact string, newest first ("PP?G")."""
    return ''.join(FORM_SYMBOLS[s] for s in form)


def _entry_to_row(position: int, entry: LeaderboardEntry) -> dict:
    """Convert a LeaderboardEntry to a flat dict for CSV/HTML output."""
    score = entry.score
    return {
        'Position': str(position),
        'Player_ID': str(entry.player.id),
        'Player_Name': entry.player.name,
        'Score': str(score.final_score),
        'Rank': score.rank.name,
        'Present': str(score.present_count),
        'Maybe': str(score.maybe_count),
        'Not_Present': str(score.not_present_count),
        'Ghost': str(score.ghost_count),
        'Matches': str(score.relevant_match_count),
        'Recent_Form': format_form(score.recent_form),
        # Extra fields for the HTML template only
        '_emoji': score.rank.emoji,
        '_breakdown': score.breakdown(),
    }


def write_csv_report(leaderboard: list[LeaderboardEntry], output_path: Path) -> None:
    """Write the leaderboard as a CSV report.

    Uses UTF-8 with BOM (utf-8-sig) and semicolon delimiter for
    compatibility with Excel.

    Args:
        leaderboard: Sorted leaderboard entries.
        output_path: Path for the output CSV file.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', newline='', encoding='utf-8-sig') as f:
        writer = csv.DictWriter(
            f, fieldnames=CSV_COLUMNS, delimiter=';', extrasaction='ignore',
        )
        writer.writeheader()
        for position, entry in enumerate(leaderboard, start=1):
            writer.writerow(_entry_to_row(position, entry))

    log.info("CSV-Report geschrieben: %s (%d Zeilen)", output_path, len(leaderboard))


def write_history_csv(history: list[ScoreHistoryPoint], output_path: Path) -> None:
    """Write a player's score history, oldest first."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', newline='', encoding='utf-8-sig') as f:
        writer = csv.writer(f, delimiter=';')
        writer.writerow(HISTORY_COLUMNS)
        for point in history:
            writer.writerow([
                point.index,
                point.label,
                point.status.value if point.status else '',
                point.delta,
                point.score,
            ])

    log.info("Verlauf geschrieben: %s (%d Punkte)", output_path, len(history))


def write_html_report(
    leaderboard: list[LeaderboardEntry],
    output_path: Path,
    title: str = '',
) -> None:
    """Write the leaderboard as an HTML report using Jinja2.

    Args:
        leaderboard: Sorted leaderboard entries.
        output_path: Path for the output HTML file.
        title: Report title, usually the team name.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=True,
    )
    template = env.get_template('leaderboard.html')

    rows = [_entry_to_row(i, e) for i, e in enumerate(leaderboard, start=1)]
    stats = _compute_stats(leaderboard)

    html = template.render(
        title=title,
        rows=rows,
        stats=stats,
        columns=CSV_COLUMNS,
        numeric_columns=NUMERIC_COLUMNS,
    )

    output_path.write_text(html, encoding='utf-8')
    log.info("HTML-Report geschrieben: %s", output_path)


def _compute_stats(leaderboard: list[LeaderboardEntry]) -> dict:
    """Compute summary statistics from a leaderboard."""
    highlights = find_highlights(leaderboard)
    rank_counts: dict[str, int] = {}
    for entry in leaderboard:
        name = entry.score.rank.name
        rank_counts[name] = rank_counts.get(name, 0) + 1

    return {
        'players': len(leaderboard),
        'present': sum(e.score.present_count for e in leaderboard),
        'maybe': sum(e.score.maybe_count for e in leaderboard),
        'not_present': sum(e.score.not_present_count for e in leaderboard),
        'ghost': sum(e.score.ghost_count for e in leaderboard),
        'top_scorer': highlights.top_scorer.name if highlights.top_scorer else '-',
        'most_ghosts': highlights.most_ghosts.name if highlights.most_ghosts else '-',
        'most_maybe': highlights.most_maybe.name if highlights.most_maybe else '-',
        'ranks': rank_counts,
    }


def print_summary(leaderboard: list[LeaderboardEntry], title: str = '') -> None:
    """Print a summary of the leaderboard to stdout.

    Args:
        leaderboard: Sorted leaderboard entries.
        title: Report title.
    """
    stats = _compute_stats(leaderboard)

    print(f"\n=== Social Credit: {title} ===")
    print(f"Spieler:                   {stats['players']:>5}")
    print(f"Anwesend:                  {stats['present']:>5}")
    print(f"Vielleicht:                {stats['maybe']:>5}")
    print(f"Abwesend:                  {stats['not_present']:>5}")
    print(f"Ghosts:                    {stats['ghost']:>5}")
    print("---")
    print(f"Top Scorer:  {stats['top_scorer']}")
    print(f"Casper:      {stats['most_ghosts']}")
    print(f"Miss Maybe:  {stats['most_maybe']}")
    print("---")
    for position, entry in enumerate(leaderboard, start=1):
        score = entry.score
        print(
            f"{position:>3}. {entry.player.name:<24} {score.final_score:>5}"
            f"  {score.rank.name:<18} {format_form(score.recent_form)}"
        )
    print()
