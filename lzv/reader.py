"""CSV snapshot reader with automatic encoding detection and field normalization."""

import csv
import io
import logging
import re
from pathlib import Path
from typing import Callable, TypeVar

from lzv import (
    Attendance,
    AttendanceStatus,
    LeagueMatch,
    MatchRecord,
    PlayerRecord,
)

log = logging.getLogger(__name__)

T = TypeVar('T')

# Matches any sequence of whitespace (including Unicode whitespace like U+2006)
_WHITESPACE_RE = re.compile(r'\s+')
_ID_LIST_RE = re.compile(r'[,|\s]+')

PLAYER_COLUMNS = {'Player ID', 'Name', 'Team IDs'}
MATCH_COLUMNS = {'Match ID', 'Team ID', 'Date', 'Name'}
ATTENDANCE_COLUMNS = {'Match ID', 'Player ID', 'Status'}
LEAGUE_COLUMNS = {'Date', 'Home Team', 'Away Team', 'Home Score', 'Away Score', 'Status'}

LEAGUE_STATUSES = {'Scheduled', 'Played', 'Postponed'}

SNAPSHOT_FILES = {
    'players': 'players.csv',
    'matches': 'matches.csv',
    'attendances': 'attendances.csv',
}


def detect_encoding(path: Path) -> str:
    """Detect file encoding by checking for BOM bytes.

    Args:
        path: Path to the CSV file.

    Returns:
        Encoding string suitable for open().
    """
    with open(path, 'rb') as f:
        bom = f.read(2)
    if bom == b'\xff\xfe':
        return 'utf-16-le'
    return 'utf-8-sig'


def detect_delimiter(header: str) -> str:
    """Pick tab, semicolon or comma, in that order, from the header line."""
    for delimiter in ('\t', ';'):
        if delimiter in header:
            return delimiter
    return ','


def normalize_whitespace(value: str) -> str:
    """Normalize whitespace in a string value.

    Collapses any sequence of whitespace (including Unicode whitespace)
    into a single space and strips leading/trailing whitespace.

    Args:
        value: Raw string value from CSV.

    Returns:
        Normalized string.
    """
    return _WHITESPACE_RE.sub(' ', value).strip()


def parse_id_list(value: str) -> list[int]:
    """Parse "1, 2" or "1|2" into [1, 2]."""
    return [int(part) for part in _ID_LIST_RE.split(value) if part]


def parse_attendance_status(value: str) -> AttendanceStatus:
    """Parse a stored attendance status, ignoring case.

    A record exists, so the player answered: anything other than Present or
    Maybe counts as NotPresent, never as a missing record.
    """
    folded = value.casefold()
    if folded == 'present':
        return AttendanceStatus.PRESENT
    if folded == 'maybe':
        return AttendanceStatus.MAYBE
    if folded != 'notpresent':
        log.warning("Unbekannter Status %r als NotPresent gewertet", value)
    return AttendanceStatus.NOT_PRESENT


def _read_rows(
    path: str | Path,
    required_cols: set[str],
    build: Callable[[dict[str, str]], T],
) -> list[T]:
    """Read a CSV file and turn every row into a record.

    Rows that fail to convert are skipped with a warning.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is empty or required columns are missing.
    """
    path = Path(path)
    encoding = detect_encoding(path)

    with open(path, 'r', encoding=encoding) as f:
        content = f.read()

    # Strip BOM if present
    content = content.lstrip('\ufeff')
    delimiter = detect_delimiter(content.split('\n', 1)[0])

    reader = csv.DictReader(io.StringIO(content), delimiter=delimiter)

    if reader.fieldnames is None:
        raise ValueError(f"Datei {path} ist leer oder hat keine Header-Zeile.")
    actual_cols = {normalize_whitespace(c) for c in reader.fieldnames}
    missing = required_cols - actual_cols
    if missing:
        raise ValueError(
            f"Fehlende Spalten in {path}: {', '.join(sorted(missing))}"
        )

    records: list[T] = []
    for row_num, row in enumerate(reader, start=2):
        # Surplus fields land under the None key, e.g. an unquoted "1,2"
        if None in row:
            log.warning(
                "Zeile %d in %s uebersprungen: %d Felder zu viel",
                row_num, path, len(row[None]),
            )
            continue
        # Normalize keys and values
        cleaned = {normalize_whitespace(k): normalize_whitespace(v or '')
                   for k, v in row.items() if k is not None}
        try:
            records.append(build(cleaned))
        except (ValueError, KeyError) as exc:
            log.warning("Zeile %d in %s uebersprungen: %s", row_num, path, exc)

    log.info("%d Datensaetze gelesen aus %s", len(records), path)
    return records


def _build_player(row: dict[str, str]) -> PlayerRecord:
    return PlayerRecord(
        id=int(row['Player ID']),
        name=row['Name'],
        team_ids=parse_id_list(row.get('Team IDs', '')),
    )


def _build_match(row: dict[str, str]) -> MatchRecord:
    return MatchRecord(
        id=int(row['Match ID']),
        name=row['Name'],
        # Left raw; unparseable dates make the match irrelevant, not invalid
        date=row.get('Date', ''),
        team_id=int(row['Team ID']),
    )


def _build_attendance(row: dict[str, str]) -> tuple[int, Attendance]:
    attendance = Attendance(
        player_id=int(row['Player ID']),
        status=parse_attendance_status(row['Status']),
    )
    return int(row['Match ID']), attendance


def _build_league_match(row: dict[str, str]) -> LeagueMatch:
    status = row['Status'] or 'Scheduled'
    if status not in LEAGUE_STATUSES:
        raise ValueError(f"Unbekannter Spielstatus {status!r}")
    return LeagueMatch(
        date=row.get('Date', ''),
        home_team=row['Home Team'],
        away_team=row['Away Team'],
        home_score=int(row['Home Score']) if row.get('Home Score') else 0,
        away_score=int(row['Away Score']) if row.get('Away Score') else 0,
        status=status,
        external_id=row.get('External ID') or None,
    )


def read_players(path: str | Path) -> list[PlayerRecord]:
    """Read player records from a CSV file.

    Args:
        path: Path to the CSV file.

    Returns:
        List of PlayerRecord objects.
    """
    return _read_rows(path, PLAYER_COLUMNS, _build_player)


def read_matches(path: str | Path) -> list[MatchRecord]:
    """Read match records (without attendances) from a CSV file."""
    return _read_rows(path, MATCH_COLUMNS, _build_match)


def read_attendances(path: str | Path) -> list[tuple[int, Attendance]]:
    """Read attendance rows as (match id, Attendance) pairs."""
    return _read_rows(path, ATTENDANCE_COLUMNS, _build_attendance)


def read_league_matches(path: str | Path) -> list[LeagueMatch]:
    """Read scraped league results from a CSV file."""
    return _read_rows(path, LEAGUE_COLUMNS, _build_league_match)


def attach_attendances(
    matches: list[MatchRecord],
    attendances: list[tuple[int, Attendance]],
) -> list[MatchRecord]:
    """Attach attendance rows to their matches.

    Rows referring to an unknown match are dropped with a warning.
    """
    by_id = {m.id: m for m in matches}
    orphaned = 0
    for match_id, attendance in attendances:
        match = by_id.get(match_id)
        if match is None:
            orphaned += 1
            continue
        match.attendances.append(attendance)
    if orphaned:
        log.warning("%d Anwesenheiten ohne bekanntes Spiel ignoriert", orphaned)
    return matches


def read_snapshot(directory: str | Path) -> tuple[list[PlayerRecord], list[MatchRecord]]:
    """Read players.csv, matches.csv and attendances.csv from a directory.

    Args:
        directory: Directory containing the snapshot files.

    Returns:
        (players, matches) with attendances attached to the matches.
    """
    directory = Path(directory)
    players = read_players(directory / SNAPSHOT_FILES['players'])
    matches = read_matches(directory / SNAPSHOT_FILES['matches'])
    attendances = read_attendances(directory / SNAPSHOT_FILES['attendances'])
    return players, attach_attendances(matches, attendances)
