"""Social credit scoring of players based on match attendance."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from lzv import AttendanceStatus, MatchRecord, PlayerRecord, ScoreEvent
from lzv.dates import parse_date, resolve_now

log = logging.getLogger(__name__)

BASE_SCORE = 1000

POINTS: dict[AttendanceStatus, int] = {
    AttendanceStatus.PRESENT: 50,
    AttendanceStatus.MAYBE: -20,
    AttendanceStatus.NOT_PRESENT: -50,
    AttendanceStatus.UNKNOWN: -100,   # ghosted
}

RECENT_FORM_LENGTH = 5


@dataclass(frozen=True)
class Rank:
    """A rank tier with its inclusive lower score bound."""

    name: str
    emoji: str
    min_score: int


# Descending; the first tier whose bound is reached wins
RANKS: tuple[Rank, ...] = (
    Rank('Club Legend', '👑', 1300),
    Rank('Ultra', '📢', 1100),
    Rank('Plastic Fan', '🤡', 1000),
    Rank('Bench Warmer', '🪵', 800),
    Rank('Casual', '🍺', 500),
    Rank('Professional Ghost', '👻', 0),
)


def get_rank(score: int) -> Rank:
    """Classify a score into its rank tier.

    Scores below the lowest bound (negative scores) get the last tier.
    """
    for rank in RANKS:
        if score >= rank.min_score:
            return rank
    return RANKS[-1]


@dataclass
class PlayerScore:
    """Result of scoring one player over all relevant matches."""

    final_score: int = BASE_SCORE
    present_count: int = 0
    maybe_count: int = 0
    not_present_count: int = 0
    ghost_count: int = 0
    relevant_match_count: int = 0
    recent_form: list[AttendanceStatus] = field(default_factory=list)
    events: list[ScoreEvent] = field(default_factory=list)   # newest first

    @property
    def rank(self) -> Rank:
        return get_rank(self.final_score)

    def breakdown(self) -> list[tuple[str, int, int]]:
        """Score calculation as (label, count, points) rows.

        The first row is the base score, followed by one row per status
        that occurred at least once.
        """
        rows = [('Base Score', 1, BASE_SCORE)]
        counts = (
            ('Present', self.present_count, AttendanceStatus.PRESENT),
            ('Maybe', self.maybe_count, AttendanceStatus.MAYBE),
            ('Not Present', self.not_present_count, AttendanceStatus.NOT_PRESENT),
            ('Ghosted', self.ghost_count, AttendanceStatus.UNKNOWN),
        )
        for label, count, status in counts:
            if count > 0:
                rows.append((label, count, count * POINTS[status]))
        return rows


@dataclass
class LeaderboardEntry:
    """A player together with their score."""

    player: PlayerRecord
    score: PlayerScore


@dataclass
class Highlights:
    """Notable players on a leaderboard."""

    top_scorer: Optional[PlayerRecord] = None
    most_ghosts: Optional[PlayerRecord] = None
    most_maybe: Optional[PlayerRecord] = None


def attendance_status(match: MatchRecord, player_id: int) -> AttendanceStatus:
    """Return the player's status for a match; UNKNOWN if there is no record."""
    for attendance in match.attendances:
        if attendance.player_id == player_id:
            return attendance.status
    return AttendanceStatus.UNKNOWN


def is_relevant_match(
    match: MatchRecord,
    player: PlayerRecord,
    now: datetime,
) -> bool:
    """Check whether a match counts towards a player's score.

    A match is relevant if it lies strictly in the past, belongs to one of
    the player's teams and at least one player was present. Matches with an
    unparseable date are never relevant.
    """
    match_date = parse_date(match.date)
    if match_date is None or match_date >= now:
        return False
    if match.team_id not in player.team_ids:
        return False
    return any(a.status is AttendanceStatus.PRESENT for a in match.attendances)


def relevant_matches(
    player: PlayerRecord,
    matches: list[MatchRecord],
    now: Optional[datetime] = None,
    newest_first: bool = False,
) -> list[tuple[datetime, MatchRecord]]:
    """Filter matches relevant to a player and sort them by date.

    Args:
        player: Player to filter for.
        matches: All matches.
        now: Evaluation time, defaults to the current UTC time.
        newest_first: Sort descending instead of ascending.

    Returns:
        List of (parsed date, match). Equal dates are ordered by match id,
        so newest_first is the exact reverse of the ascending order.
    """
    now = resolve_now(now)
    dated = [
        (parse_date(m.date), m) for m in matches if is_relevant_match(m, player, now)
    ]
    dated.sort(key=lambda item: (item[0], item[1].id), reverse=newest_first)
    return dated


def calculate_player_score(
    player: PlayerRecord,
    matches: list[MatchRecord],
    now: Optional[datetime] = None,
) -> PlayerScore:
    """Calculate the social credit score of a player.

    Starts at BASE_SCORE and applies one POINTS delta per relevant match.
    A relevant match without an attendance record for the player counts as
    ghosted.

    Args:
        player: Player to score.
        matches: All matches (a stable snapshot).
        now: Evaluation time, defaults to the current UTC time.

    Returns:
        PlayerScore; baseline values if no match is relevant.
    """
    result = PlayerScore()

    for match_date, match in relevant_matches(player, matches, now, newest_first=True):
        status = attendance_status(match, player.id)
        points = POINTS[status]

        if status is AttendanceStatus.PRESENT:
            result.present_count += 1
        elif status is AttendanceStatus.MAYBE:
            result.maybe_count += 1
        elif status is AttendanceStatus.NOT_PRESENT:
            result.not_present_count += 1
        else:
            result.ghost_count += 1

        result.final_score += points
        result.events.append(ScoreEvent(
            match_id=match.id,
            match_name=match.name,
            date=match_date,
            status=status,
            points=points,
        ))

    result.relevant_match_count = len(result.events)
    result.recent_form = [e.status for e in result.events[:RECENT_FORM_LENGTH]]

    log.debug(
        "Spieler %s: %d Punkte aus %d Spielen",
        player.name, result.final_score, result.relevant_match_count,
    )
    return result


def build_leaderboard(
    players: list[PlayerRecord],
    matches: list[MatchRecord],
    now: Optional[datetime] = None,
) -> list[LeaderboardEntry]:
    """Score all players and sort them by score, highest first.

    Players with equal scores keep their input order.
    """
    now = resolve_now(now)
    entries = [
        LeaderboardEntry(player=p, score=calculate_player_score(p, matches, now))
        for p in players
    ]
    entries.sort(key=lambda e: e.score.final_score, reverse=True)
    log.info("Rangliste berechnet: %d Spieler", len(entries))
    return entries


def find_highlights(leaderboard: list[LeaderboardEntry]) -> Highlights:
    """Pick the top scorer and the players with the most ghosts and maybes.

    On equal counts the later entry on the leaderboard wins.
    """
    if not leaderboard:
        return Highlights()

    most_ghosts = leaderboard[0]
    most_maybe = leaderboard[0]
    for entry in leaderboard[1:]:
        if entry.score.ghost_count >= most_ghosts.score.ghost_count:
            most_ghosts = entry
        if entry.score.maybe_count >= most_maybe.score.maybe_count:
            most_maybe = entry

    return Highlights(
        top_scorer=leaderboard[0].player,
        most_ghosts=most_ghosts.player,
        most_maybe=most_maybe.player,
    )
