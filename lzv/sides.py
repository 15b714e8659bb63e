"""Home/away resolution for scraped league matches."""

import logging

from lzv import LeagueMatch, MatchSide
from lzv.dates import timestamp_or_zero
from lzv.names import is_same_team, token_overlap_score

log = logging.getLogger(__name__)

MATCH_NAME_SEPARATOR = '-'
RECENT_FORM_LENGTH = 5


def resolve_side(team_name: str, home_team: str, away_team: str) -> MatchSide:
    """Decide which side of a match is the given team.

    Name equivalence decides first. If both sides match, HOME is returned.
    If neither matches, the side with the higher token overlap wins; equal
    overlap (including none at all) falls back to AWAY so that a weak match
    never produces a home attribution.

    Args:
        team_name: Our team name.
        home_team: Name of the home side as scraped.
        away_team: Name of the away side as scraped.

    Returns:
        MatchSide.HOME or MatchSide.AWAY.
    """
    matches_home = is_same_team(team_name, home_team)
    matches_away = is_same_team(team_name, away_team)

    if matches_home and not matches_away:
        return MatchSide.HOME
    if matches_away and not matches_home:
        return MatchSide.AWAY
    if matches_home and matches_away:
        log.debug("Beide Seiten passen zu %r, nehme HOME", team_name)
        return MatchSide.HOME

    home_score = token_overlap_score(team_name, home_team)
    away_score = token_overlap_score(team_name, away_team)
    if home_score > away_score:
        return MatchSide.HOME
    if home_score == away_score:
        log.debug(
            "Keine Zuordnung fuer %r in %r - %r, nehme AWAY",
            team_name, home_team, away_team,
        )
    return MatchSide.AWAY


def is_home_team(team_name: str, home_team: str, away_team: str) -> bool:
    """Shortcut for resolve_side(...) is MatchSide.HOME."""
    return resolve_side(team_name, home_team, away_team) is MatchSide.HOME


def split_match_name(name: str) -> tuple[str, str]:
    """Split a match display name into home and away team names.

    "Shotten FC - De Zwaluwen" gives ("Shotten FC", "De Zwaluwen"). A
    spaced separator is preferred so hyphenated club names stay intact;
    otherwise the first bare hyphen splits.

    Args:
        name: Match name as entered by the user.

    Returns:
        (home, away); away is empty if the name has no separator.
    """
    spaced = f' {MATCH_NAME_SEPARATOR} '
    if spaced in name:
        home, away = name.split(spaced, 1)
    elif MATCH_NAME_SEPARATOR in name:
        home, away = name.split(MATCH_NAME_SEPARATOR, 1)
    else:
        return name.strip(), ''
    return home.strip() or name.strip(), away.strip()


def opponent_name(team_name: str, match: LeagueMatch) -> str:
    """Return the name of the side that is not the given team."""
    if resolve_side(team_name, match.home_team, match.away_team) is MatchSide.HOME:
        return match.away_team
    return match.home_team


def team_match_result(team_name: str, match: LeagueMatch) -> str:
    """Result of a played match from the team's perspective.

    Returns:
        'W', 'L' or 'D'.
    """
    side = resolve_side(team_name, match.home_team, match.away_team)
    if side is MatchSide.HOME:
        team_score, opponent_score = match.home_score, match.away_score
    else:
        team_score, opponent_score = match.away_score, match.home_score

    if team_score > opponent_score:
        return 'W'
    if team_score < opponent_score:
        return 'L'
    return 'D'


def team_recent_form(
    team_name: str,
    matches: list[LeagueMatch],
    limit: int = RECENT_FORM_LENGTH,
) -> list[str]:
    """Results of the team's latest played matches, newest first.

    Args:
        team_name: Our team name.
        matches: Scraped league matches of the team.
        limit: Number of results to return.

    Returns:
        List of 'W' / 'L' / 'D'.
    """
    played = [m for m in matches if m.status == 'Played']
    played.sort(key=lambda m: timestamp_or_zero(m.date), reverse=True)
    return [team_match_result(team_name, m) for m in played[:limit]]
