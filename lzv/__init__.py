"""Core module for lzv-stats."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Union

# Raw date as delivered by the data layer: ISO string, epoch millis or datetime
RawDate = Union[str, int, float, datetime, None]


class MatchSide(str, Enum):
    """Which named side of a match corresponds to a given team."""

    HOME = 'HOME'
    AWAY = 'AWAY'


class AttendanceStatus(str, Enum):
    """Attendance response of a player for a match.

    UNKNOWN is never stored; it stands for a missing attendance record.
    """

    PRESENT = 'Present'
    MAYBE = 'Maybe'
    NOT_PRESENT = 'NotPresent'
    UNKNOWN = 'Unknown'


@dataclass(frozen=True)
class Attendance:
    """A single attendance record of a player for a match."""

    player_id: int
    status: AttendanceStatus


@dataclass
class MatchRecord:
    """Internal match entry of one of our own teams."""

    id: int
    name: str             # "Home Team - Away Team"
    date: RawDate
    team_id: int
    attendances: list[Attendance] = field(default_factory=list)


@dataclass
class PlayerRecord:
    """Represents a squad member."""

    id: int
    name: str
    team_ids: list[int] = field(default_factory=list)


@dataclass
class LeagueMatch:
    """Match result as scraped from the league website."""

    date: RawDate
    home_team: str
    away_team: str
    home_score: int = 0
    away_score: int = 0
    status: str = 'Scheduled'   # Scheduled, Played, Postponed
    external_id: Optional[str] = None


@dataclass(frozen=True)
class ScoreEvent:
    """Score contribution of one relevant match for one player."""

    match_id: int
    match_name: str
    date: datetime
    status: AttendanceStatus   # UNKNOWN means ghosted
    points: int


@dataclass(frozen=True)
class ScoreHistoryPoint:
    """Running score after a match, for trend display."""

    index: int       # 0 is the synthetic start point
    score: int
    delta: int
    label: str
    match_id: Optional[int] = None
    status: Optional[AttendanceStatus] = None
