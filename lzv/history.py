"""Replay of a player's score over time for trend display."""

import logging
from datetime import datetime
from typing import Optional

from lzv import MatchRecord, PlayerRecord, ScoreHistoryPoint
from lzv.scoring import BASE_SCORE, POINTS, attendance_status, relevant_matches

log = logging.getLogger(__name__)

START_LABEL = 'Start'


def build_score_history(
    player: PlayerRecord,
    matches: list[MatchRecord],
    now: Optional[datetime] = None,
) -> list[ScoreHistoryPoint]:
    """Reconstruct the player's running score, oldest match first.

    Point 0 is a synthetic start at BASE_SCORE. Every relevant match adds
    one point whose score is the previous score plus its delta.

    Args:
        player: Player to replay.
        matches: All matches (a stable snapshot).
        now: Evaluation time, defaults to the current UTC time.

    Returns:
        List of ScoreHistoryPoint, at least the start point.
    """
    score = BASE_SCORE
    history = [ScoreHistoryPoint(index=0, score=score, delta=0, label=START_LABEL)]

    for index, (_, match) in enumerate(relevant_matches(player, matches, now), start=1):
        status = attendance_status(match, player.id)
        delta = POINTS[status]
        score += delta
        history.append(ScoreHistoryPoint(
            index=index,
            score=score,
            delta=delta,
            label=match.name,
            match_id=match.id,
            status=status,
        ))

    log.debug("Verlauf fuer %s: %d Punkte", player.name, len(history))
    return history
