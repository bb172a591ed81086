from flask import current_app
from sqlalchemy import update

from guessfast import db
from guessfast.models import Participant, normalize_player
from .store import transaction

BASE_SCORE = 10000
ATTEMPT_PENALTY = 100


def compute_score(attempts: int, elapsed_ms: int) -> int:
    """10000 - 100 per attempt - 1 per whole second. Not clamped; may go negative."""
    return BASE_SCORE - attempts * ATTEMPT_PENALTY - elapsed_ms // 1000


def record_if_better(tournament_id: str, player: str, attempts: int, elapsed_ms: int, commit: bool = True) -> bool:
    """Store the run's score for the participant only if it beats the stored one.

    Issued as a single conditional UPDATE so concurrent finalizations cannot
    replace a better score with a worse one. Ties keep the earlier record.
    Returns True when a row changed.
    """
    score = compute_score(attempts, elapsed_ms)
    player = normalize_player(player)
    stmt = (
        update(Participant)
        .where(
            Participant.tournament_id == tournament_id,
            Participant.player == player,
            Participant.score < score,
        )
        .values(score=score, attempts=attempts, time_ms=elapsed_ms)
    )
    if commit:
        with transaction('score-update'):
            result = db.session.execute(stmt)
    else:
        result = db.session.execute(stmt)
    updated = result.rowcount > 0
    current_app.logger.info(
        f"[score-update] tournament={tournament_id} player={player} score={score} "
        f"attempts={attempts} time_ms={elapsed_ms} updated={updated}"
    )
    return updated
