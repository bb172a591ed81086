from typing import List, Optional, Tuple

from flask import current_app
from sqlalchemy import case, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from guessfast import db
from guessfast.errors import (
    InvalidRequest,
    StoreUnavailable,
    TournamentClosed,
    TournamentExists,
    TournamentNotFound,
)
from guessfast.models import RUN_WON, Participant, Run, Tournament, normalize_player
from . import now_ms
from .store import transaction


def parse_entry_fee(value) -> str:
    """Normalize an entry fee to a decimal integer string.

    Accepts ints and digit strings. Floats are refused so wei-scale amounts
    never pass through a lossy type.
    """
    if isinstance(value, bool) or value is None:
        raise InvalidRequest('entryFee must be a non-negative integer')
    if isinstance(value, int):
        amount = value
    elif isinstance(value, str) and value.strip().isdecimal():
        amount = int(value.strip())
    else:
        raise InvalidRequest('entryFee must be a non-negative integer')
    if amount < 0:
        raise InvalidRequest('entryFee must be a non-negative integer')
    return str(amount)


def get_tournament(tournament_id) -> Tournament:
    try:
        tournament = db.session.get(Tournament, str(tournament_id))
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StoreUnavailable() from exc
    if tournament is None:
        raise TournamentNotFound()
    return tournament


def require_open_tournament(tournament_id, now: Optional[int] = None) -> Tournament:
    """Return the tournament if it still accepts entries at *now* (epoch ms)."""
    now = now_ms() if now is None else now
    tournament = get_tournament(tournament_id)
    if not tournament.accepts_entries(now):
        current_app.logger.info(
            f"[tournament-closed] tournament={tournament.id} now={now} end_time={tournament.end_time} is_open={tournament.is_open}"
        )
        raise TournamentClosed()
    return tournament


def create_tournament(tournament_id, entry_fee, end_time) -> Tournament:
    if tournament_id is None or str(tournament_id).strip() == '':
        raise InvalidRequest('id is required')
    if isinstance(end_time, bool) or not isinstance(end_time, int):
        raise InvalidRequest('endTime must be an integer timestamp in milliseconds')
    fee = parse_entry_fee(entry_fee)
    tournament = Tournament(id=str(tournament_id).strip(), entry_fee=fee, end_time=end_time, is_open=True)
    try:
        db.session.add(tournament)
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        raise TournamentExists() from exc
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.exception("[tournament-create] store failure")
        raise StoreUnavailable() from exc
    current_app.logger.info(f"[tournament-create] tournament={tournament.id} entry_fee={fee} end_time={end_time}")
    return tournament


def close_tournament(tournament_id) -> Tournament:
    with transaction('tournament-close'):
        tournament = get_tournament(tournament_id)
        tournament.is_open = False
    current_app.logger.info(f"[tournament-close] tournament={tournament.id}")
    return tournament


def list_open_tournaments() -> List[Tournament]:
    try:
        return (
            Tournament.query.filter_by(is_open=True)
            .order_by(Tournament.end_time.desc())
            .all()
        )
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StoreUnavailable() from exc


def join_tournament(tournament_id, player: str, now: Optional[int] = None) -> Tuple[Participant, bool]:
    """Register *player* in the tournament. Returns (participant, created).

    Joining again is a no-op. Payment is confirmed on-chain before the client
    calls this; nothing here checks it.
    """
    player = normalize_player(player)
    tournament = require_open_tournament(tournament_id, now)
    key = (tournament.id, player)
    try:
        existing = db.session.get(Participant, key)
        if existing is not None:
            return existing, False
        participant = Participant(tournament_id=tournament.id, player=player, score=0, attempts=0, time_ms=0)
        db.session.add(participant)
        db.session.commit()
    except IntegrityError:
        # A concurrent join inserted the row first
        db.session.rollback()
        return db.session.get(Participant, key), False
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.exception("[tournament-join] store failure")
        raise StoreUnavailable() from exc
    current_app.logger.info(f"[tournament-join] tournament={tournament.id} player={player}")
    return participant, True


def tournament_leaderboard(tournament_id) -> List[Participant]:
    """Participants ranked by best score, highest first."""
    tournament = get_tournament(tournament_id)
    try:
        return (
            Participant.query.filter_by(tournament_id=tournament.id)
            .order_by(Participant.score.desc(), Participant.time_ms.asc(), Participant.player.asc())
            .all()
        )
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StoreUnavailable() from exc


def global_leaderboard(limit: Optional[int] = None) -> List[Run]:
    """Won runs, fastest first, fewer attempts breaking ties."""
    if limit is None:
        limit = int(current_app.config.get('LEADERBOARD_LIMIT', 50))
    elapsed = Run.end_time - Run.start_time
    try:
        return (
            Run.query.filter(Run.status == RUN_WON, Run.end_time.isnot(None))
            .order_by(elapsed.asc(), Run.attempts.asc(), Run.id.asc())
            .limit(limit)
            .all()
        )
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StoreUnavailable() from exc


def player_profile(player: str) -> dict:
    player = normalize_player(player)
    try:
        played, won = db.session.query(
            func.count(Run.id),
            func.coalesce(func.sum(case((Run.status == RUN_WON, 1), else_=0)), 0),
        ).filter(Run.player == player).one()
        rows = (
            db.session.query(Participant, Tournament)
            .join(Tournament, Participant.tournament_id == Tournament.id)
            .filter(Participant.player == player)
            .order_by(Tournament.end_time.desc())
            .all()
        )
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StoreUnavailable() from exc
    return {
        'player': player,
        'stats': {'gamesPlayed': int(played or 0), 'gamesWon': int(won or 0)},
        'tournaments': [
            {
                'id': t.id,
                'entry_fee': t.entry_fee,
                'end_time': t.end_time,
                'score': p.score,
                'attempts': p.attempts,
                'time_ms': p.time_ms,
            }
            for p, t in rows
        ],
    }


def delete_all_tournaments() -> int:
    with transaction('clean-tournaments'):
        Participant.query.delete()
        deleted = Tournament.query.delete()
    current_app.logger.info(f"[clean-tournaments] deleted={deleted}")
    return deleted


def close_expired_tournaments(now: Optional[int] = None) -> int:
    now = now_ms() if now is None else now
    with transaction('close-expired'):
        closed = (
            Tournament.query.filter(Tournament.is_open.is_(True), Tournament.end_time <= now)
            .update({Tournament.is_open: False}, synchronize_session=False)
        )
    current_app.logger.info(f"[close-expired] closed={closed} now={now}")
    return closed
