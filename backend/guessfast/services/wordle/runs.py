import threading
from contextlib import contextmanager
from typing import List, Optional, Tuple

from flask import current_app
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError

from guessfast import db
from guessfast.errors import InvalidRequest, RunNotFound, RunTerminated, StoreUnavailable
from guessfast.models import RUN_ACTIVE, RUN_LOST, RUN_WON, Run, normalize_player
from . import MAX_GUESSES, now_ms
from .evaluator import check_length, evaluate
from .scoring import compute_score, record_if_better
from .store import transaction
from .tournaments import require_open_tournament
from .words import random_word

# Striped per-run locks: guesses and finalization for one run never interleave
# within a process. The row lock taken in _load_run covers multiple workers.
_RUN_LOCK_STRIPES = [threading.RLock() for _ in range(64)]


@contextmanager
def run_lock(run_id: int):
    lock = _RUN_LOCK_STRIPES[int(run_id) % len(_RUN_LOCK_STRIPES)]
    with lock:
        yield


def apply_guess(run: Run, guess: str) -> List[str]:
    """Advance the run's state machine by one guess and return its evaluation.

    Validation happens before anything is touched. Every accepted guess is
    appended to the transcript; a match wins, the sixth miss loses.
    """
    guess = check_length(guess)
    if run.status != RUN_ACTIVE:
        raise RunTerminated()
    guesses = run.guess_list + [guess]
    run.guess_list = guesses
    if guess == run.secret_word.upper():
        run.status = RUN_WON
    elif len(guesses) >= MAX_GUESSES:
        run.status = RUN_LOST
    return evaluate(guess, run.secret_word)


def _load_run(run_id) -> Run:
    try:
        run = Run.query.filter_by(id=int(run_id)).with_for_update().first()
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StoreUnavailable() from exc
    if run is None:
        raise RunNotFound()
    return run


def get_run(run_id) -> Run:
    try:
        run = db.session.get(Run, int(run_id))
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StoreUnavailable() from exc
    if run is None:
        raise RunNotFound()
    return run


def start_run(player: str, tournament_id=None, now: Optional[int] = None) -> Run:
    """Open a new run with a random secret word.

    Inside a tournament the run is only created while the tournament is open
    and ``now`` is strictly before its end time.
    """
    if not player or not isinstance(player, str):
        raise InvalidRequest('Wallet address required')
    now = now_ms() if now is None else now
    tournament = None
    if tournament_id is not None:
        tournament = require_open_tournament(tournament_id, now)
    secret = random_word()
    run = Run(
        player=normalize_player(player),
        secret_word=secret,
        start_time=now,
        status=RUN_ACTIVE,
        tournament_id=tournament.id if tournament else None,
    )
    with transaction('run-start'):
        db.session.add(run)
    current_app.logger.info(
        f"[run-start] run={run.id} player={run.player} tournament={run.tournament_id}"
    )
    return run


def _finalize(run: Run, now: int) -> Tuple[int, bool]:
    """Stamp end_time once and score tournament wins. Caller holds the run lock and commits.

    The end_time write is conditional so a second finalization, even from
    another worker, fails instead of re-scoring.
    """
    result = db.session.execute(
        update(Run)
        .where(Run.id == run.id, Run.end_time.is_(None))
        .values(end_time=now)
    )
    if result.rowcount != 1:
        raise RunTerminated()
    elapsed = max(0, now - run.start_time)
    improved = False
    if run.status == RUN_WON and run.tournament_id:
        improved = record_if_better(run.tournament_id, run.player, run.attempts, elapsed, commit=False)
        current_app.logger.info(
            f"[run-finalize] run={run.id} tournament={run.tournament_id} player={run.player} "
            f"score={compute_score(run.attempts, elapsed)} improved={improved}"
        )
    else:
        current_app.logger.info(f"[run-finalize] run={run.id} status={run.status} time_ms={elapsed}")
    return elapsed, improved


def submit_guess(run_id, guess: str, now: Optional[int] = None) -> Tuple[Run, List[str], bool]:
    """Apply one guess; finalize in the same transaction when it ends the run.

    Returns (run, statuses, improved) where *improved* reports whether a
    tournament best score changed.
    """
    now = now_ms() if now is None else now
    with run_lock(run_id):
        with transaction('run-guess'):
            run = _load_run(run_id)
            if run.is_finalized:
                raise RunTerminated()
            statuses = apply_guess(run, guess)
            improved = False
            if run.is_terminal:
                run.attempts = len(run.guess_list)
                _, improved = _finalize(run, now)
    return run, statuses, improved


def finalize_run(run_id, success=None, attempts=None, now: Optional[int] = None) -> Tuple[Run, int, bool]:
    """Close out a run from a client-reported result.

    For a run the client played locally, ``success`` decides won/lost and
    ``attempts`` is taken as reported. A run already driven to a terminal
    state by server-side guesses keeps its own outcome.
    Returns (run, time_ms, improved).
    """
    now = now_ms() if now is None else now
    if attempts is not None and (isinstance(attempts, bool) or not isinstance(attempts, int)
                                 or attempts < 0 or attempts > MAX_GUESSES):
        raise InvalidRequest(f'attempts must be an integer between 0 and {MAX_GUESSES}')
    with run_lock(run_id):
        with transaction('run-submit'):
            run = _load_run(run_id)
            if run.is_finalized:
                raise RunTerminated()
            if run.status == RUN_ACTIVE:
                if success is None:
                    raise InvalidRequest('success is required')
                reported = len(run.guess_list) if attempts is None else attempts
                if success and reported < 1:
                    raise InvalidRequest('A won run needs at least one attempt')
                run.status = RUN_WON if success else RUN_LOST
                run.attempts = reported
            else:
                run.attempts = len(run.guess_list)
            elapsed, improved = _finalize(run, now)
    return run, elapsed, improved
