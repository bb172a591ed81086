from flask import Blueprint, jsonify, request, current_app
from guessfast.errors import InvalidRequest
from guessfast.models import RUN_WON
from guessfast.services.wordle.keyboard import keyboard_for
from guessfast.services.wordle.runs import start_run, submit_guess, finalize_run, get_run
from guessfast.services.wordle.tournaments import global_leaderboard, player_profile
from guessfast.services.wordle.words import is_known_word
from guessfast.socketio_events import emit_leaderboard_update


runs = Blueprint('runs', __name__)


def _player_from(data):
    # The web client sends walletAddress; accept both spellings
    player = data.get('player') or data.get('walletAddress')
    if not player or not isinstance(player, str):
        raise InvalidRequest('Wallet address required')
    return player


def _notify_finished(run, improved):
    if run.status != RUN_WON:
        return
    emit_leaderboard_update()
    if improved:
        emit_leaderboard_update(run.tournament_id)


@runs.route('/runs', methods=['POST'])
def create_run():
    data = request.get_json(silent=True) or {}
    player = _player_from(data)
    tournament_id = data.get('tournamentId', data.get('tournament_id'))
    run = start_run(player, tournament_id if tournament_id not in (None, '') else None)
    payload = {'runId': run.id, 'startTime': run.start_time}
    if current_app.config.get('EXPOSE_SECRET_WORD', True):
        payload['secretWord'] = run.secret_word
    return jsonify(payload), 201


@runs.route('/runs/<int:run_id>', methods=['GET'])
def get_run_state(run_id):
    run = get_run(run_id)
    payload = run.to_dict()
    if run.is_terminal:
        payload['keyboard'] = keyboard_for(run.guess_list, run.secret_word)
    return jsonify(payload)


@runs.route('/runs/<int:run_id>/guess', methods=['POST'])
def guess(run_id):
    data = request.get_json(silent=True) or {}
    word = data.get('guess')
    if not isinstance(word, str):
        raise InvalidRequest('guess is required')
    run, statuses, improved = submit_guess(run_id, word)
    payload = {
        'guess': word.upper(),
        'statuses': statuses,
        'status': run.status,
        'guesses': run.guess_list,
        'keyboard': keyboard_for(run.guess_list, run.secret_word),
        'knownWord': is_known_word(word),
    }
    if run.is_terminal:
        payload['secretWord'] = run.secret_word
        payload['timeMs'] = run.time_ms
        _notify_finished(run, improved)
    return jsonify(payload)


@runs.route('/runs/<int:run_id>/submit', methods=['POST'])
def submit(run_id):
    data = request.get_json(silent=True) or {}
    success = data.get('success')
    if success is not None and not isinstance(success, bool):
        raise InvalidRequest('success must be a boolean')
    run, time_ms, improved = finalize_run(run_id, success=success, attempts=data.get('attempts'))
    _notify_finished(run, improved)
    return jsonify({'success': True, 'status': run.status, 'timeMs': time_ms})


@runs.route('/leaderboard', methods=['GET'])
def leaderboard():
    rows = global_leaderboard()
    return jsonify([
        {
            'run_id': r.id,
            'wallet_address': r.player,
            'player': r.player,
            'time_ms': r.time_ms,
            'attempts': r.attempts,
            'start_time': r.start_time,
            'created_at': r.created_at,
        }
        for r in rows
    ])


@runs.route('/profile/<string:player>', methods=['GET'])
def profile(player):
    return jsonify(player_profile(player))
