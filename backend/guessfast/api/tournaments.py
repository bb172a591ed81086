from flask import Blueprint, jsonify, request
from guessfast.errors import InvalidRequest
from guessfast.services.wordle.tournaments import (
    create_tournament,
    close_tournament,
    get_tournament,
    join_tournament,
    list_open_tournaments,
    tournament_leaderboard,
)
from guessfast.socketio_events import emit_leaderboard_update


tournaments = Blueprint('tournaments', __name__)


@tournaments.route('/tournaments', methods=['GET'])
def list_tournaments():
    return jsonify([t.to_dict() for t in list_open_tournaments()])


@tournaments.route('/tournaments', methods=['POST'])
def register_tournament():
    """Record a tournament that was created on-chain."""
    data = request.get_json(silent=True) or {}
    tournament = create_tournament(
        data.get('id'),
        data.get('entryFee', data.get('entry_fee')),
        data.get('endTime', data.get('end_time')),
    )
    return jsonify({'success': True, 'tournament': tournament.to_dict()}), 201


@tournaments.route('/tournaments/<string:tournament_id>', methods=['GET'])
def get_tournament_state(tournament_id):
    return jsonify(get_tournament(tournament_id).to_dict())


@tournaments.route('/tournaments/<string:tournament_id>/close', methods=['POST'])
def close(tournament_id):
    return jsonify(close_tournament(tournament_id).to_dict())


@tournaments.route('/tournaments/<string:tournament_id>/join', methods=['POST'])
def join(tournament_id):
    data = request.get_json(silent=True) or {}
    player = data.get('player') or data.get('walletAddress')
    if not player or not isinstance(player, str):
        raise InvalidRequest('Wallet address required')
    participant, created = join_tournament(tournament_id, player)
    if created:
        emit_leaderboard_update(participant.tournament_id)
    return jsonify({'success': True, 'created': created, 'participant': participant.to_dict()})


@tournaments.route('/tournaments/<string:tournament_id>/leaderboard', methods=['GET'])
def leaderboard(tournament_id):
    rows = tournament_leaderboard(tournament_id)
    return jsonify([p.to_dict() for p in rows])
