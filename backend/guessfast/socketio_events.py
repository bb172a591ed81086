from flask_socketio import join_room, leave_room, emit
from guessfast import socketio

GLOBAL_ROOM = 'leaderboard:global'


def _room_for(data):
    tournament_id = (data or {}).get('tournament_id')
    if tournament_id in (None, ''):
        return GLOBAL_ROOM
    return f"tournament:{tournament_id}"


def emit_leaderboard_update(tournament_id=None) -> None:
    """Tell watching clients to refetch a leaderboard.

    With no tournament id the global leaderboard room is notified.
    """
    room = GLOBAL_ROOM if tournament_id is None else f"tournament:{tournament_id}"
    socketio.emit(
        'leaderboard_update',
        {'tournament_id': tournament_id},
        to=room,
        namespace='/ws',
    )


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_join_leaderboard(data):
    room = _room_for(data)
    join_room(room)
    emit('joined', {'room': room})


def handle_leave_leaderboard(data):
    room = _room_for(data)
    leave_room(room)
    emit('left', {'room': room})


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    namespaces = ['/ws', '/'] if testing else ['/ws']
    for namespace in namespaces:
        socketio.on_event('connect', handle_connect, namespace=namespace)
        socketio.on_event('join_leaderboard', handle_join_leaderboard, namespace=namespace)
        socketio.on_event('leave_leaderboard', handle_leave_leaderboard, namespace=namespace)
        socketio.on_event('ping', handle_ping, namespace=namespace)
