from flask import Blueprint, jsonify, request, current_app
from tankbot.commands import handle_message
from tankbot.services.game import actions
from tankbot.services.game.errors import (
    GameError,
    SessionAlreadyInitialized,
    SessionNotInitialized,
)
from tankbot.socketio_events import broadcast_state


game = Blueprint('game', __name__)


@game.errorhandler(GameError)
def handle_game_error(exc: GameError):
    status = 404 if isinstance(exc, SessionNotInitialized) else 400
    return jsonify(exc.to_dict()), status


def _manager():
    return current_app.extensions['tankbot']


def _get_session(channel_id: str):
    session = _manager().get(channel_id)
    if session is None:
        raise SessionNotInitialized()
    return session


def _missing(data: dict, *fields):
    missing = [f for f in fields if data.get(f) in (None, '')]
    if missing:
        return jsonify({'error': f"{', '.join(missing)} required"}), 400
    return None


@game.route('/create', methods=['POST'])
def create_session(channel_id):
    session = _manager().get_or_create(channel_id)
    if not session.create():
        raise SessionAlreadyInitialized()
    current_app.logger.info(f"[create] channel={channel_id}")
    broadcast_state(channel_id)
    return jsonify(session.snapshot()), 201


@game.route('/reset', methods=['POST'])
def reset_session(channel_id):
    session = _manager().get_or_create(channel_id)
    session.reset()
    current_app.logger.info(f"[reset] channel={channel_id}")
    broadcast_state(channel_id)
    return jsonify(session.snapshot())


@game.route('/destroy', methods=['POST'])
def destroy_session(channel_id):
    session = _get_session(channel_id)
    if not session.destroy():
        raise SessionNotInitialized()
    current_app.logger.info(f"[destroy] channel={channel_id}")
    broadcast_state(channel_id)
    return jsonify({'message': 'The game has been destroyed.'})


@game.route('/start', methods=['POST'])
def start_session(channel_id):
    session = _get_session(channel_id)
    with session.lock:
        session.check_can_start()
        session.start()
    current_app.logger.info(f"[start] channel={channel_id} players={len(session.players)}")
    broadcast_state(channel_id)
    return jsonify(session.snapshot())


@game.route('/state', methods=['GET'])
def get_state(channel_id):
    session = _get_session(channel_id)
    return jsonify(session.snapshot())


@game.route('/join', methods=['POST'])
def join(channel_id):
    data = request.get_json(silent=True) or {}
    error = _missing(data, 'participant_id', 'name')
    if error:
        return error
    session = _get_session(channel_id)
    player = actions.join(session, str(data['participant_id']), str(data['name']))
    broadcast_state(channel_id)
    return jsonify(player.to_dict()), 201


@game.route('/leave', methods=['POST'])
def leave(channel_id):
    data = request.get_json(silent=True) or {}
    error = _missing(data, 'participant_id')
    if error:
        return error
    session = _get_session(channel_id)
    player = actions.leave(session, str(data['participant_id']))
    broadcast_state(channel_id)
    return jsonify(player.to_dict())


@game.route('/move', methods=['POST'])
def move(channel_id):
    data = request.get_json(silent=True) or {}
    error = _missing(data, 'participant_id', 'tile')
    if error:
        return error
    session = _get_session(channel_id)
    actions.move(session, str(data['participant_id']), str(data['tile']))
    broadcast_state(channel_id)
    return jsonify(session.snapshot())


@game.route('/attack', methods=['POST'])
def attack(channel_id):
    data = request.get_json(silent=True) or {}
    error = _missing(data, 'participant_id', 'tile')
    if error:
        return error
    session = _get_session(channel_id)
    result = actions.attack(session, str(data['participant_id']), str(data['tile']), data.get('times'))
    if result.won:
        current_app.logger.info(f"[game-over] channel={channel_id} winner={result.winner.id}")
    broadcast_state(channel_id)
    return jsonify(result.to_dict())


@game.route('/pass', methods=['POST'])
def transfer(channel_id):
    data = request.get_json(silent=True) or {}
    error = _missing(data, 'participant_id', 'tile')
    if error:
        return error
    session = _get_session(channel_id)
    actions.transfer(session, str(data['participant_id']), str(data['tile']), data.get('times'))
    broadcast_state(channel_id)
    return jsonify(session.snapshot())


@game.route('/vote', methods=['POST'])
def vote(channel_id):
    data = request.get_json(silent=True) or {}
    error = _missing(data, 'participant_id', 'target')
    if error:
        return error
    session = _get_session(channel_id)
    actions.vote(session, str(data['participant_id']), str(data['target']))
    broadcast_state(channel_id)
    return jsonify({'message': 'Your vote has been counted.'})


@game.route('/command', methods=['POST'])
def command(channel_id):
    """Run a raw chat message (``!game move c14``) on behalf of a participant."""
    data = request.get_json(silent=True) or {}
    error = _missing(data, 'participant_id', 'content')
    if error:
        return error
    prefix = current_app.config.get('COMMAND_PREFIX', '!game')
    reply = handle_message(_manager(), channel_id, str(data['participant_id']), str(data['content']), prefix)
    if reply is None:
        return jsonify({'reply': None})
    if reply.changed:
        broadcast_state(channel_id)
    return jsonify({'reply': reply.text, 'error': reply.error})
