from flask_socketio import join_room, leave_room, emit
from tankbot import socketio
from tankbot.models import TickReport
from tankbot.services.game.scheduler import DAWN_MESSAGE


def room_for(channel_id: str) -> str:
    return f"channel:{channel_id}"


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_join_channel(data):
    channel_id = (data or {}).get('channel_id')
    if not channel_id:
        emit('error', {'message': 'channel_id is required'})
        return
    room = room_for(channel_id)
    join_room(room)
    emit('joined', {'room': room})


def handle_leave_channel(data):
    channel_id = (data or {}).get('channel_id')
    if not channel_id:
        emit('error', {'message': 'channel_id is required'})
        return
    room = room_for(channel_id)
    leave_room(room)
    emit('left', {'room': room})


def handle_ping(data):
    emit('pong', data or {})


# ---- Server-initiated broadcasts ----

def broadcast_state(channel_id: str) -> None:
    # Use socketio.emit since this may be called from a background task
    socketio.emit('state_update', {'channel_id': channel_id}, to=room_for(channel_id), namespace='/ws')


def broadcast_tick(session, report: TickReport) -> None:
    socketio.emit(
        'tick',
        {'channel_id': session.channel_id, 'message': DAWN_MESSAGE, 'bonuses': dict(report.bonuses)},
        to=room_for(session.channel_id),
        namespace='/ws',
    )
    broadcast_state(session.channel_id)


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    socketio.on_event('connect', handle_connect, namespace='/ws')
    socketio.on_event('join_channel', handle_join_channel, namespace='/ws')
    socketio.on_event('leave_channel', handle_leave_channel, namespace='/ws')
    socketio.on_event('ping', handle_ping, namespace='/ws')

    if testing:
        # Test-only mirror on default namespace
        socketio.on_event('connect', handle_connect, namespace='/')
        socketio.on_event('join_channel', handle_join_channel, namespace='/')
        socketio.on_event('leave_channel', handle_leave_channel, namespace='/')
        socketio.on_event('ping', handle_ping, namespace='/')
