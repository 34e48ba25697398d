from flask import current_app
from flask_socketio import join_room, leave_room, emit
from teamroom import socketio

# Broadcast group every watching client joins
ROOM_CHANNEL = 'room'


def _room_manager():
    return current_app.extensions['room_manager']


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})
    emit('room_state', _room_manager().snapshot())


def handle_watch_room(data=None):
    join_room(ROOM_CHANNEL)
    emit('joined', {'room': ROOM_CHANNEL})
    emit('room_state', _room_manager().snapshot())


def handle_unwatch_room(data=None):
    leave_room(ROOM_CHANNEL)
    emit('left', {'room': ROOM_CHANNEL})


def handle_ping(data):
    emit('pong', data or {})


def broadcast_room_state(state: dict) -> None:
    """Push a room snapshot to every watcher.

    Uses socketio.emit since this is called from request handlers and from
    the reset timer's background task alike.
    """
    socketio.emit('room_state', state, to=ROOM_CHANNEL, namespace='/ws')


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    namespaces = ['/ws', '/'] if testing else ['/ws']
    for namespace in namespaces:
        socketio.on_event('connect', handle_connect, namespace=namespace)
        socketio.on_event('watch_room', handle_watch_room, namespace=namespace)
        socketio.on_event('unwatch_room', handle_unwatch_room, namespace=namespace)
        socketio.on_event('ping', handle_ping, namespace=namespace)
