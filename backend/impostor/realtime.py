from flask import current_app
from flask_socketio import join_room, leave_room, emit
from impostor import socketio
from impostor.services.snapshots import build_snapshot

NAMESPACE = '/ws'


def room_channel(room_id) -> str:
    return f"room:{room_id}"


def broadcast_state(room_id) -> None:
    """Push the latest snapshot of a room to every subscriber."""
    snapshot = build_snapshot(room_id)
    if snapshot is None:
        broadcast_room_closed(room_id)
        return
    socketio.emit('state_update', snapshot, to=room_channel(room_id), namespace=NAMESPACE)
    current_app.logger.debug(f"[broadcast] room={room_id} version={snapshot['version']} phase={snapshot['phase']}")


def broadcast_room_closed(room_id) -> None:
    socketio.emit('room_closed', {'room_id': room_id}, to=room_channel(room_id), namespace=NAMESPACE)


def _room_id_from(data):
    try:
        return int((data or {}).get('room_id'))
    except (TypeError, ValueError):
        return None


def handle_connect():
    emit('connected', {'message': f'Connected to {NAMESPACE}'})


def handle_subscribe(data):
    room_id = _room_id_from(data)
    if room_id is None:
        emit('error', {'message': 'room_id is required'})
        return
    snapshot = build_snapshot(room_id)
    if snapshot is None:
        emit('error', {'message': 'Room not found', 'room_id': room_id})
        return
    join_room(room_channel(room_id))
    emit('subscribed', {'room': room_channel(room_id)})
    # New subscribers start from the current state instead of waiting for a change
    emit('state_update', snapshot)


def handle_unsubscribe(data):
    room_id = _room_id_from(data)
    if room_id is None:
        emit('error', {'message': 'room_id is required'})
        return
    leave_room(room_channel(room_id))
    emit('unsubscribed', {'room': room_channel(room_id)})


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on namespace '/ws'."""
    socketio.on_event('connect', handle_connect, namespace=NAMESPACE)
    socketio.on_event('subscribe', handle_subscribe, namespace=NAMESPACE)
    socketio.on_event('unsubscribe', handle_unsubscribe, namespace=NAMESPACE)
    socketio.on_event('ping', handle_ping, namespace=NAMESPACE)
