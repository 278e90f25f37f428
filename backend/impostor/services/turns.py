"""Turn order and per-round responses."""
from flask import current_app

from impostor import db
from impostor.errors import NotYourTurn
from impostor.models import Room, Response, utcnow
from .phases import require_phase
from .snapshots import current_round, round_responses
from .store import commit, get_room


def advance_turn(room: Room) -> int:
    """Move the turn to the next member; a completed lap starts a new round.

    Eliminated players keep their seat in the rotation.
    """
    members = room.member_ids
    current = room.current_turn_index if room.current_turn_index is not None else 0
    next_index = (current + 1) % len(members)
    if next_index == 0:
        room.round_number = current_round(room) + 1
    room.current_turn_index = next_index
    return next_index


def submit_response(room_id, player_id, text: str) -> None:
    room = get_room(room_id)
    require_phase(room, 'game')

    members = room.member_ids
    index = room.current_turn_index if room.current_turn_index is not None else 0
    turn_player_id = members[index] if 0 <= index < len(members) else None
    if turn_player_id is None or turn_player_id != player_id:
        raise NotYourTurn()

    db.session.add(Response(
        room_id=room.id,
        player_id=player_id,
        round_number=current_round(room),
        text=text,
        submitted_at=utcnow(),
    ))
    prev_round = current_round(room)
    next_index = advance_turn(room)
    commit()
    current_app.logger.info(
        f"[response] room={room.id} player={player_id} round={prev_round} next_turn={next_index} round_now={room.round_number}"
    )


def next_turn(room_id) -> int:
    room = get_room(room_id)
    require_phase(room, 'game')
    next_index = advance_turn(room)
    commit()
    current_app.logger.info(f"[next_turn] room={room.id} turn={next_index} round={room.round_number}")
    return next_index


def get_responses(room_id) -> list:
    return round_responses(get_room(room_id))
