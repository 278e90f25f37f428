"""Room lifecycle: creating rooms, joining, leaving and host hand-over."""
from flask import current_app
from sqlalchemy.exc import IntegrityError

from impostor import db
from impostor.errors import InvalidPhase, NotFound
from impostor.models import Room, Player, Response, Vote, draw_join_code, normalize_join_code
from .snapshots import resolve_players
from .store import commit, flush, get_player, get_room


def generate_join_code(length=None) -> str:
    """Draw codes until one is not taken by an existing room."""
    length = length or int(current_app.config.get('JOIN_CODE_LENGTH', 6))
    while True:
        code = draw_join_code(length)
        if not Room.query.filter_by(join_code=code).first():
            return code


def create_room(host_display_name: str) -> dict:
    # The unique index on join_code backs the lookup in generate_join_code;
    # losing a race to another creator just draws again.
    while True:
        room = Room(join_code=generate_join_code(), phase='lobby')
        room.member_ids = []
        try:
            with db.session.begin_nested():
                db.session.add(room)
                db.session.flush()
        except IntegrityError:
            current_app.logger.info(f"[create] join code {room.join_code} taken, redrawing")
            continue
        break

    host = Player(room_id=room.id, display_name=host_display_name, is_host=True)
    db.session.add(host)
    flush()

    room.host_player_id = host.id
    room.member_ids = [host.id]
    commit()
    current_app.logger.info(f"[create] room={room.id} code={room.join_code} host={host.id}")
    return {'room_id': room.id, 'join_code': room.join_code, 'host_player_id': host.id}


def find_room_by_code(join_code):
    return Room.query.filter_by(join_code=normalize_join_code(join_code)).first()


def get_room_by_code(join_code):
    room = find_room_by_code(join_code)
    if room is None:
        return None
    payload = room.to_dict()
    payload['players'] = resolve_players(room)
    return payload


def join_room(join_code: str, display_name: str) -> dict:
    room = find_room_by_code(join_code)
    if room is None:
        raise NotFound('Room not found')
    if room.phase != 'lobby':
        raise InvalidPhase('Cannot join room, game already in progress')

    player = Player(room_id=room.id, display_name=display_name)
    db.session.add(player)
    flush()

    room.member_ids = room.member_ids + [player.id]
    commit()
    current_app.logger.info(f"[join] room={room.id} player={player.id} members={len(room.member_ids)}")
    return {'room_id': room.id, 'player_id': player.id}


def _delete_room(room: Room) -> None:
    Vote.query.filter_by(room_id=room.id).delete(synchronize_session=False)
    Response.query.filter_by(room_id=room.id).delete(synchronize_session=False)
    db.session.delete(room)


def leave_room(player_id) -> dict:
    """Remove a player; hand the host role on or close the room.

    Returns ``{'room_id', 'room_deleted', 'new_host_id'}``.
    """
    player = get_player(player_id)
    room = db.session.get(Room, player.room_id)
    if room is None:
        raise NotFound('Room not found')

    members = room.member_ids
    remaining = [pid for pid in members if pid != player.id]
    new_host_id = None

    if player.is_host and remaining:
        for candidate_id in remaining:
            candidate = db.session.get(Player, candidate_id)
            if candidate is not None:
                candidate.is_host = True
                room.host_player_id = candidate.id
                new_host_id = candidate.id
                break
        # Host hand-over is written before the membership patch
        flush()

    if not remaining or (player.is_host and new_host_id is None):
        room_id = room.id
        db.session.delete(player)
        flush()
        _delete_room(room)
        commit()
        current_app.logger.info(f"[leave] room={room_id} player={player_id} room closed")
        return {'room_id': room_id, 'room_deleted': True, 'new_host_id': None}

    index = room.current_turn_index
    if index is not None and player.id in members:
        if members.index(player.id) < index:
            index -= 1
        # Wrapping here is a seat change, not a completed lap: round stays
        if index >= len(remaining):
            index = 0
        room.current_turn_index = index

    room.member_ids = remaining
    room.touch()
    db.session.delete(player)
    commit()
    current_app.logger.info(f"[leave] room={room.id} player={player_id} new_host={new_host_id}")
    return {'room_id': room.id, 'room_deleted': False, 'new_host_id': new_host_id}


def get_player_info(player_id) -> dict:
    return get_player(player_id).to_dict()


def get_players_in_room(room_id) -> list:
    get_room(room_id)
    players = Player.query.filter_by(room_id=room_id).order_by(Player.id).all()
    return [p.to_dict() for p in players]


def eliminate_player(player_id) -> int:
    """Mark a player eliminated. Returns the player's room id."""
    player = get_player(player_id)
    player.is_eliminated = True
    room = db.session.get(Room, player.room_id)
    if room is not None:
        room.touch()
    commit()
    current_app.logger.info(f"[eliminate] room={player.room_id} player={player.id}")
    return player.room_id


def update_player_score(player_id, score_increase: int) -> dict:
    player = get_player(player_id)
    player.score = max(0, (player.score or 0) + score_increase)
    room = db.session.get(Room, player.room_id)
    if room is not None:
        room.touch()
    commit()
    return player.to_dict()
