"""Read-side views of a room: game state and the broadcast snapshot."""
from impostor import db
from impostor.models import Room, Player, Response, Vote
from .store import get_room

UNKNOWN_PLAYER_NAME = 'Unknown Player'


def current_round(room: Room) -> int:
    return room.round_number or 1


def resolve_players(room: Room) -> list:
    """Players of the room in turn order, skipping ids whose record is gone."""
    ids = room.member_ids
    if not ids:
        return []
    by_id = {p.id: p for p in Player.query.filter(Player.id.in_(ids)).all()}
    return [by_id[pid].to_dict() for pid in ids if pid in by_id]


def resolve_current_player(room: Room, players: list):
    index = room.current_turn_index
    ids = room.member_ids
    if index is None or not 0 <= index < len(ids):
        return None
    wanted = ids[index]
    return next((p for p in players if p['id'] == wanted), None)


def round_votes(room: Room) -> list:
    return (
        Vote.query
        .filter_by(room_id=room.id, round_number=current_round(room))
        .order_by(Vote.id)
        .all()
    )


def round_responses(room: Room) -> list:
    responses = (
        Response.query
        .filter_by(room_id=room.id, round_number=current_round(room))
        .order_by(Response.submitted_at, Response.id)
        .all()
    )
    if not responses:
        return []
    author_ids = {r.player_id for r in responses}
    names = {
        p.id: p.display_name
        for p in Player.query.filter(Player.id.in_(author_ids)).all()
    }
    return [r.to_dict(player_name=names.get(r.player_id, UNKNOWN_PLAYER_NAME)) for r in responses]


def game_state(room: Room) -> dict:
    players = resolve_players(room)
    payload = room.to_dict()
    payload['players'] = players
    payload['current_player'] = resolve_current_player(room, players)
    return payload


def get_game_state(room_id) -> dict:
    return game_state(get_room(room_id))


def build_snapshot(room_id):
    """Everything a subscriber needs to rebuild its view, or None if the room is gone."""
    room = db.session.get(Room, room_id)
    if room is None:
        return None
    payload = game_state(room)
    payload['votes'] = [v.to_dict() for v in round_votes(room)]
    payload['responses'] = round_responses(room)
    return payload
