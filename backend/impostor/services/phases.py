"""Phase state machine: lobby -> game -> voting -> results -> game -> ...

Transitions happen only through the command functions of this package;
each checks the current phase first and fails with ``InvalidPhase`` before
touching anything.
"""
import random

from flask import current_app

from impostor import db
from impostor.errors import Forbidden, InsufficientPlayers, InvalidPhase
from impostor.models import Room, Player
from .store import commit, get_room

# Allowed successor of each phase
TRANSITIONS = {
    'lobby': 'game',
    'game': 'voting',
    'voting': 'results',
    'results': 'game',
}


def require_phase(room: Room, *phases: str) -> None:
    if room.phase not in phases:
        raise InvalidPhase(f"Operation requires phase {' or '.join(phases)}, room is in {room.phase}")


def transition(room: Room, target: str) -> None:
    if TRANSITIONS.get(room.phase) != target:
        raise InvalidPhase(f"Cannot move from {room.phase} to {target}")
    room.phase = target


def require_host(room: Room, player_id) -> Player:
    player = db.session.get(Player, player_id)
    if player is None or player.room_id != room.id or not player.is_host:
        raise Forbidden()
    return player


def min_players() -> int:
    return int(current_app.config.get('MIN_PLAYERS', 3))


def assign_impostor(pool: list) -> Player:
    """Pick one player of ``pool`` uniformly and flag exactly that one."""
    impostor = random.choice(pool)
    for p in pool:
        p.is_impostor = p.id == impostor.id
    return impostor


def start_game(room_id, player_id, topic: str) -> int:
    room = get_room(room_id)
    require_phase(room, 'lobby')
    require_host(room, player_id)

    member_ids = room.member_ids
    if len(member_ids) < min_players():
        raise InsufficientPlayers(f'At least {min_players()} players required to start the game')

    by_id = {p.id: p for p in Player.query.filter(Player.id.in_(member_ids)).all()}
    members = [by_id[pid] for pid in member_ids if pid in by_id]
    impostor = assign_impostor(members)

    transition(room, 'game')
    room.topic = topic
    room.round_number = 1
    room.current_turn_index = 0
    commit()
    current_app.logger.info(f"[start] room={room.id} impostor={impostor.id} members={len(members)}")
    return impostor.id


def start_voting_phase(room_id, player_id) -> None:
    room = get_room(room_id)
    require_phase(room, 'game')
    require_host(room, player_id)
    # Voting closes the current round's discussion; counters stay untouched
    transition(room, 'voting')
    commit()
    current_app.logger.info(f"[voting] room={room.id} round={room.round_number}")
