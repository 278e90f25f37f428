from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from impostor import db
from impostor.errors import Conflict, NotFound
from impostor.models import Room, Player


def get_room(room_id) -> Room:
    room = db.session.get(Room, room_id)
    if room is None:
        raise NotFound('Room not found')
    return room


def get_player(player_id) -> Player:
    player = db.session.get(Player, player_id)
    if player is None:
        raise NotFound('Player not found')
    return player


def commit() -> None:
    """Commit the current command, turning store conflicts into ``Conflict``."""
    try:
        db.session.commit()
    except (StaleDataError, IntegrityError) as exc:
        db.session.rollback()
        raise Conflict() from exc


def flush() -> None:
    """Flush mid-command writes with the same conflict mapping as ``commit``."""
    try:
        db.session.flush()
    except (StaleDataError, IntegrityError) as exc:
        db.session.rollback()
        raise Conflict() from exc
