"""Voting, result calculation and round reset."""
from flask import current_app

from impostor import db
from impostor.errors import InsufficientPlayers, NoVotesCast, NotFound
from impostor.models import Player, Vote
from .phases import assign_impostor, min_players, require_phase, transition
from .scoring import active_impostor, score_round
from .snapshots import current_round, round_votes
from .store import commit, get_room


def submit_vote(room_id, voter_id, voted_for_id) -> None:
    room = get_room(room_id)
    require_phase(room, 'voting')

    round_number = current_round(room)
    vote = Vote.query.filter_by(room_id=room.id, voter_id=voter_id, round_number=round_number).first()
    if vote:
        vote.voted_for_id = voted_for_id
    else:
        db.session.add(Vote(
            room_id=room.id,
            voter_id=voter_id,
            voted_for_id=voted_for_id,
            round_number=round_number,
        ))
    room.touch()
    commit()
    current_app.logger.info(f"[vote] room={room.id} round={round_number} voter={voter_id} target={voted_for_id}")


def get_votes(room_id) -> list:
    return [v.to_dict() for v in round_votes(get_room(room_id))]


def tally_votes(votes) -> dict:
    counts = {}
    for v in votes:
        counts[v.voted_for_id] = counts.get(v.voted_for_id, 0) + 1
    return counts


def pick_most_voted(counts: dict):
    """Strict maximum; on a tie the lowest player id wins."""
    winner, best = None, 0
    for player_id in sorted(counts):
        if counts[player_id] > best:
            winner, best = player_id, counts[player_id]
    return winner


def calculate_results(room_id) -> dict:
    room = get_room(room_id)
    require_phase(room, 'voting')

    counts = tally_votes(round_votes(room))
    voted_player_id = pick_most_voted(counts)
    if voted_player_id is None:
        raise NoVotesCast()

    voted = db.session.get(Player, voted_player_id)
    if voted is None or voted.room_id != room.id:
        raise NotFound('Voted player not found')

    players = Player.query.filter_by(room_id=room.id).order_by(Player.id).all()
    impostor = active_impostor(players)
    # Any flagged player counts, including an impostor eliminated in an earlier round
    caught = bool(voted.is_impostor)

    voted.is_eliminated = True
    awarded = score_round(players, impostor, caught)
    transition(room, 'results')
    commit()
    current_app.logger.info(
        f"[results] room={room.id} round={room.round_number} voted={voted_player_id} caught={caught} awarded={awarded}"
    )
    return {
        'voted_player_id': voted_player_id,
        'is_impostor_caught': caught,
        'vote_counts': {str(pid): counts[pid] for pid in sorted(counts)},
    }


def reset_game_for_new_round(room_id, new_topic: str) -> int:
    """Start the next round with a fresh impostor drawn from players still in play."""
    room = get_room(room_id)
    require_phase(room, 'results')

    pool = (
        Player.query
        .filter_by(room_id=room.id, is_eliminated=False)
        .order_by(Player.id)
        .all()
    )
    if len(pool) < min_players():
        raise InsufficientPlayers('Not enough players to continue')

    # Eliminated players keep whatever flag they had; they are out for good
    impostor = assign_impostor(pool)
    transition(room, 'game')
    room.topic = new_topic
    room.round_number = current_round(room) + 1
    room.current_turn_index = 0
    commit()
    current_app.logger.info(f"[new_round] room={room.id} round={room.round_number} impostor={impostor.id} pool={len(pool)}")
    return impostor.id
