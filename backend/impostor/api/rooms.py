from flask import Blueprint, jsonify, request
from impostor.commands import (
    CreateRoom,
    JoinRoom,
    ResetRound,
    StartGame,
    StartVoting,
    SubmitResponse,
    SubmitVote,
    UpdateScore,
)
from impostor.realtime import broadcast_room_closed, broadcast_state
from impostor.services import phases, rooms as room_service, turns, voting
from impostor.services.snapshots import get_game_state


rooms = Blueprint('rooms', __name__)


def _command(command_cls):
    """Validate the JSON body against a command model."""
    return command_cls.model_validate(request.get_json(silent=True) or {})


@rooms.route('/rooms', methods=['POST'])
def create_room():
    cmd = _command(CreateRoom)
    result = room_service.create_room(cmd.host_display_name)
    return jsonify(result), 201


@rooms.route('/rooms/code/<string:join_code>', methods=['GET'])
def get_room_by_code(join_code):
    return jsonify(room_service.get_room_by_code(join_code))


@rooms.route('/rooms/join', methods=['POST'])
def join_room():
    cmd = _command(JoinRoom)
    result = room_service.join_room(cmd.join_code, cmd.display_name)
    broadcast_state(result['room_id'])
    return jsonify(result), 201


@rooms.route('/rooms/<int:room_id>/start', methods=['POST'])
def start_game(room_id):
    cmd = _command(StartGame)
    impostor_id = phases.start_game(room_id, cmd.player_id, cmd.topic)
    broadcast_state(room_id)
    return jsonify({'impostor_id': impostor_id})


@rooms.route('/rooms/<int:room_id>/next-turn', methods=['POST'])
def next_turn(room_id):
    current_turn_index = turns.next_turn(room_id)
    broadcast_state(room_id)
    return jsonify({'current_turn_index': current_turn_index})


@rooms.route('/rooms/<int:room_id>/responses', methods=['POST'])
def submit_response(room_id):
    cmd = _command(SubmitResponse)
    turns.submit_response(room_id, cmd.player_id, cmd.text)
    broadcast_state(room_id)
    return jsonify({'success': True}), 201


@rooms.route('/rooms/<int:room_id>/responses', methods=['GET'])
def get_responses(room_id):
    return jsonify(turns.get_responses(room_id))


@rooms.route('/rooms/<int:room_id>/voting', methods=['POST'])
def start_voting_phase(room_id):
    cmd = _command(StartVoting)
    phases.start_voting_phase(room_id, cmd.player_id)
    broadcast_state(room_id)
    return jsonify({'success': True})


@rooms.route('/rooms/<int:room_id>/votes', methods=['POST'])
def submit_vote(room_id):
    cmd = _command(SubmitVote)
    voting.submit_vote(room_id, cmd.voter_id, cmd.voted_for_id)
    broadcast_state(room_id)
    return jsonify({'success': True})


@rooms.route('/rooms/<int:room_id>/votes', methods=['GET'])
def get_votes(room_id):
    return jsonify(voting.get_votes(room_id))


@rooms.route('/rooms/<int:room_id>/results', methods=['POST'])
def calculate_results(room_id):
    results = voting.calculate_results(room_id)
    broadcast_state(room_id)
    return jsonify(results)


@rooms.route('/rooms/<int:room_id>/reset', methods=['POST'])
def reset_game_for_new_round(room_id):
    cmd = _command(ResetRound)
    voting.reset_game_for_new_round(room_id, cmd.new_topic)
    broadcast_state(room_id)
    return jsonify({'success': True})


@rooms.route('/rooms/<int:room_id>/state', methods=['GET'])
def game_state(room_id):
    return jsonify(get_game_state(room_id))


@rooms.route('/rooms/<int:room_id>/players', methods=['GET'])
def players_in_room(room_id):
    return jsonify(room_service.get_players_in_room(room_id))


@rooms.route('/players/<int:player_id>', methods=['GET'])
def get_player(player_id):
    return jsonify(room_service.get_player_info(player_id))


@rooms.route('/players/<int:player_id>/eliminate', methods=['POST'])
def eliminate_player(player_id):
    room_id = room_service.eliminate_player(player_id)
    broadcast_state(room_id)
    return jsonify({'success': True})


@rooms.route('/players/<int:player_id>/score', methods=['POST'])
def update_player_score(player_id):
    cmd = _command(UpdateScore)
    player = room_service.update_player_score(player_id, cmd.score_increase)
    broadcast_state(player['room_id'])
    return jsonify(player)


@rooms.route('/players/<int:player_id>/leave', methods=['POST'])
def leave_room(player_id):
    result = room_service.leave_room(player_id)
    if result['room_deleted']:
        broadcast_room_closed(result['room_id'])
    else:
        broadcast_state(result['room_id'])
    return jsonify({'success': True, **result})
