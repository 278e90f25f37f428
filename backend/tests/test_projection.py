from impostor import db
from impostor.projection import ClientSession, project
from impostor.services.snapshots import build_snapshot


def _snapshot(**overrides):
    snap = {
        'id': 1,
        'version': 3,
        'phase': 'game',
        'topic': 'Vegetables',
        'host_player_id': 10,
        'member_ids': [10, 11, 12],
        'current_turn_index': 1,
        'round_number': 1,
        'players': [
            {'id': 10, 'display_name': 'Alice', 'is_host': True},
            {'id': 11, 'display_name': 'Bob', 'is_impostor': True},
            {'id': 12, 'display_name': 'Cara'},
        ],
        'votes': [],
        'responses': [],
    }
    snap.update(overrides)
    return snap


def test_projection_derives_turn_and_role():
    bob = project(_snapshot(), 11)
    assert bob.current_player.id == 11
    assert bob.is_my_turn is True
    assert bob.am_i_impostor is True
    assert bob.am_i_host is False

    alice = project(_snapshot(), 10)
    assert alice.is_my_turn is False
    assert alice.am_i_impostor is False
    assert alice.am_i_host is True


def test_projection_without_valid_turn_index():
    assert project(_snapshot(current_turn_index=None), 10).current_player is None
    view = project(_snapshot(current_turn_index=7), 10)
    assert view.current_player is None
    assert view.is_my_turn is False


def test_projection_is_idempotent():
    snap = _snapshot(votes=[{'voter_id': 10, 'voted_for_id': 11, 'round_number': 1}])
    assert project(snap, 12) == project(snap, 12)


def test_projection_tallies_votes():
    view = project(_snapshot(phase='voting', votes=[
        {'voter_id': 10, 'voted_for_id': 11, 'round_number': 1},
        {'voter_id': 12, 'voted_for_id': 11, 'round_number': 1},
        {'voter_id': 11, 'voted_for_id': 10, 'round_number': 1},
    ]), 12)
    assert view.my_vote == 11
    assert view.vote_counts == {10: 1, 11: 2}
    assert view.votes_by_voter == {10: 11, 12: 11, 11: 10}


def test_unknown_player_sees_no_role():
    view = project(_snapshot(), 99)
    assert view.my_player is None
    assert view.am_i_impostor is False
    assert view.my_vote is None


def test_session_reports_only_real_changes():
    session = ClientSession(room_id=1, player_id=10)
    assert session.apply_snapshot(_snapshot()) is True
    # Same snapshot delivered twice
    assert session.apply_snapshot(_snapshot()) is False
    assert session.apply_snapshot(_snapshot(version=4, current_turn_index=0)) is True
    assert session.view.is_my_turn is True


def test_session_ignores_stale_and_foreign_snapshots():
    session = ClientSession(room_id=1, player_id=10)
    session.apply_snapshot(_snapshot(version=5, current_turn_index=2))

    assert session.apply_snapshot(_snapshot(version=4, current_turn_index=0)) is False
    assert session.view.current_player.id == 12
    assert session.apply_snapshot(_snapshot(id=2, version=9)) is False
    assert session.cached_snapshot.version == 5


def test_session_rebuilds_vote_cache_wholesale():
    session = ClientSession(room_id=1, player_id=10)
    session.apply_snapshot(_snapshot(phase='voting', votes=[
        {'voter_id': 10, 'voted_for_id': 11, 'round_number': 1},
    ]))
    assert session.view.my_vote == 11

    # A later snapshot from the next round carries no votes at all
    session.apply_snapshot(_snapshot(version=8, round_number=2, votes=[]))
    assert session.view.my_vote is None
    assert session.view.vote_counts == {}


def test_session_clears_results_when_round_moves_on():
    session = ClientSession(room_id=1, player_id=10)
    session.apply_snapshot(_snapshot(phase='results', version=6))
    session.record_results({'voted_player_id': 11, 'is_impostor_caught': True, 'vote_counts': {'11': 2}})
    assert session.last_results.is_impostor_caught is True

    session.apply_snapshot(_snapshot(phase='game', version=7, round_number=2))
    assert session.last_results is None

    session.reset()
    assert session.view is None and session.cached_snapshot is None


def test_session_follows_server_snapshots(client, started_room):
    room_id = started_room['room_id']
    p = started_room['players']
    alice = ClientSession(room_id=room_id, player_id=p['Alice'])
    bob = ClientSession(room_id=room_id, player_id=p['Bob'])

    snap = build_snapshot(room_id)
    alice.apply_snapshot(snap)
    bob.apply_snapshot(snap)
    assert alice.view.is_my_turn is True
    assert bob.view.is_my_turn is False
    assert [alice.view.am_i_impostor, bob.view.am_i_impostor].count(True) <= 1

    client.post(f'/api/rooms/{room_id}/responses', json={'player_id': p['Alice'], 'text': 'carrot'})
    db.session.expire_all()
    snap = build_snapshot(room_id)
    assert alice.apply_snapshot(snap) is True
    assert bob.apply_snapshot(snap) is True
    assert bob.view.is_my_turn is True
    assert [r.text for r in bob.view.responses] == ['carrot']
    assert bob.view.responses[0].player_name == 'Alice'


def test_snapshot_of_missing_room(flask_app):
    assert build_snapshot(999) is None
