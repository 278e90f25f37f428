import os
import sys
import pytest

# Ensure the backend root (containing the `impostor` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from impostor import create_app, db, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    MIN_PLAYERS = 3
    JOIN_CODE_LENGTH = 6
    CORS_ORIGINS = []
    LOG_LEVEL = 'DEBUG'


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import impostor.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    if test_client.is_connected('/ws'):
        test_client.disconnect(namespace='/ws')


@pytest.fixture()
def make_room(client):
    """Create a room hosted by the first name and join the rest.

    Returns ``{'room_id', 'join_code', 'players': {name: id}}``.
    """
    def _make(*names):
        host, *others = names
        res = client.post('/api/rooms', json={'host_display_name': host})
        assert res.status_code == 201
        created = res.get_json()
        players = {host: created['host_player_id']}
        for name in others:
            res = client.post('/api/rooms/join', json={'join_code': created['join_code'], 'display_name': name})
            assert res.status_code == 201
            players[name] = res.get_json()['player_id']
        return {'room_id': created['room_id'], 'join_code': created['join_code'], 'players': players}
    return _make


@pytest.fixture()
def started_room(client, make_room):
    """A three-player room already in the game phase."""
    room = make_room('Alice', 'Bob', 'Cara')
    res = client.post(f"/api/rooms/{room['room_id']}/start", json={'player_id': room['players']['Alice'], 'topic': 'Pizza Toppings'})
    assert res.status_code == 200
    room['impostor_id'] = res.get_json()['impostor_id']
    return room
