from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
from pydantic import ValidationError
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = flask_app.config.get('CORS_ORIGINS') or []

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from impostor.api.rooms import rooms
    # Mount game routes under /api to match frontend API client
    flask_app.register_blueprint(rooms, url_prefix='/api')

    # Register Socket.IO event handlers
    from impostor.realtime import register_socketio_handlers
    register_socketio_handlers()

    from impostor.errors import GameError, BadRequest

    @flask_app.errorhandler(GameError)
    def handle_game_error(exc):
        db.session.rollback()
        flask_app.logger.warning(f"[rejected] code={exc.code} status={exc.status_code} message={exc.message}")
        return jsonify(exc.to_dict()), exc.status_code

    @flask_app.errorhandler(ValidationError)
    def handle_validation_error(exc):
        return handle_game_error(BadRequest.from_validation_error(exc))

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the database tables."""
        import impostor.models  # noqa: F401
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Database has been reset!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
