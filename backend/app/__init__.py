from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
from config import Config

db = SQLAlchemy()
migrate = Migrate()
# Handle each connection's events in arrival order
socketio = SocketIO(async_mode=None, async_handlers=False)


def _allowed_origins(value):
    if not value or value == '*':
        return '*'
    if isinstance(value, str):
        return [o.strip() for o in value.split(',') if o.strip()]
    return list(value)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = _allowed_origins(flask_app.config.get('CORS_ORIGINS', '*'))
    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from app.routes import main
    flask_app.register_blueprint(main)

    # Models must be imported before create_all sees the table
    from app import models  # noqa: F401
    with flask_app.app_context():
        db.create_all()

    # One state container per app, handed to the socket handlers
    from app.services.presence import PresenceState
    from app.socketio_events import PresenceBroadcaster, register_socketio_handlers
    state = PresenceState(trail_length=flask_app.config.get('TRAIL_LENGTH', 50))
    flask_app.extensions['presence'] = state
    register_socketio_handlers(
        PresenceBroadcaster(state),
        namespace=flask_app.config.get('SOCKETIO_NAMESPACE', '/'),
    )

    return flask_app
