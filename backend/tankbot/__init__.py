from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

allowed_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:5174",
    "http://127.0.0.1:5174",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)


def build_timer_factory(flask_app):
    """Return the factory sessions use to schedule their daily tick.

    No timers run in TESTING mode unless ENABLE_SCHEDULER_IN_TESTS is set.
    """
    if flask_app.config.get('TESTING') and not flask_app.config.get('ENABLE_SCHEDULER_IN_TESTS'):
        return None

    from tankbot.services.game.scheduler import TickTimer
    from tankbot.socketio_events import broadcast_tick

    def factory(session):
        return TickTimer(session, on_tick=broadcast_tick, spawn=socketio.start_background_task)

    return factory


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # One game session per chat channel, owned by the app rather than module globals
    from tankbot.manager import SessionManager
    from tankbot.services.game.settings import GameSettings
    flask_app.extensions['tankbot'] = SessionManager(
        settings=GameSettings.from_config(flask_app.config),
        timer_factory=build_timer_factory(flask_app),
    )

    # Import and register blueprints here
    from tankbot.routes import main
    flask_app.register_blueprint(main)

    from tankbot.api.game import game
    flask_app.register_blueprint(game, url_prefix='/api/channels/<channel_id>/game')

    # Register Socket.IO event handlers
    from tankbot.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    flask_app.logger.info(f"[startup] board={flask_app.config.get('BOARD_SIZE')} prefix={flask_app.config.get('COMMAND_PREFIX')}")
    return flask_app
