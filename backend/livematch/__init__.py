from flask import Flask, current_app, jsonify
from flask_cors import CORS
from flask_socketio import SocketIO
from livematch.config import Config
from livematch.errors import LiveMatchError

cors = CORS()
socketio = SocketIO(async_mode=None)


def get_hub(flask_app=None):
    """Return the LiveMatchHub owned by the given (or current) app."""
    if flask_app is None:
        flask_app = current_app
    return flask_app.extensions['livematch']


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    origins = flask_app.config.get('CORS_ORIGINS', '*')
    cors.init_app(flask_app, origins=origins)
    socketio.init_app(flask_app, cors_allowed_origins=origins)

    # Stores are owned per app so each test app starts empty
    from livematch.services import LiveMatchHub, SocketIOTransport
    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/')
    flask_app.extensions['livematch'] = LiveMatchHub.from_config(
        flask_app.config, transport=SocketIOTransport(socketio, namespace=namespace)
    )

    from livematch.main import main
    flask_app.register_blueprint(main)

    from livematch.api.matches import matches
    flask_app.register_blueprint(matches)

    @flask_app.errorhandler(LiveMatchError)
    def handle_live_match_error(exc):
        flask_app.logger.info(f"[rejected] {exc.code}: {exc}")
        return jsonify(exc.to_dict()), exc.status_code

    from livematch.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=namespace)

    return flask_app
