from flask import current_app, request
from flask_socketio import emit
from livematch import get_hub, socketio


def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def handle_connect():
    sid = _get_sid()
    get_hub().router.connect(sid)
    current_app.logger.info(f"[connect] sid={sid}")


def handle_disconnect(*args):
    sid = _get_sid()
    get_hub().router.leave(sid)
    current_app.logger.info(f"[disconnect] sid={sid}")


def handle_join(token=None):
    """Join the channel behind a token; the router answers with joined or error."""
    # Accept both a bare token string and {"token": ...}
    if isinstance(token, dict):
        token = token.get('token')
    get_hub().router.join(_get_sid(), token)


def handle_leave(*args):
    sid = _get_sid()
    hub = get_hub()
    channel = hub.router.channel_of(sid)
    hub.router.leave(sid)
    hub.router.connect(sid)
    emit('left', {'channel': channel})


def register_socketio_handlers(namespace: str = '/') -> None:
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('join', handle_join, namespace=namespace)
    socketio.on_event('leave', handle_leave, namespace=namespace)
