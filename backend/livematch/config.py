import os


def _origins(value):
    if not value or value.strip() == '*':
        return '*'
    return [o.strip() for o in value.split(',') if o.strip()]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Wallet
    INITIAL_COINS = int(os.environ.get('INITIAL_COINS', '1000'))
    COST_PER_PLAY = int(os.environ.get('COST_PER_PLAY', '20'))
    # Join links handed out by /create point at the frontend
    FRONTEND_URL = os.environ.get('FRONTEND_URL', 'http://localhost:5173')
    TOKEN_LENGTH = int(os.environ.get('TOKEN_LENGTH', '8'))
    CORS_ORIGINS = _origins(os.environ.get('CORS_ORIGINS', '*'))
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    PORT = int(os.environ.get('PORT', '3000'))
