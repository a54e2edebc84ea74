from dotenv import load_dotenv

load_dotenv()

from livematch import create_app, socketio  # noqa: E402

app = create_app()

if __name__ == '__main__':
    # Use SocketIO server to enable websockets in dev
    socketio.run(app, host='0.0.0.0', port=app.config['PORT'], debug=True)
