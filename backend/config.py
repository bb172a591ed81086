import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///guessfast.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Extra CORS origin for the deployed frontend
    FRONTEND_URL = os.environ.get('FRONTEND_URL')
    # Rows returned by the global leaderboard
    LEADERBOARD_LIMIT = int(os.environ.get('LEADERBOARD_LIMIT', '50'))
    # The web client evaluates guesses locally and needs the target up front
    EXPOSE_SECRET_WORD = os.environ.get('EXPOSE_SECRET_WORD', '1') not in ('0', 'false', 'False')
    # Socket.IO async mode (None lets flask-socketio pick)
    SOCKETIO_ASYNC_MODE = os.environ.get('SOCKETIO_ASYNC_MODE') or None
