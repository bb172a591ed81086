import os
import sys
import pytest

# Ensure the backend root (containing the `guessfast` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from guessfast import create_app, db, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LEADERBOARD_LIMIT = 50
    EXPOSE_SECRET_WORD = True
    FRONTEND_URL = None
    SOCKETIO_ASYNC_MODE = None


FAR_FUTURE_MS = 32503680000000  # year 3000
WALLET = '0xAbC0000000000000000000000000000000000001'


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import guessfast.models  # noqa: F401
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
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass


@pytest.fixture()
def words(flask_app):
    """A one-word dictionary so every run's secret is CRANE."""
    from guessfast.services.wordle.words import seed_words
    seed_words(['CRANE'])
    return ['CRANE']


@pytest.fixture()
def tournament(flask_app):
    from guessfast.services.wordle.tournaments import create_tournament
    return create_tournament('7', '100000000000000000', FAR_FUTURE_MS)
