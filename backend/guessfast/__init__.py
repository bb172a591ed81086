from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
allowed_origins = [
    "https://guess-fast.vercel.app",
    "http://localhost:5173",
    "http://localhost:3000",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    origins = list(allowed_origins)
    if flask_app.config.get('FRONTEND_URL'):
        origins.append(flask_app.config['FRONTEND_URL'])

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(
        flask_app,
        cors_allowed_origins=origins,
        async_mode=flask_app.config.get('SOCKETIO_ASYNC_MODE'),
    )

    from guessfast.main import main
    flask_app.register_blueprint(main)

    # Mount game routes under /api to match frontend API client
    from guessfast.api.runs import runs
    from guessfast.api.tournaments import tournaments
    flask_app.register_blueprint(runs, url_prefix='/api')
    flask_app.register_blueprint(tournaments, url_prefix='/api')

    from guessfast.errors import GuessFastError

    @flask_app.errorhandler(GuessFastError)
    def handle_game_error(exc):
        return jsonify(exc.to_dict()), exc.status_code

    from guessfast.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        from guessfast.services.wordle.words import seed_words
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            count = seed_words()
            print(f'Database has been reset and seeded with {count} words!')

    @click.command('seed-words')
    def seed_words_command():
        """Inserts the default dictionary, skipping words already present."""
        from guessfast.services.wordle.words import seed_words
        with flask_app.app_context():
            count = seed_words()
            print(f'Seeded {count} new words.')

    @click.command('clean-tournaments')
    def clean_tournaments_command():
        """Deletes every tournament and participant row. Runs are kept."""
        from guessfast.services.wordle.tournaments import delete_all_tournaments
        with flask_app.app_context():
            deleted = delete_all_tournaments()
            print(f'Deleted {deleted} tournaments and their participants.')

    @click.command('close-expired')
    def close_expired_command():
        """Marks tournaments past their end time as closed."""
        from guessfast.services.wordle.tournaments import close_expired_tournaments
        with flask_app.app_context():
            closed = close_expired_tournaments()
            print(f'Closed {closed} expired tournaments.')

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(seed_words_command)
    flask_app.cli.add_command(clean_tournaments_command)
    flask_app.cli.add_command(close_expired_command)

    return flask_app
