from guessfast import db
from datetime import datetime, timezone
import json

RUN_ACTIVE = 'active'
RUN_WON = 'won'
RUN_LOST = 'lost'


def normalize_player(player):
    """Wallet addresses compare case-insensitively; store them lowercased."""
    return player.strip().lower()


class Word(db.Model):
    __tablename__ = 'word'
    word = db.Column(db.String(5), primary_key=True)


class Tournament(db.Model):
    __tablename__ = 'tournament'
    # Matches the on-chain tournament id
    id = db.Column(db.String(80), primary_key=True)
    # Smallest currency unit as a decimal string (uint256 does not fit a float)
    entry_fee = db.Column(db.String(80), nullable=False)
    end_time = db.Column(db.BigInteger, nullable=False)
    is_open = db.Column(db.Boolean, default=True, nullable=False)
    participants = db.relationship('Participant', back_populates='tournament', lazy='dynamic')

    def accepts_entries(self, now_ms):
        return bool(self.is_open) and now_ms < self.end_time

    def to_dict(self):
        return {
            'id': self.id,
            'entry_fee': self.entry_fee,
            'end_time': self.end_time,
            'is_open': bool(self.is_open),
        }


class Participant(db.Model):
    __tablename__ = 'participant'
    tournament_id = db.Column(db.String(80), db.ForeignKey('tournament.id'), primary_key=True)
    player = db.Column(db.String(64), primary_key=True)
    score = db.Column(db.Integer, default=0, nullable=False)
    attempts = db.Column(db.Integer, default=0, nullable=False)
    time_ms = db.Column(db.BigInteger, default=0, nullable=False)
    tournament = db.relationship('Tournament', back_populates='participants')

    def to_dict(self):
        return {
            'tournament_id': self.tournament_id,
            'player': self.player,
            'score': self.score,
            'attempts': self.attempts,
            'time_ms': self.time_ms,
        }


class Run(db.Model):
    __tablename__ = 'run'
    id = db.Column(db.Integer, primary_key=True)
    player = db.Column(db.String(64), nullable=False, index=True)
    secret_word = db.Column(db.String(5), nullable=False)
    start_time = db.Column(db.BigInteger, nullable=False)
    end_time = db.Column(db.BigInteger, nullable=True)
    attempts = db.Column(db.Integer, default=0, nullable=False)
    status = db.Column(db.String(16), default=RUN_ACTIVE, nullable=False, index=True)  # active, won, lost
    # Not a foreign key: runs outlive tournament cleanup
    tournament_id = db.Column(db.String(80), nullable=True, index=True)
    guesses = db.Column(db.Text, nullable=True)  # JSON-encoded list of guesses

    @property
    def guess_list(self):
        return json.loads(self.guesses) if self.guesses else []

    @guess_list.setter
    def guess_list(self, value):
        self.guesses = json.dumps(list(value))

    @property
    def is_terminal(self):
        return self.status in (RUN_WON, RUN_LOST)

    @property
    def is_finalized(self):
        return self.end_time is not None

    @property
    def created_at(self):
        """Start time as a UTC "YYYY-MM-DD HH:MM:SS" string."""
        return datetime.fromtimestamp(self.start_time / 1000, tz=timezone.utc).strftime('%Y-%m-%d %H:%M:%S')

    @property
    def time_ms(self):
        if self.end_time is None:
            return None
        return self.end_time - self.start_time

    def to_dict(self, include_secret=False):
        payload = {
            'id': self.id,
            'player': self.player,
            'start_time': self.start_time,
            'end_time': self.end_time,
            'time_ms': self.time_ms,
            'attempts': self.attempts,
            'status': self.status,
            'tournament_id': self.tournament_id,
            'guesses': self.guess_list,
        }
        if include_secret or self.is_terminal:
            payload['secret_word'] = self.secret_word
        return payload
