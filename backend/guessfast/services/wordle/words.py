from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from guessfast import db
from guessfast.errors import StoreUnavailable
from guessfast.models import Word

DEFAULT_WORDS = [
    "APPLE", "BEACH", "BRAIN", "BREAD", "BRUSH", "CHAIR", "CHEST", "CHORD", "CLICK", "CLOCK",
    "CLOUD", "DANCE", "DIARY", "DRINK", "DRIVE", "EARTH", "FEAST", "FIELD", "FRUIT", "GLASS",
    "GRAPE", "GREEN", "GHOST", "HEART", "HOUSE", "IMAGE", "LIGHT", "LEMON", "MELON", "MODEL",
    "MONEY", "MONTH", "MOTOR", "MUSIC", "NIGHT", "OCEAN", "PARTY", "PHONE", "PHOTO", "PIANO",
    "PIZZA", "PLANE", "PLANT", "PLATE", "POWER", "RADIO", "RIVER", "ROBOT", "ROUND", "SCALE",
    "SCENE", "SHIRT", "SHOES", "SIGHT", "SKIRT", "SMALL", "SMILE", "SNAKE", "SPACE", "SPOON",
    "STAIN", "START", "STICK", "STORM", "STORY", "SWEET", "TABLE", "TASTE", "TIGER", "TOAST",
    "TOOTH", "TOWEL", "TRACK", "TRADE", "TRAIN", "TRUCK", "UNCLE", "VIDEO", "VISIT", "VOICE",
    "WATER", "WATCH", "WHEEL", "WHITE", "WOMAN", "WORLD", "WRITE", "YOUTH", "ZEBRA", "CRANE",
]


def seed_words(words=None) -> int:
    """Insert dictionary words, skipping ones already present. Returns the number added."""
    words = DEFAULT_WORDS if words is None else words
    try:
        existing = {w for (w,) in db.session.query(Word.word).all()}
        added = 0
        for word in {w.upper() for w in words}:
            if word in existing:
                continue
            db.session.add(Word(word=word))
            added += 1
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.exception("[seed-words] failed")
        raise StoreUnavailable() from exc
    current_app.logger.info(f"[seed-words] added={added}")
    return added


def random_word() -> str:
    """Draw one dictionary word uniformly at random. Repeats across runs are fine."""
    try:
        row = Word.query.order_by(func.random()).first()
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.exception("[random-word] dictionary query failed")
        raise StoreUnavailable() from exc
    if row is None:
        current_app.logger.error("[random-word] dictionary is empty; run `flask seed-words`")
        raise StoreUnavailable('Word dictionary is empty')
    return row.word


def is_known_word(word: str) -> bool:
    try:
        return db.session.get(Word, word.upper()) is not None
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StoreUnavailable() from exc
