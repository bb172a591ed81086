from contextlib import contextmanager

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from guessfast import db
from guessfast.errors import GuessFastError, StoreUnavailable


@contextmanager
def transaction(tag: str):
    """Commit on success; roll back on any failure so no row is half-written.

    Store errors surface as StoreUnavailable. Domain errors propagate unchanged.
    """
    try:
        yield db.session
        db.session.commit()
    except GuessFastError:
        db.session.rollback()
        raise
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.exception(f"[{tag}] store failure")
        raise StoreUnavailable() from exc
    except Exception:
        db.session.rollback()
        raise
