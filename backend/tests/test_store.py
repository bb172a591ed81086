import pytest

from guessfast import db
from guessfast.models import Word
from guessfast.services.wordle.store import transaction


def test_transaction_commits(flask_app):
    with transaction('test'):
        db.session.add(Word(word='ZEBRA'))
    db.session.expire_all()
    assert db.session.get(Word, 'ZEBRA') is not None


def test_transaction_rolls_back_unexpected_errors(flask_app):
    with pytest.raises(ValueError):
        with transaction('test'):
            db.session.add(Word(word='ZEBRA'))
            raise ValueError('boom')
    assert not db.session.new
    assert db.session.get(Word, 'ZEBRA') is None
