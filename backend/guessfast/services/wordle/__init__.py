"""Word game domain services: evaluation, runs, scoring and tournaments.

This package contains pure(ish) domain logic that should be imported by
HTTP routes and socket handlers, keeping transport concerns separated
from core game mechanics.
"""

import time

WORD_LENGTH = 5
MAX_GUESSES = 6


def now_ms() -> int:
    return int(time.time() * 1000)
