from collections import Counter
from typing import List

from guessfast.errors import InvalidLength
from . import WORD_LENGTH

CORRECT = 'correct'
PRESENT = 'present'
ABSENT = 'absent'


def check_length(word: str) -> str:
    """Return *word* uppercased, or raise InvalidLength.

    Length is checked after uppercasing: some letters expand ('ß' -> 'SS').
    """
    if not isinstance(word, str):
        raise InvalidLength(f'Words must be exactly {WORD_LENGTH} letters')
    word = word.upper()
    if len(word) != WORD_LENGTH:
        raise InvalidLength(f'Words must be exactly {WORD_LENGTH} letters')
    return word


def evaluate(guess: str, target: str) -> List[str]:
    """Score *guess* against *target*, one status per position.

    Greens are assigned first so a repeated guess letter is only marked
    present while unconsumed copies remain in the target.
    """
    guess = check_length(guess)
    target = check_length(target)

    statuses = [ABSENT] * WORD_LENGTH
    remaining = Counter(target)

    # Pass 1 - exact matches
    for i, (g, t) in enumerate(zip(guess, target)):
        if g == t:
            statuses[i] = CORRECT
            remaining[g] -= 1

    # Pass 2 - right letter, wrong position
    for i, (g, _) in enumerate(zip(guess, target)):
        if statuses[i] == CORRECT:
            continue
        if remaining[g] > 0:
            statuses[i] = PRESENT
            remaining[g] -= 1

    return statuses
