from typing import Dict, Iterable, List

from .evaluator import ABSENT, PRESENT, CORRECT, evaluate

STATUS_RANK = {ABSENT: 0, PRESENT: 1, CORRECT: 2}


def merge_keyboard(keyboard: Dict[str, str], guess: str, statuses: List[str]) -> Dict[str, str]:
    """Fold one evaluated guess into the per-letter keyboard state.

    Letters only move up the absent < present < correct ladder. Returns a
    new dict; *keyboard* is left untouched.
    """
    merged = dict(keyboard)
    for letter, status in zip(guess.upper(), statuses):
        current = merged.get(letter)
        if current is None or STATUS_RANK[status] > STATUS_RANK[current]:
            merged[letter] = status
    return merged


def keyboard_for(guesses: Iterable[str], target: str) -> Dict[str, str]:
    keyboard: Dict[str, str] = {}
    for guess in guesses:
        keyboard = merge_keyboard(keyboard, guess, evaluate(guess, target))
    return keyboard
