"""
Letter Scoring

Scores a guess against the answer, letter by letter.
"""

import uuid
from typing import Dict, List

from ..models.game import ComputedLetter, LetterState


def new_letter_id() -> str:
    """Opaque token used by clients to key rendered letters."""
    return uuid.uuid4().hex[:12]


def create_empty_letter() -> ComputedLetter:
    return ComputedLetter(id=new_letter_id(), letter="", state=LetterState.BLANK)


def score(guess: str, answer: str) -> List[ComputedLetter]:
    """
    Classifies every letter of ``guess`` against ``answer``.

    The first pass marks exact matches, and provisionally marks a letter
    present when it occurs anywhere in the answer. The second pass walks the
    present letters left to right and demotes them to a miss when the same
    letter is already matched elsewhere, or when the answer has run out of
    that letter.

    Returns an empty list when the words differ in length; callers must treat
    that as "cannot be scored".
    """
    if len(guess) != len(answer):
        return []

    result: List[ComputedLetter] = []
    # Counted from the answer letter at every index, matched or not.
    answer_letter_count: Dict[str, int] = {}

    for index, letter in enumerate(guess):
        current_answer_letter = answer[index]
        answer_letter_count[current_answer_letter] = answer_letter_count.get(current_answer_letter, 0) + 1

        if current_answer_letter == letter:
            state = LetterState.MATCH
        elif letter in answer:
            state = LetterState.PRESENT
        else:
            state = LetterState.MISS
        result.append(ComputedLetter(id=new_letter_id(), letter=letter, state=state))

    for result_index, current in enumerate(result):
        if current.state is not LetterState.PRESENT:
            continue

        guess_letter = guess[result_index]

        for answer_index, current_answer_letter in enumerate(answer):
            if current_answer_letter != guess_letter:
                continue

            if result[answer_index].state is LetterState.MATCH:
                current.state = LetterState.MISS

            if answer_letter_count[guess_letter] <= 0:
                current.state = LetterState.MISS

        answer_letter_count[guess_letter] -= 1

    return result


def is_winning(letters: List[ComputedLetter]) -> bool:
    """True when the scored guess is a full match."""
    return bool(letters) and all(letter.state is LetterState.MATCH for letter in letters)
