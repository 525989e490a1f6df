"""
Word Dictionary

Read-only word lists used to validate guesses and pick secret words.
"""

import random
from typing import Dict, Iterable, Optional

from ..config.game_settings import load_word_bank, validate_word_bank


class WordDictionary:
    """
    Immutable dictionary split into two disjoint lists.

    ``valid`` words can be secret answers and guesses; ``invalid`` words can
    be guessed but are never chosen as an answer.
    """

    def __init__(self, valid: Iterable[str], invalid: Iterable[str] = (), rng: Optional[random.Random] = None):
        self._valid = tuple(word.lower() for word in valid)
        self._invalid = tuple(word.lower() for word in invalid)
        validate_word_bank({'valid': list(self._valid), 'invalid': list(self._invalid)})

        self._guessable = frozenset(self._valid) | frozenset(self._invalid)
        self._rng = rng or random.Random()

    @classmethod
    def from_file(cls, path: Optional[str] = None, rng: Optional[random.Random] = None) -> "WordDictionary":
        """Load the bundled word bank, or the one at ``path``."""
        word_bank = load_word_bank(path)
        return cls(word_bank['valid'], word_bank['invalid'], rng=rng)

    @property
    def valid_words(self):
        return self._valid

    def is_valid_guess(self, word: str) -> bool:
        return word.lower() in self._guessable

    def pick_secret_word(self) -> str:
        """Uniform random choice from the answer list. Not memoized."""
        return self._rng.choice(self._valid)

    def get_statistics(self) -> Dict[str, int]:
        return {
            "valid_words": len(self._valid),
            "invalid_words": len(self._invalid),
            "guessable_words": len(self._guessable),
        }
