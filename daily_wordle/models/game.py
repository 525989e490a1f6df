"""
Game Data Models

Contains all game-related data structures and enums.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Dict, List, Optional, Union


class LetterState(Enum):
    """Classification of a single letter on the board."""
    BLANK = "BLANK"      # no guess made yet
    MISS = "MISS"        # letter not in the answer (or all occurrences accounted for)
    PRESENT = "PRESENT"  # letter in the answer, wrong position
    MATCH = "MATCH"      # letter in the answer at this position


class GameStatus(Enum):
    """Lifecycle status of a daily game."""
    EMPTY = "EMPTY"
    IN_PROGRESS = "IN_PROGRESS"
    WON = "WON"
    COMPLETE = "COMPLETE"


TERMINAL_STATUSES = (GameStatus.WON, GameStatus.COMPLETE)


def is_game_complete(status: GameStatus) -> bool:
    return status in TERMINAL_STATUSES


@dataclass
class ComputedLetter:
    """A scored letter. ``id`` is an opaque display token, never used for logic."""
    id: str
    letter: str
    state: LetterState

    def to_dict(self) -> Dict[str, str]:
        return {"id": self.id, "letter": self.letter, "state": self.state.value}


@dataclass(frozen=True)
class Guess:
    """A persisted guess: the normalized word and when it was made."""
    guess: str
    created_at: datetime


@dataclass
class Game:
    """Server-side representation of one user's game for one day."""
    id: str
    user_id: str
    word: str
    day: date
    status: GameStatus
    created_at: datetime
    updated_at: datetime
    guesses: List[Guess] = field(default_factory=list)

    @property
    def guess_words(self) -> List[str]:
        return [g.guess for g in self.guesses]

    @property
    def is_complete(self) -> bool:
        return is_game_complete(self.status)


@dataclass
class BoardRow:
    letters: List[ComputedLetter]

    def to_dict(self) -> Dict:
        return {"letters": [letter.to_dict() for letter in self.letters]}


@dataclass
class Board:
    """Display board for a game: scored guesses followed by filler rows."""
    game_id: str
    status: GameStatus
    current_guess: int
    rows: List[BoardRow]
    created_at: datetime
    updated_at: datetime
    word: Optional[str] = None  # Only included when game is over

    def to_dict(self) -> Dict:
        return {
            "game_id": self.game_id,
            "status": self.status.value,
            "current_guess": self.current_guess,
            "rows": [row.to_dict() for row in self.rows],
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "word": self.word,
        }


@dataclass
class GameSummary:
    """One line of a user's game history."""
    id: str
    date: datetime
    guesses: int
    status: GameStatus
    word: Optional[str]

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "guesses": self.guesses,
            "status": self.status.value,
            "word": self.word,
        }


class RejectionReason(Enum):
    """Why a game operation was refused."""
    INVALID_LENGTH = "INVALID_LENGTH"
    UNKNOWN_WORD = "UNKNOWN_WORD"
    DUPLICATE_GUESS = "DUPLICATE_GUESS"
    GAME_ALREADY_COMPLETE = "GAME_ALREADY_COMPLETE"
    NOT_FOUND = "NOT_FOUND"
    UNEXPECTED = "UNEXPECTED"


@dataclass(frozen=True)
class Ok:
    game: Game


@dataclass(frozen=True)
class Rejected:
    reason: RejectionReason
    message: str


GameResult = Union[Ok, Rejected]
