"""
Board Projection

Builds the fixed-size display board for a game from its stored guesses.
"""

from typing import List

from ..config.game_settings import TOTAL_GUESSES, WORD_LENGTH
from ..models.game import Board, BoardRow, Game, LetterState
from .scoring import create_empty_letter, score

EMOJI = {
    LetterState.MATCH: "\U0001F7E9",    # green square
    LetterState.PRESENT: "\U0001F7E8",  # yellow square
    LetterState.MISS: "\U0001F7E5",     # red square
}


def filler_row() -> BoardRow:
    return BoardRow(letters=[create_empty_letter() for _ in range(WORD_LENGTH)])


def project(game: Game) -> Board:
    """
    Projects ``game`` onto a board of TOTAL_GUESSES rows.

    Guessed rows are re-scored against the secret word; the rest are blank
    filler rows. The secret word is only attached once the game is over.
    """
    rows: List[BoardRow] = [
        BoardRow(letters=score(guess.guess, game.word))
        for guess in game.guesses[:TOTAL_GUESSES]
    ]
    current_guess = len(rows)
    rows.extend(filler_row() for _ in range(TOTAL_GUESSES - current_guess))

    return Board(
        game_id=game.id,
        status=game.status,
        current_guess=current_guess,
        rows=rows,
        created_at=game.created_at,
        updated_at=game.updated_at,
        word=game.word if game.is_complete else None,
    )


def emoji_row(row: BoardRow) -> str:
    emoji = []
    for letter in row.letters:
        if letter.state not in EMOJI:
            raise ValueError(f"Unknown letter state: {letter.state}")
        emoji.append(EMOJI[letter.state])
    return " ".join(emoji)


def board_to_emoji(board: Board) -> str:
    """Shareable summary of the guessed rows, one line per guess."""
    return "\n".join(emoji_row(row) for row in board.rows[:board.current_guess])
