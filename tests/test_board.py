"""Tests for board projection and the emoji share text."""

import datetime

import pytest

from daily_wordle.config.game_settings import TOTAL_GUESSES, WORD_LENGTH
from daily_wordle.models.game import Game, GameStatus, Guess, LetterState
from daily_wordle.services.board import board_to_emoji, project

from conftest import NON_WINNING_GUESSES, SECRET_WORD

CREATED = datetime.datetime(2024, 3, 1, 9, 30)


def make_game(guesses, status=GameStatus.IN_PROGRESS, word=SECRET_WORD):
    return Game(
        id="game-1",
        user_id="user-1",
        word=word,
        day=CREATED.date(),
        status=status,
        created_at=CREATED,
        updated_at=CREATED,
        guesses=[Guess(guess=g, created_at=CREATED) for g in guesses],
    )


@pytest.mark.parametrize("count", range(TOTAL_GUESSES + 1))
def test_board_is_always_full_size(count):
    board = project(make_game(NON_WINNING_GUESSES[:count]))

    assert len(board.rows) == TOTAL_GUESSES
    assert all(len(row.letters) == WORD_LENGTH for row in board.rows)
    assert board.current_guess == count


def test_guessed_rows_then_filler_rows():
    board = project(make_game(["boost", "solid"]))

    assert "".join(l.letter for l in board.rows[0].letters) == "boost"
    assert "".join(l.letter for l in board.rows[1].letters) == "solid"
    for row in board.rows[2:]:
        assert all(l.state is LetterState.BLANK and l.letter == "" for l in row.letters)


def test_rows_are_rescored_against_the_secret():
    board = project(make_game(["allol"], word="colon"))
    assert [l.state for l in board.rows[0].letters] == [
        LetterState.MISS, LetterState.MISS, LetterState.MATCH, LetterState.MATCH, LetterState.MISS,
    ]


def test_projection_is_repeatable_apart_from_tokens():
    game = make_game(["boost"])
    first, second = project(game), project(game)

    def shape(board):
        return [[(l.letter, l.state) for l in row.letters] for row in board.rows]

    assert shape(first) == shape(second)
    assert first.current_guess == second.current_guess


def test_word_hidden_until_game_over():
    assert project(make_game(["boost"])).word is None
    assert project(make_game(["smelt"], status=GameStatus.WON)).word == SECRET_WORD
    assert project(make_game(NON_WINNING_GUESSES, status=GameStatus.COMPLETE)).word == SECRET_WORD


def test_to_dict_serializes_states():
    data = project(make_game(["boost"])).to_dict()

    assert data["status"] == "IN_PROGRESS"
    assert data["current_guess"] == 1
    assert data["word"] is None
    assert data["rows"][0]["letters"][0]["letter"] == "b"
    assert data["rows"][5]["letters"][0]["state"] == "BLANK"


def test_board_to_emoji_only_covers_real_guesses():
    board = project(make_game(["boost", "smelt"], status=GameStatus.WON, word="smelt"))

    lines = board_to_emoji(board).split("\n")

    assert len(lines) == 2
    # boost vs smelt: "s" is present, "t" matches
    assert lines[0] == " ".join(["\U0001F7E5", "\U0001F7E5", "\U0001F7E5", "\U0001F7E8", "\U0001F7E9"])
    assert lines[1] == " ".join(["\U0001F7E9"] * 5)


def test_board_to_emoji_empty_board():
    assert board_to_emoji(project(make_game([]))) == ""
