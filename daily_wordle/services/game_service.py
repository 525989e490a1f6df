"""
Game Service

Contains the lifecycle of the daily game: resolving (or creating) today's
game for a user, applying guesses, and closing games when their day ends.
"""

import datetime
from typing import Callable, List, Optional

from ..config.game_settings import TOTAL_GUESSES, WORD_LENGTH
from ..models.game import (
    Board, Game, GameResult, GameStatus, GameSummary, Ok, Rejected, RejectionReason,
)
from ..utils.game_logger import game_logger
from .board import project
from .dictionary import WordDictionary
from .repository import GameExistsError, GameRepository, StaleGameError
from .scheduler import CompletionScheduler
from .scoring import is_winning, score

# How many times a guess is re-validated after losing a write race
MAX_WRITE_ATTEMPTS = 3

GENERIC_FAILURE_MESSAGE = "Something went wrong, please try again"


def end_of_day(moment: datetime.datetime) -> datetime.datetime:
    return datetime.datetime.combine(moment.date(), datetime.time.max)


class GameService:
    """
    Core game service managing each user's daily game.

    This class handles:
    - Resolving today's game for a user, creating it on first access
    - Guess validation, scoring and status transitions
    - Game history lookups scoped to the requesting user
    - The idempotent end-of-day completion sweep

    Args:
        repository: Game persistence
        scheduler: Store for end-of-day completion jobs
        dictionary: Word lists for guess validation and secret words
        clock: Returns the current server-local time
    """

    def __init__(self, repository: GameRepository, scheduler: CompletionScheduler,
                 dictionary: WordDictionary,
                 clock: Callable[[], datetime.datetime] = datetime.datetime.now):
        self.repository = repository
        self.scheduler = scheduler
        self.dictionary = dictionary
        self.clock = clock

    def resolve_todays_game(self, user_id: str) -> Game:
        """
        Returns the user's game for the current day, creating it if needed.
        """
        now = self.clock()
        game = self.repository.find_game_for_user_and_day(user_id, now.date())
        if game is not None:
            return game
        return self._create_game(user_id, now)

    def _create_game(self, user_id: str, now: datetime.datetime) -> Game:
        try:
            game = self.repository.create_game(user_id, self.dictionary.pick_secret_word(), now)
        except GameExistsError:
            # Another request created today's game first
            game = self.repository.find_game_for_user_and_day(user_id, now.date())
            if game is None:
                raise
            return game

        run_at = end_of_day(game.created_at)
        try:
            self.scheduler.schedule(game.id, run_at)
        except Exception as e:
            game_logger.logger.error(f"Failed to schedule completion for game {game.id}: {e}")

        game_logger.log_game_event(game.id, 'game_created', user_id, complete_at=run_at.isoformat())
        return game

    def _check_guess(self, game: Game, guess: str) -> Optional[Rejected]:
        if len(game.guesses) >= TOTAL_GUESSES or game.is_complete:
            return Rejected(RejectionReason.GAME_ALREADY_COMPLETE, "Game is already complete")

        if len(guess) != WORD_LENGTH:
            return Rejected(RejectionReason.INVALID_LENGTH, f"You must guess a word of length {WORD_LENGTH}")

        if not self.dictionary.is_valid_guess(guess):
            return Rejected(RejectionReason.UNKNOWN_WORD, f"{guess.upper()} is not a valid word")

        if guess in game.guess_words:
            return Rejected(RejectionReason.DUPLICATE_GUESS, f'You already guessed "{guess.upper()}"')

        return None

    @staticmethod
    def _next_status(game: Game, guess: str) -> GameStatus:
        if is_winning(score(guess, game.word)):
            return GameStatus.WON
        if len(game.guesses) + 1 >= TOTAL_GUESSES:
            return GameStatus.COMPLETE
        return GameStatus.IN_PROGRESS

    def create_guess(self, user_id: str, guessed_word: str) -> GameResult:
        """
        Applies a guess to the user's game for today.

        Args:
            user_id: Owner of the game
            guessed_word: Raw guess; normalized to lowercase before any check

        Returns:
            Ok with the updated game, or Rejected with the reason and a
            message suitable for showing to the player
        """
        normalized = (guessed_word or "").strip().lower()

        try:
            game = self.resolve_todays_game(user_id)

            for _ in range(MAX_WRITE_ATTEMPTS):
                rejection = self._check_guess(game, normalized)
                if rejection is not None:
                    return rejection

                new_status = self._next_status(game, normalized)
                try:
                    updated = self.repository.append_guess_and_update_status(
                        game.id, normalized, new_status, len(game.guesses), self.clock()
                    )
                except StaleGameError:
                    # Lost a race with another submission; re-check against fresh state
                    game = self.repository.find_game_by_id(game.id)
                    if game is None:
                        return Rejected(RejectionReason.NOT_FOUND, "Game not found")
                    continue

                if updated.is_complete:
                    self._finish(updated)
                return Ok(updated)

            game_logger.logger.warning(f"Gave up on guess for game {game.id} after {MAX_WRITE_ATTEMPTS} conflicts")
            return Rejected(RejectionReason.UNEXPECTED, GENERIC_FAILURE_MESSAGE)

        except Exception as e:
            game_logger.logger.error(f"Failed to record guess for user {user_id}: {type(e).__name__}: {e}")
            return Rejected(RejectionReason.UNEXPECTED, GENERIC_FAILURE_MESSAGE)

    def _finish(self, game: Game):
        event = 'game_won' if game.status is GameStatus.WON else 'game_lost'
        game_logger.log_game_event(
            game.id, event, game.user_id,
            rounds_used=len(game.guesses), target_word=game.word
        )

        try:
            self.scheduler.cancel(game.id)
        except Exception as e:
            # The completion job is idempotent, so a stale one is harmless
            game_logger.logger.warning(f"Failed to cancel completion job for game {game.id}: {e}")

    def get_todays_board(self, user_id: str) -> Board:
        return project(self.resolve_todays_game(user_id))

    def get_game_for_user(self, user_id: str, game_id: str) -> GameResult:
        """
        Looks up a past game. Games owned by someone else are reported as
        not found so their existence is not revealed.
        """
        game = self.repository.find_game_by_id(game_id)
        if game is None or game.user_id != user_id:
            return Rejected(RejectionReason.NOT_FOUND, "Game not found")
        return Ok(game)

    def list_games(self, user_id: str) -> List[GameSummary]:
        summaries = []
        for game in self.repository.find_games_for_user(user_id):
            summaries.append(GameSummary(
                id=game.id,
                date=max(game.created_at, game.updated_at),
                guesses=len(game.guesses),
                status=game.status,
                word=game.word if game.is_complete else None,
            ))
        return summaries

    def mark_complete_if_unfinished(self, game_id: str) -> bool:
        """
        Forces a game to COMPLETE unless it already finished.

        Safe to call any number of times; a missing game is logged and
        ignored. Returns True only when the status was changed.
        """
        game = self.repository.find_game_by_id(game_id)

        if game is None:
            game_logger.logger.info(f"Game {game_id} not found")
            return False

        if game.is_complete:
            game_logger.logger.info(f"Game {game_id} already {game.status.value}")
            return False

        game_logger.logger.info(f"Game {game_id} not complete, marking as complete")
        changed = self.repository.mark_complete(game_id, self.clock())
        if changed:
            game_logger.log_game_event(game_id, 'game_expired', game.user_id, rounds_used=len(game.guesses))
        return changed
