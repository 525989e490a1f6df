"""Tests for the daily game lifecycle."""

import datetime

import pytest

from daily_wordle.config.game_settings import TOTAL_GUESSES
from daily_wordle.models.game import GameStatus, Ok, Rejected, RejectionReason
from daily_wordle.services.game_service import GameService, end_of_day
from daily_wordle.services.repository import InMemoryGameRepository, StaleGameError
from daily_wordle.services.scheduler import InMemoryJobStore

from conftest import NON_WINNING_GUESSES, SECRET_WORD

USER = "user-1"


def _guess_count(service, user=USER):
    return len(service.resolve_todays_game(user).guesses)


class TestResolveTodaysGame:
    def test_creates_game_on_first_access(self, game_service, clock):
        game = game_service.resolve_todays_game(USER)

        assert game.user_id == USER
        assert game.word == SECRET_WORD
        assert game.status is GameStatus.EMPTY
        assert game.day == clock.now.date()
        assert game.guesses == []

    def test_schedules_completion_at_end_of_day(self, game_service, scheduler, clock):
        game = game_service.resolve_todays_game(USER)

        job = scheduler.get(game.id)
        assert job is not None
        assert job.run_at == datetime.datetime.combine(clock.now.date(), datetime.time.max)

    def test_same_day_returns_same_game(self, game_service, scheduler, clock):
        first = game_service.resolve_todays_game(USER)
        clock.advance(hours=10)
        second = game_service.resolve_todays_game(USER)

        assert first.id == second.id
        assert scheduler.pending_count() == 1

    def test_new_day_gets_new_game(self, game_service, clock):
        first = game_service.resolve_todays_game(USER)
        clock.advance(days=1)
        second = game_service.resolve_todays_game(USER)

        assert first.id != second.id
        assert second.day == first.day + datetime.timedelta(days=1)

    def test_each_user_has_their_own_game(self, game_service):
        assert game_service.resolve_todays_game("a").id != game_service.resolve_todays_game("b").id

    def test_concurrent_creator_wins(self, dictionary, scheduler, clock):
        repository = InMemoryGameRepository()
        service = GameService(repository, scheduler, dictionary, clock=clock)
        existing = repository.create_game(USER, "smelt", clock.now)

        # Simulate losing the race: the lookup misses, the insert collides
        original_find = repository.find_game_for_user_and_day
        calls = []

        def find_once_missing(user_id, day):
            calls.append(day)
            if len(calls) == 1:
                return None
            return original_find(user_id, day)

        repository.find_game_for_user_and_day = find_once_missing

        game = service.resolve_todays_game(USER)

        assert game.id == existing.id
        assert scheduler.pending_count() == 0


class TestCreateGuess:
    def test_non_winning_guesses_run_to_complete(self, game_service):
        statuses = []
        for word in NON_WINNING_GUESSES:
            result = game_service.create_guess(USER, word)
            assert isinstance(result, Ok)
            statuses.append(result.game.status)

        assert statuses == [GameStatus.IN_PROGRESS] * (TOTAL_GUESSES - 1) + [GameStatus.COMPLETE]

    def test_starts_empty_then_in_progress(self, game_service):
        assert game_service.resolve_todays_game(USER).status is GameStatus.EMPTY
        result = game_service.create_guess(USER, "boost")
        assert result.game.status is GameStatus.IN_PROGRESS

    @pytest.mark.parametrize("misses", range(TOTAL_GUESSES))
    def test_secret_word_wins_immediately(self, game_service, misses):
        for word in NON_WINNING_GUESSES[:misses]:
            game_service.create_guess(USER, word)

        result = game_service.create_guess(USER, SECRET_WORD)

        assert isinstance(result, Ok)
        assert result.game.status is GameStatus.WON
        assert len(result.game.guesses) == misses + 1

    def test_guess_is_normalized(self, game_service):
        result = game_service.create_guess(USER, "  BOOST ")

        assert isinstance(result, Ok)
        assert result.game.guess_words == ["boost"]

    def test_duplicate_guess_rejected(self, game_service):
        game_service.create_guess(USER, "boost")

        result = game_service.create_guess(USER, "BOOST")

        assert result == Rejected(RejectionReason.DUPLICATE_GUESS, 'You already guessed "BOOST"')
        assert _guess_count(game_service) == 1

    @pytest.mark.parametrize("word", ["", "so", "boosts"])
    def test_wrong_length_rejected(self, game_service, word):
        result = game_service.create_guess(USER, word)

        assert isinstance(result, Rejected)
        assert result.reason is RejectionReason.INVALID_LENGTH
        assert result.message == "You must guess a word of length 5"
        assert _guess_count(game_service) == 0

    def test_unknown_word_rejected(self, game_service):
        result = game_service.create_guess(USER, "lulze")

        assert result == Rejected(RejectionReason.UNKNOWN_WORD, "LULZE is not a valid word")
        assert _guess_count(game_service) == 0

    def test_rejected_after_win(self, game_service):
        game_service.create_guess(USER, SECRET_WORD)

        result = game_service.create_guess(USER, "boost")

        assert result == Rejected(RejectionReason.GAME_ALREADY_COMPLETE, "Game is already complete")
        assert _guess_count(game_service) == 1

    def test_rejected_after_quota(self, game_service):
        for word in NON_WINNING_GUESSES:
            game_service.create_guess(USER, word)

        result = game_service.create_guess(USER, SECRET_WORD)

        assert isinstance(result, Rejected)
        assert result.reason is RejectionReason.GAME_ALREADY_COMPLETE

    def test_completion_checked_before_word_shape(self, game_service):
        game_service.create_guess(USER, SECRET_WORD)
        result = game_service.create_guess(USER, "xx")
        assert result.reason is RejectionReason.GAME_ALREADY_COMPLETE

    def test_finishing_cancels_completion_job(self, game_service, scheduler):
        game = game_service.resolve_todays_game(USER)
        assert scheduler.get(game.id) is not None

        game_service.create_guess(USER, SECRET_WORD)

        assert scheduler.get(game.id) is None

    def test_losing_a_duplicate_race_reports_duplicate(self, dictionary, scheduler, clock):
        repository = InMemoryGameRepository()
        service = GameService(repository, scheduler, dictionary, clock=clock)
        game = service.resolve_todays_game(USER)

        # Another instance stores the same guess between our read and our write
        original_append = repository.append_guess_and_update_status

        def racing_append(game_id, guess, new_status, expected_count, now):
            repository.append_guess_and_update_status = original_append
            original_append(game_id, guess, GameStatus.IN_PROGRESS, expected_count, now)
            raise StaleGameError("lost the race")

        repository.append_guess_and_update_status = racing_append

        result = service.create_guess(USER, "boost")

        assert result.reason is RejectionReason.DUPLICATE_GUESS
        assert repository.find_game_by_id(game.id).guess_words == ["boost"]

    def test_stale_count_is_retried(self, dictionary, scheduler, clock):
        repository = InMemoryGameRepository()
        service = GameService(repository, scheduler, dictionary, clock=clock)
        game = service.resolve_todays_game(USER)

        # A different guess lands first; ours should still be recorded after it
        original_append = repository.append_guess_and_update_status

        def racing_append(game_id, guess, new_status, expected_count, now):
            repository.append_guess_and_update_status = original_append
            original_append(game_id, "solid", GameStatus.IN_PROGRESS, expected_count, now)
            raise StaleGameError("lost the race")

        repository.append_guess_and_update_status = racing_append

        result = service.create_guess(USER, "boost")

        assert isinstance(result, Ok)
        assert result.game.guess_words == ["solid", "boost"]
        assert repository.find_game_by_id(game.id).guess_words == ["solid", "boost"]

    def test_unexpected_failure_is_a_generic_rejection(self, dictionary, scheduler, clock):
        repository = InMemoryGameRepository()
        service = GameService(repository, scheduler, dictionary, clock=clock)
        service.resolve_todays_game(USER)

        def broken_append(*args, **kwargs):
            raise RuntimeError("connection reset by peer")

        repository.append_guess_and_update_status = broken_append

        result = service.create_guess(USER, "boost")

        assert result.reason is RejectionReason.UNEXPECTED
        assert "connection" not in result.message


class TestHistory:
    def test_get_own_game(self, game_service):
        game = game_service.resolve_todays_game(USER)

        result = game_service.get_game_for_user(USER, game.id)

        assert isinstance(result, Ok)
        assert result.game.id == game.id

    def test_other_users_game_is_not_found(self, game_service):
        game = game_service.resolve_todays_game("someone-else")

        result = game_service.get_game_for_user(USER, game.id)

        assert result == Rejected(RejectionReason.NOT_FOUND, "Game not found")

    def test_missing_game_is_not_found(self, game_service):
        result = game_service.get_game_for_user(USER, "does-not-exist")
        assert result.reason is RejectionReason.NOT_FOUND

    def test_list_games_newest_first_and_hides_open_words(self, game_service, clock):
        game_service.create_guess(USER, SECRET_WORD)
        clock.advance(days=1)
        game_service.create_guess(USER, "boost")

        summaries = game_service.list_games(USER)

        assert [s.status for s in summaries] == [GameStatus.IN_PROGRESS, GameStatus.WON]
        assert summaries[0].word is None
        assert summaries[1].word == SECRET_WORD
        assert [s.guesses for s in summaries] == [1, 1]

    def test_get_todays_board(self, game_service):
        game_service.create_guess(USER, "boost")

        board = game_service.get_todays_board(USER)

        assert board.current_guess == 1
        assert len(board.rows) == TOTAL_GUESSES


class TestCompletionSweep:
    def test_marks_open_game_complete(self, game_service):
        game = game_service.resolve_todays_game(USER)

        assert game_service.mark_complete_if_unfinished(game.id) is True
        assert game_service.resolve_todays_game(USER).status is GameStatus.COMPLETE

    def test_completed_game_takes_no_more_guesses(self, game_service):
        game = game_service.resolve_todays_game(USER)
        game_service.mark_complete_if_unfinished(game.id)

        result = game_service.create_guess(USER, "boost")

        assert result.reason is RejectionReason.GAME_ALREADY_COMPLETE

    def test_won_game_stays_won(self, game_service):
        result = game_service.create_guess(USER, SECRET_WORD)

        assert game_service.mark_complete_if_unfinished(result.game.id) is False
        assert game_service.mark_complete_if_unfinished(result.game.id) is False
        assert game_service.resolve_todays_game(USER).status is GameStatus.WON

    def test_sweep_twice_is_harmless(self, game_service):
        game = game_service.resolve_todays_game(USER)

        assert game_service.mark_complete_if_unfinished(game.id) is True
        assert game_service.mark_complete_if_unfinished(game.id) is False

    def test_missing_game_is_ignored(self, game_service):
        assert game_service.mark_complete_if_unfinished("no-such-game") is False


def test_end_of_day():
    moment = datetime.datetime(2024, 3, 1, 9, 30)
    assert end_of_day(moment) == datetime.datetime(2024, 3, 1, 23, 59, 59, 999999)


def test_scheduler_failure_does_not_block_game_creation(dictionary, clock):
    class BrokenScheduler(InMemoryJobStore):
        def schedule(self, game_id, run_at):
            raise RuntimeError("queue unavailable")

    service = GameService(InMemoryGameRepository(), BrokenScheduler(), dictionary, clock=clock)

    assert service.resolve_todays_game(USER).status is GameStatus.EMPTY
