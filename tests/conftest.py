"""
Shared pytest fixtures.

Logs are redirected to a temporary directory before the package is imported,
since the game logger opens its file at import time.
"""

import datetime
import os
import random
import tempfile

os.environ.setdefault('LOG_DIR', tempfile.mkdtemp(prefix='daily_wordle_logs_'))

import mongomock  # noqa: E402
import pytest  # noqa: E402

from daily_wordle.services.dictionary import WordDictionary  # noqa: E402
from daily_wordle.services.game_service import GameService  # noqa: E402
from daily_wordle.services.repository import InMemoryGameRepository, MongoGameRepository  # noqa: E402
from daily_wordle.services.scheduler import InMemoryJobStore, MongoJobStore  # noqa: E402

SECRET_WORD = "smelt"

# Distinct, guessable, none of them the secret word
NON_WINNING_GUESSES = ["about", "basic", "boost", "colon", "solid", "guard"]


class FakeClock:
    """Callable clock whose time only moves when told to."""

    def __init__(self, now: datetime.datetime):
        self.now = now

    def __call__(self) -> datetime.datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += datetime.timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock(datetime.datetime(2024, 3, 1, 9, 30))


@pytest.fixture
def dictionary():
    """Single-answer dictionary so every new game's secret word is known."""
    return WordDictionary(
        valid=[SECRET_WORD],
        invalid=NON_WINNING_GUESSES + ["crane", "light"],
        rng=random.Random(7),
    )


@pytest.fixture
def mongo_db():
    return mongomock.MongoClient().daily_wordle_test


@pytest.fixture(params=["memory", "mongo"])
def repository(request, mongo_db):
    if request.param == "memory":
        return InMemoryGameRepository()
    return MongoGameRepository(mongo_db)


@pytest.fixture(params=["memory", "mongo"])
def job_store(request, mongo_db):
    if request.param == "memory":
        return InMemoryJobStore()
    return MongoJobStore(mongo_db)


@pytest.fixture
def scheduler():
    return InMemoryJobStore()


@pytest.fixture
def game_service(dictionary, scheduler, clock):
    return GameService(InMemoryGameRepository(), scheduler, dictionary, clock=clock)
