"""
Game Repository

Persistence for daily games. ``MongoGameRepository`` is the production store;
``InMemoryGameRepository`` keeps games in process memory and is meant for a
single-process deployment and for tests. Both enforce the same guarantees:
one game per (user, day), unique guesses per game, and guess plus status
written in one atomic step.
"""

import copy
import threading
import uuid
from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Dict, List, Optional

from bson.errors import InvalidId
from bson.objectid import ObjectId
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from ..config.game_settings import TOTAL_GUESSES
from ..models.game import Game, GameStatus, Guess, TERMINAL_STATUSES

OPEN_STATUSES = [GameStatus.EMPTY.value, GameStatus.IN_PROGRESS.value]


class GameExistsError(Exception):
    """A game already exists for this user and day."""


class StaleGameError(Exception):
    """The game changed (or closed) since it was read; the update was not applied."""


class GameRepository(ABC):
    """Persistence interface consumed by the game service."""

    @abstractmethod
    def find_game_for_user_and_day(self, user_id: str, day: date) -> Optional[Game]:
        ...

    @abstractmethod
    def create_game(self, user_id: str, word: str, created_at: datetime) -> Game:
        """Create the game for ``created_at``'s day. Raises GameExistsError."""

    @abstractmethod
    def append_guess_and_update_status(self, game_id: str, guess: str, new_status: GameStatus,
                                       expected_count: int, now: datetime) -> Game:
        """
        Atomically append ``guess`` and set ``new_status``.

        Applies only if the game is still open, still holds ``expected_count``
        guesses and does not already contain ``guess``. Raises StaleGameError
        otherwise.
        """

    @abstractmethod
    def find_game_by_id(self, game_id: str) -> Optional[Game]:
        ...

    @abstractmethod
    def find_games_for_user(self, user_id: str) -> List[Game]:
        """All of a user's games, newest first."""

    @abstractmethod
    def mark_complete(self, game_id: str, now: datetime) -> bool:
        """Set COMPLETE if the game is still open. Returns whether it changed."""


def _object_id(game_id: str) -> Optional[ObjectId]:
    try:
        return ObjectId(game_id)
    except (InvalidId, TypeError):
        return None


class MongoGameRepository(GameRepository):
    """
    Stores each game as one document with its guesses embedded, so a guess
    and the status change it causes are a single-document update.
    """

    def __init__(self, database):
        self.games_collection = database.games

        self.games_collection.create_index(
            [("user_id", ASCENDING), ("day", ASCENDING)], unique=True
        )
        self.games_collection.create_index([("user_id", ASCENDING), ("created_at", DESCENDING)])

    @staticmethod
    def _to_game(doc: Dict) -> Game:
        return Game(
            id=str(doc["_id"]),
            user_id=doc["user_id"],
            word=doc["word"],
            day=date.fromisoformat(doc["day"]),
            status=GameStatus(doc["status"]),
            created_at=doc["created_at"],
            updated_at=doc.get("updated_at", doc["created_at"]),
            guesses=[Guess(guess=g["guess"], created_at=g["created_at"]) for g in doc.get("guesses", [])],
        )

    def find_game_for_user_and_day(self, user_id: str, day: date) -> Optional[Game]:
        doc = self.games_collection.find_one({"user_id": user_id, "day": day.isoformat()})
        return self._to_game(doc) if doc else None

    def create_game(self, user_id: str, word: str, created_at: datetime) -> Game:
        game_doc = {
            "user_id": user_id,
            "word": word,
            "day": created_at.date().isoformat(),
            "status": GameStatus.EMPTY.value,
            "created_at": created_at,
            "updated_at": created_at,
            "guesses": [],
            "guess_count": 0,
        }

        try:
            result = self.games_collection.insert_one(game_doc)
        except DuplicateKeyError:
            raise GameExistsError(f"Game already exists for user {user_id} on {game_doc['day']}")

        game_doc["_id"] = result.inserted_id
        return self._to_game(game_doc)

    def append_guess_and_update_status(self, game_id: str, guess: str, new_status: GameStatus,
                                       expected_count: int, now: datetime) -> Game:
        oid = _object_id(game_id)
        if oid is None or expected_count >= TOTAL_GUESSES:
            raise StaleGameError(f"Game {game_id} cannot take another guess")

        doc = self.games_collection.find_one_and_update(
            {
                "_id": oid,
                "status": {"$in": OPEN_STATUSES},
                "guess_count": expected_count,
                "guesses.guess": {"$ne": guess},
            },
            {
                "$push": {"guesses": {"guess": guess, "created_at": now}},
                "$inc": {"guess_count": 1},
                "$set": {"status": new_status.value, "updated_at": now},
            },
            return_document=ReturnDocument.AFTER,
        )

        if doc is None:
            raise StaleGameError(f"Game {game_id} changed before guess '{guess}' was stored")
        return self._to_game(doc)

    def find_game_by_id(self, game_id: str) -> Optional[Game]:
        oid = _object_id(game_id)
        if oid is None:
            return None
        doc = self.games_collection.find_one({"_id": oid})
        return self._to_game(doc) if doc else None

    def find_games_for_user(self, user_id: str) -> List[Game]:
        cursor = self.games_collection.find({"user_id": user_id}).sort("created_at", DESCENDING)
        return [self._to_game(doc) for doc in cursor]

    def mark_complete(self, game_id: str, now: datetime) -> bool:
        oid = _object_id(game_id)
        if oid is None:
            return False
        result = self.games_collection.update_one(
            {"_id": oid, "status": {"$in": OPEN_STATUSES}},
            {"$set": {"status": GameStatus.COMPLETE.value, "updated_at": now}},
        )
        return result.modified_count > 0


class InMemoryGameRepository(GameRepository):
    """
    Process-local game store. Every read returns a copy, so callers hold
    snapshots just as they would with a database.
    """

    def __init__(self):
        self._games: Dict[str, Game] = {}
        self._lock = threading.Lock()

    def find_game_for_user_and_day(self, user_id: str, day: date) -> Optional[Game]:
        with self._lock:
            for game in self._games.values():
                if game.user_id == user_id and game.day == day:
                    return copy.deepcopy(game)
        return None

    def create_game(self, user_id: str, word: str, created_at: datetime) -> Game:
        with self._lock:
            day = created_at.date()
            if any(g.user_id == user_id and g.day == day for g in self._games.values()):
                raise GameExistsError(f"Game already exists for user {user_id} on {day.isoformat()}")

            game = Game(
                id=uuid.uuid4().hex,
                user_id=user_id,
                word=word,
                day=day,
                status=GameStatus.EMPTY,
                created_at=created_at,
                updated_at=created_at,
            )
            self._games[game.id] = game
            return copy.deepcopy(game)

    def append_guess_and_update_status(self, game_id: str, guess: str, new_status: GameStatus,
                                       expected_count: int, now: datetime) -> Game:
        with self._lock:
            game = self._games.get(game_id)
            if (game is None
                    or game.status in TERMINAL_STATUSES
                    or len(game.guesses) != expected_count
                    or expected_count >= TOTAL_GUESSES
                    or guess in game.guess_words):
                raise StaleGameError(f"Game {game_id} changed before guess '{guess}' was stored")

            game.guesses.append(Guess(guess=guess, created_at=now))
            game.status = new_status
            game.updated_at = now
            return copy.deepcopy(game)

    def find_game_by_id(self, game_id: str) -> Optional[Game]:
        with self._lock:
            game = self._games.get(game_id)
            return copy.deepcopy(game) if game else None

    def find_games_for_user(self, user_id: str) -> List[Game]:
        with self._lock:
            games = [copy.deepcopy(g) for g in self._games.values() if g.user_id == user_id]
        return sorted(games, key=lambda g: g.created_at, reverse=True)

    def mark_complete(self, game_id: str, now: datetime) -> bool:
        with self._lock:
            game = self._games.get(game_id)
            if game is None or game.status in TERMINAL_STATUSES:
                return False
            game.status = GameStatus.COMPLETE
            game.updated_at = now
            return True
