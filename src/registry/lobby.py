"""
Dice Duel - Lobby Helpers

Game id generation and the bounded feed of recently created games.
"""

import secrets
import string
import threading
from collections import deque
from typing import Container


def _generate_code(length: int = 6) -> str:
    """Generate an alphanumeric game code, avoiding ambiguous characters."""
    alphabet = string.ascii_uppercase.replace("O", "").replace("I", "")
    alphabet += string.digits.replace("0", "").replace("1", "")
    return "".join(secrets.choice(alphabet) for _ in range(length))


def generate_game_id(taken: Container[str], length: int = 6) -> str:
    """Generate a code not already present in ``taken``."""
    while True:
        code = _generate_code(length)
        if code not in taken:
            return code


class LatestGames:
    """Thread-safe record of the most recently created game ids, newest last."""

    def __init__(self, limit: int = 10) -> None:
        if limit < 1:
            raise ValueError(f"Latest games limit must be positive, got {limit}.")
        self._ids: deque[str] = deque(maxlen=limit)
        self._lock = threading.Lock()

    @property
    def limit(self) -> int:
        return self._ids.maxlen or 0

    def add(self, game_id: str) -> None:
        with self._lock:
            self._ids.append(game_id)

    def ids(self) -> list[str]:
        with self._lock:
            return list(self._ids)
