"""
Dice Duel - Player Index

Tracks which games each player identity has created or joined.
"""

import threading


class PlayerIndex:
    """Thread-safe identity -> game ids mapping, in join order."""

    def __init__(self) -> None:
        self._games: dict[str, list[str]] = {}
        self._lock = threading.Lock()

    def add(self, identity: str, game_id: str) -> None:
        """Record that ``identity`` holds a seat in ``game_id``."""
        with self._lock:
            games = self._games.setdefault(identity, [])
            if game_id not in games:
                games.append(game_id)

    def list_by_player(self, identity: str) -> list[str]:
        """Game ids for a player, oldest first."""
        with self._lock:
            return list(self._games.get(identity, []))

    def count(self, identity: str) -> int:
        with self._lock:
            return len(self._games.get(identity, []))
