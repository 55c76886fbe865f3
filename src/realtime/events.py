"""
Dice Duel - Realtime Event Definitions

Event types and payloads for game state changes.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any


class GameEvent(Enum):
    """Events that can occur during a game."""

    GAME_CREATED = auto()
    PLAYER_JOINED = auto()
    ATTACK_SUCCEEDED = auto()
    ATTACK_FAILED = auto()
    TURN_PASSED = auto()
    ROUND_WON = auto()
    ROUND_STARTED = auto()
    STATE_UPDATED = auto()


@dataclass
class EventPayload:
    """Wrapper for realtime event data."""

    event: GameEvent
    game_id: str
    player_id: str | None = None
    data: dict[str, Any] = field(default_factory=dict)


def _identities(record: dict[str, Any]) -> list[str | None]:
    return [p.get("identity") for p in record.get("players", [])]


def _captured_total(record: dict[str, Any]) -> int:
    return sum(len(p.get("captured", [])) for p in record.get("players", []))


def classify_game_change(
    record: dict[str, Any], old_record: dict[str, Any]
) -> GameEvent | None:
    """
    Determine the game event between two snapshot dicts.

    Args:
        record: Current snapshot (``GameSnapshot.model_dump()``)
        old_record: Previous snapshot, empty if the game was not seen before

    Returns:
        The most significant event, or None when nothing changed
    """
    if not old_record:
        return GameEvent.GAME_CREATED
    if record == old_record:
        return None

    if _identities(record) != _identities(old_record):
        return GameEvent.PLAYER_JOINED
    if record.get("round", 0) > old_record.get("round", 0):
        return GameEvent.ROUND_STARTED
    if record.get("is_round_over") and not old_record.get("is_round_over"):
        return GameEvent.ROUND_WON
    if _captured_total(record) > _captured_total(old_record):
        return GameEvent.ATTACK_SUCCEEDED
    if record.get("current_player_index") != old_record.get("current_player_index"):
        return GameEvent.TURN_PASSED

    return GameEvent.STATE_UPDATED
