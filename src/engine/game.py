"""
Dice Duel - Game State

The aggregate for a single duel: both seats, whose turn it is, the round
counter and the history of finished rounds. Flags such as ``is_round_over``
and ``is_pass_allowed`` are derived from the fields on every read so they can
never drift out of step with the pools.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any

from src.engine.attack import AttackResolver
from src.engine.base import GamePhase, PlayerSlot
from src.engine.errors import InvariantViolation


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class GameState:
    """
    Complete state of one game.

    Attributes:
        id: Opaque game identifier
        players: Exactly two seats; seat 0 is the creator
        current_player_index: Seat whose turn it is (0 or 1)
        round: Zero-based round counter
        round_scores: (seat 0, seat 1) capture scores of every finished round
        created_at: Creation timestamp (UTC)
    """
    id: str
    players: tuple[PlayerSlot, PlayerSlot]
    current_player_index: int = 0
    round: int = 0
    round_scores: tuple[tuple[int, int], ...] = field(default_factory=tuple)
    created_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        """Enforce the structural invariants."""
        if len(self.players) != 2:
            raise InvariantViolation(
                f"Game {self.id} must have exactly 2 seats, got {len(self.players)}"
            )
        if self.players[0].is_empty and not self.players[1].is_empty:
            raise InvariantViolation(f"Game {self.id} has seat 1 filled before seat 0")
        if self.current_player_index not in (0, 1):
            raise InvariantViolation(
                f"Game {self.id} has invalid current player {self.current_player_index}"
            )
        if self.round < 0:
            raise InvariantViolation(f"Game {self.id} has negative round {self.round}")
        for i, slot in enumerate(self.players):
            if slot.wins < 0:
                raise InvariantViolation(f"Seat {i} of game {self.id} has negative wins")

    # -- derived flags ---------------------------------------------------

    @property
    def is_game_started(self) -> bool:
        return not any(slot.is_empty for slot in self.players)

    @property
    def is_round_over(self) -> bool:
        return self.is_game_started and any(slot.pool.is_empty for slot in self.players)

    @property
    def is_pass_allowed(self) -> bool:
        """True only when the player to move has no legal attack at all."""
        if not self.is_game_started or self.is_round_over:
            return False
        return not AttackResolver.has_legal_attack(
            self.current_slot.pool, self.opponent_slot.pool
        )

    @property
    def phase(self) -> GamePhase:
        if not self.is_game_started:
            return GamePhase.AWAITING_OPPONENT
        if self.is_round_over:
            return GamePhase.ROUND_OVER
        return GamePhase.IN_PROGRESS

    @property
    def has_open_slot(self) -> bool:
        return any(slot.is_empty for slot in self.players)

    @property
    def scores(self) -> tuple[int, int]:
        return (self.players[0].score, self.players[1].score)

    @property
    def wins(self) -> tuple[int, int]:
        return (self.players[0].wins, self.players[1].wins)

    # -- seat helpers ----------------------------------------------------

    @property
    def opponent_index(self) -> int:
        return 1 - self.current_player_index

    @property
    def current_slot(self) -> PlayerSlot:
        return self.players[self.current_player_index]

    @property
    def opponent_slot(self) -> PlayerSlot:
        return self.players[self.opponent_index]

    @property
    def identities(self) -> tuple[str | None, str | None]:
        return (self.players[0].identity, self.players[1].identity)

    def slot_index_of(self, identity: str) -> int | None:
        """Seat held by ``identity``, or None."""
        for i, slot in enumerate(self.players):
            if not slot.is_empty and slot.identity == identity:
                return i
        return None

    def is_turn_of(self, identity: str) -> bool:
        return (
            self.is_game_started
            and not self.is_round_over
            and self.current_slot.identity == identity
        )

    def with_slot(self, index: int, slot: PlayerSlot) -> "GameState":
        players = list(self.players)
        players[index] = slot
        return replace(self, players=tuple(players))

    def replace(self, **changes: Any) -> "GameState":
        return replace(self, **changes)
