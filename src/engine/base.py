"""
Dice Duel - Game Engine Base Classes

This module defines the foundational data structures and enums used throughout
the game engine. All classes are immutable (frozen dataclasses) so a game state
can be shared between threads and a rejected action never leaves a partial
mutation behind.
"""

import random
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterator, Sequence

from src.engine.errors import InvalidDieIndex

DEFAULT_STARTING_DICE: tuple[int, ...] = (4, 6, 8, 10, 20)


class GamePhase(Enum):
    """Phases of the turn state machine."""
    AWAITING_OPPONENT = "awaiting_opponent"
    IN_PROGRESS = "in_progress"
    ROUND_OVER = "round_over"


class AttackKind(Enum):
    """Kinds of attack a player can declare."""
    POWER = "power"  # one die, value >= defender
    SKILL = "skill"  # several dice, sum == defender


def roll_die(size: int, rng: random.Random | None = None) -> "Die":
    """Roll a single die with ``size`` faces."""
    source = rng if rng is not None else random
    return Die(size=size, value=source.randint(1, size))


@dataclass(frozen=True)
class Die:
    """
    A rolled die.

    Attributes:
        size: Number of faces
        value: Face showing, between 1 and size
    """
    size: int
    value: int

    def __post_init__(self) -> None:
        """Validate the face value against the face count."""
        if self.size < 1:
            raise ValueError(f"Die size must be positive, got {self.size}.")
        if not (1 <= self.value <= self.size):
            raise ValueError(
                f"Invalid die value {self.value} for d{self.size}. "
                f"Must be between 1 and {self.size}."
            )

    def __str__(self) -> str:
        return f"d{self.size}:{self.value}"


@dataclass(frozen=True)
class DicePool:
    """
    Ordered dice belonging to one player in the current round.

    Indices are positional: capturing a die shifts every later die down by
    one, so an index is only meaningful against the pool it was read from.

    Attributes:
        dice: The dice, in table order
    """
    dice: tuple[Die, ...] = field(default_factory=tuple)

    @classmethod
    def roll(cls, sizes: Sequence[int], rng: random.Random | None = None) -> "DicePool":
        """Roll a fresh pool, one die per face count."""
        return cls(dice=tuple(roll_die(size, rng) for size in sizes))

    @classmethod
    def from_pairs(cls, pairs: Sequence[tuple[int, int]]) -> "DicePool":
        """Build a pool from (size, value) pairs."""
        return cls(dice=tuple(Die(size=s, value=v) for s, v in pairs))

    def __len__(self) -> int:
        return len(self.dice)

    def __getitem__(self, index: int) -> Die:
        return self.dice[self._check_index(index)]

    def __iter__(self) -> Iterator[Die]:
        return iter(self.dice)

    @property
    def values(self) -> tuple[int, ...]:
        """Face values in table order."""
        return tuple(die.value for die in self.dice)

    @property
    def sizes(self) -> tuple[int, ...]:
        """Face counts in table order."""
        return tuple(die.size for die in self.dice)

    @property
    def is_empty(self) -> bool:
        return not self.dice

    def reroll(self, index: int, rng: random.Random | None = None) -> "DicePool":
        """Return a pool with the die at ``index`` rolled again (same size)."""
        index = self._check_index(index)
        dice = list(self.dice)
        dice[index] = roll_die(dice[index].size, rng)
        return DicePool(dice=tuple(dice))

    def capture(self, index: int) -> tuple[Die, "DicePool"]:
        """Remove the die at ``index``; returns it with the shortened pool."""
        index = self._check_index(index)
        captured = self.dice[index]
        remaining = self.dice[:index] + self.dice[index + 1:]
        return captured, DicePool(dice=remaining)

    def _check_index(self, index: int) -> int:
        # bool is an int subclass and negatives would wrap around
        if isinstance(index, bool) or not isinstance(index, int):
            raise InvalidDieIndex(
                f"Die index must be an integer, got {type(index).__name__}."
            )
        if not (0 <= index < len(self.dice)):
            raise InvalidDieIndex(
                f"Die index {index} is out of range for a pool of {len(self.dice)}."
            )
        return index


@dataclass(frozen=True)
class PlayerSlot:
    """
    One of the two seats at a game.

    Attributes:
        identity: Player identity, or None while the seat is empty
        starting_dice: Face counts rolled at the start of every round
        pool: Dice still in play this round
        captured: Sizes of opponent dice captured this round
        wins: Rounds won so far (kept across rounds)
    """
    identity: str | None = None
    starting_dice: tuple[int, ...] = DEFAULT_STARTING_DICE
    pool: DicePool = field(default_factory=DicePool)
    captured: tuple[int, ...] = field(default_factory=tuple)
    wins: int = 0

    @property
    def is_empty(self) -> bool:
        return self.identity is None

    @property
    def score(self) -> int:
        """Sum of captured die sizes this round."""
        return sum(self.captured)

    def with_pool(self, pool: DicePool) -> "PlayerSlot":
        return replace(self, pool=pool)

    def with_capture(self, die: Die) -> "PlayerSlot":
        return replace(self, captured=self.captured + (die.size,))
