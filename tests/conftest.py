"""
Dice Duel - Test Configuration and Fixtures

Common fixtures and test data for all test modules.
"""

import random
from typing import Callable, Sequence

import pytest

from src.engine.base import DicePool, PlayerSlot
from src.engine.game import GameState
from src.realtime.subscriptions import ChannelManager
from src.registry.registry import GameRegistry


# =============================================================================
# DETERMINISTIC DICE
# =============================================================================

class MaxRandom(random.Random):
    """Every roll shows the highest face."""

    def randint(self, a: int, b: int) -> int:
        return b


class MinRandom(random.Random):
    """Every roll shows a 1."""

    def randint(self, a: int, b: int) -> int:
        return a


@pytest.fixture
def max_rng() -> random.Random:
    return MaxRandom()


@pytest.fixture
def min_rng() -> random.Random:
    return MinRandom()


@pytest.fixture
def seeded_rng() -> random.Random:
    return random.Random(1234)


# =============================================================================
# GAME STATE BUILDERS
# =============================================================================

Pairs = Sequence[tuple[int, int]]


def build_state(
    p0: Pairs = ((4, 3), (6, 5), (20, 12)),
    p1: Pairs = ((4, 2), (8, 7), (10, 9)),
    *,
    current: int = 0,
    identities: tuple[str | None, str | None] = ("alice", "bob"),
    captured: tuple[tuple[int, ...], tuple[int, ...]] = ((), ()),
    wins: tuple[int, int] = (0, 0),
    round: int = 0,
    starting_dice: tuple[Sequence[int], Sequence[int]] = ((4, 6, 8, 10, 20), (4, 6, 8, 10, 20)),
    game_id: str = "GAME01",
) -> GameState:
    """Build a GameState with exact dice: pools are (size, value) pairs."""
    slots = tuple(
        PlayerSlot(
            identity=identities[i],
            starting_dice=tuple(starting_dice[i]),
            pool=DicePool.from_pairs(pairs),
            captured=captured[i],
            wins=wins[i],
        )
        for i, pairs in enumerate((p0, p1))
    )
    return GameState(
        id=game_id,
        players=slots,
        current_player_index=current,
        round=round,
    )


@pytest.fixture
def make_state() -> Callable[..., GameState]:
    """Factory fixture around build_state."""
    return build_state


# =============================================================================
# REGISTRY FIXTURES
# =============================================================================

@pytest.fixture
def channels() -> ChannelManager:
    return ChannelManager()


@pytest.fixture
def registry(max_rng, channels) -> GameRegistry:
    """Registry whose dice always roll their highest face."""
    return GameRegistry(rng=max_rng, channels=channels)


@pytest.fixture
def started_game(registry) -> str:
    """A game between alice (seat 0) and bob (seat 1) with default dice."""
    state = registry.create_game("alice")
    registry.join_game(state.id, "bob")
    return state.id
