"""
Dice Duel Game Engine.

Pure Python game logic with zero transport/storage dependencies.
Handles dice rolling, power and skill attacks, captures, turns and rounds.
"""

from src.engine.attack import (
    AttackOutcome,
    AttackResolver,
    PowerAttack,
    SkillAttack,
)
from src.engine.base import (
    DEFAULT_STARTING_DICE,
    AttackKind,
    DicePool,
    Die,
    GamePhase,
    PlayerSlot,
    roll_die,
)
from src.engine.game import GameState
from src.engine.round import RoundManager
from src.engine.turn import TurnController

__all__ = [
    # Data Classes
    "Die",
    "DicePool",
    "PlayerSlot",
    "GameState",
    "PowerAttack",
    "SkillAttack",
    "AttackOutcome",
    # Enums
    "AttackKind",
    "GamePhase",
    # Engines
    "AttackResolver",
    "TurnController",
    "RoundManager",
    # Helpers
    "DEFAULT_STARTING_DICE",
    "roll_die",
]
