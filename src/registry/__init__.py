"""
Dice Duel Game Registry.

In-memory store of in-flight games, per-game locking and the action boundary
handed to the transport layer.
"""

from src.registry.actions import parse_action
from src.registry.lobby import LatestGames, generate_game_id
from src.registry.models import ActionResult, ErrorInfo, GameSnapshot, PlayerView
from src.registry.player import PlayerIndex
from src.registry.registry import GameRegistry
from src.registry.service import GameService

__all__ = [
    "ActionResult",
    "ErrorInfo",
    "GameRegistry",
    "GameService",
    "GameSnapshot",
    "LatestGames",
    "PlayerIndex",
    "PlayerView",
    "generate_game_id",
    "parse_action",
]
