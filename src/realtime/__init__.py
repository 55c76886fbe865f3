"""
Dice Duel Real-time Sync.

In-process event channels and snapshot polling for live multiplayer clients.
"""

from src.realtime.events import EventPayload, GameEvent, classify_game_change
from src.realtime.subscriptions import ChannelManager
from src.realtime.sync_manager import RealtimeManager

__all__ = [
    "ChannelManager",
    "EventPayload",
    "GameEvent",
    "RealtimeManager",
    "classify_game_change",
]
