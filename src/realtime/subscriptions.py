"""
Dice Duel - Channel Subscription Management

In-process publish/subscribe, one channel per game id. The registry publishes
after every action; subscribers (typically the transport layer pushing to
connected clients) receive EventPayloads on the publishing thread.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable

from src.realtime.events import EventPayload

logger = logging.getLogger(__name__)

Callback = Callable[[EventPayload], None]


class ChannelManager:
    """Manages per-game subscriber callbacks.

    Callbacks run on the thread that published the event, outside any game
    lock. A failing callback is logged and skipped; it never affects other
    subscribers or the game itself.
    """

    def __init__(self) -> None:
        self._channels: dict[str, list[Callback]] = {}
        self._lock = threading.Lock()

    def subscribe(self, game_id: str, on_event: Callback) -> None:
        """Register ``on_event`` for every event of ``game_id``."""
        with self._lock:
            callbacks = self._channels.setdefault(game_id, [])
            if on_event in callbacks:
                logger.warning("Callback already subscribed to game %s", game_id)
                return
            callbacks.append(on_event)
        logger.info("Subscribed to game %s (%d listeners)", game_id, len(callbacks))

    def unsubscribe(self, game_id: str, on_event: Callback | None = None) -> None:
        """Remove one callback, or every callback when ``on_event`` is None."""
        with self._lock:
            callbacks = self._channels.get(game_id)
            if not callbacks:
                return
            if on_event is None:
                del self._channels[game_id]
            else:
                if on_event in callbacks:
                    callbacks.remove(on_event)
                if not callbacks:
                    del self._channels[game_id]
        logger.info("Unsubscribed from game %s", game_id)

    def unsubscribe_all(self) -> None:
        """Drop every subscription."""
        with self._lock:
            self._channels.clear()

    def publish(self, payload: EventPayload) -> int:
        """
        Deliver ``payload`` to the game's subscribers.

        Returns:
            Number of callbacks that completed without raising
        """
        with self._lock:
            callbacks = list(self._channels.get(payload.game_id, []))

        delivered = 0
        for callback in callbacks:
            try:
                callback(payload)
                delivered += 1
            except Exception:
                logger.exception(
                    "Error delivering %s for game %s", payload.event.name, payload.game_id
                )
        return delivered

    @property
    def active_subscriptions(self) -> list[str]:
        """Return list of game ids with at least one subscriber."""
        with self._lock:
            return list(self._channels.keys())
