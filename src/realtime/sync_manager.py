"""
Dice Duel - Realtime Sync Manager

High-level manager that ties channel subscriptions to the game registry.
Provides snapshot access for clients and a polling fallback that diffs
snapshots when no push channel is available.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any, Callable

from src.realtime.events import EventPayload, classify_game_change
from src.registry.models import GameSnapshot

if TYPE_CHECKING:
    from src.registry.registry import GameRegistry

logger = logging.getLogger(__name__)

Callback = Callable[[EventPayload], None]


class RealtimeManager:
    """Coordinates push subscriptions, polling fallback and snapshots.

    A game may have several subscribers. Push subscribers are registered on
    the registry's channel manager; polled subscribers share one polling
    thread per game. ``unsubscribe`` removes every subscriber of the game.
    """

    def __init__(self, registry: GameRegistry, poll_interval: float = 2.0) -> None:
        self._registry = registry
        self._poll_interval = poll_interval
        self._poll_threads: dict[str, threading.Event] = {}
        self._poll_callbacks: dict[str, list[Callback]] = {}
        self._push_callbacks: dict[str, list[Callback]] = {}
        self._lock = threading.Lock()

    def subscribe(
        self,
        game_id: str,
        on_event: Callback,
        *,
        use_polling_fallback: bool = True,
        poll_interval: float | None = None,
    ) -> None:
        """Subscribe to live updates for a game.

        Attaches to the registry's channel manager when it has one. Otherwise,
        if use_polling_fallback is True, polls the registry instead.

        Args:
            game_id: Game to watch; must exist.
            on_event: Callback receiving EventPayload for each change.
            use_polling_fallback: Fall back to polling without a push channel.
            poll_interval: Seconds between polls (fallback only); defaults to
                the manager's interval. Ignored when the game is already
                being polled.

        Raises:
            GameNotFound: Unknown game id.
            RuntimeError: No push channel and polling fallback disabled.
        """
        self._registry.get_status(game_id)

        channels = self._registry.channels
        if channels is not None:
            channels.subscribe(game_id, on_event)
            with self._lock:
                callbacks = self._push_callbacks.setdefault(game_id, [])
                if on_event not in callbacks:
                    callbacks.append(on_event)
            logger.info("Push subscription active for game %s", game_id)
            return

        if not use_polling_fallback:
            raise RuntimeError("Registry has no channel manager and polling is disabled")

        with self._lock:
            callbacks = self._poll_callbacks.setdefault(game_id, [])
            if on_event not in callbacks:
                callbacks.append(on_event)

        logger.info("Falling back to polling for game %s", game_id)
        interval = self._poll_interval if poll_interval is None else poll_interval
        self._start_polling(game_id, interval)

    def unsubscribe(self, game_id: str) -> None:
        """Drop every push and polled subscriber of a game."""
        with self._lock:
            push_callbacks = self._push_callbacks.pop(game_id, [])
            self._poll_callbacks.pop(game_id, None)

        channels = self._registry.channels
        if channels is not None:
            for callback in push_callbacks:
                channels.unsubscribe(game_id, callback)
        self._stop_polling(game_id)

    def get_snapshot(self, game_id: str) -> dict[str, Any]:
        """Fetch the current full state of a game as a plain dict.

        Useful for the initial render on subscribe and for reconciliation
        after a client reconnects.
        """
        state = self._registry.get_status(game_id)
        return GameSnapshot.from_state(state).model_dump(mode="json")

    @property
    def polled_games(self) -> list[str]:
        with self._lock:
            return list(self._poll_threads.keys())

    def subscriber_count(self, game_id: str) -> int:
        """Number of callbacks this manager holds for a game."""
        with self._lock:
            return (
                len(self._push_callbacks.get(game_id, []))
                + len(self._poll_callbacks.get(game_id, []))
            )

    def shutdown(self) -> None:
        """Clean up all subscriptions and background threads."""
        with self._lock:
            game_ids = (
                set(self._poll_threads) | set(self._poll_callbacks) | set(self._push_callbacks)
            )
        for game_id in game_ids:
            self.unsubscribe(game_id)

    # -- Polling fallback ------------------------------------------------

    def _start_polling(self, game_id: str, interval: float) -> None:
        """Start the game's polling thread unless one is already running."""
        with self._lock:
            if game_id in self._poll_threads:
                return
            stop_event = threading.Event()
            self._poll_threads[game_id] = stop_event

        thread = threading.Thread(
            target=self._poll_loop,
            args=(game_id, interval, stop_event),
            daemon=True,
            name=f"poll-{game_id[:8]}",
        )
        thread.start()

    def _stop_polling(self, game_id: str) -> None:
        """Signal a polling thread to stop."""
        with self._lock:
            stop_event = self._poll_threads.pop(game_id, None)
        if stop_event:
            stop_event.set()

    def _deliver_polled(self, payload: EventPayload) -> None:
        """Hand a polled event to every current polled subscriber."""
        with self._lock:
            callbacks = list(self._poll_callbacks.get(payload.game_id, []))
        for callback in callbacks:
            try:
                callback(payload)
            except Exception:
                logger.exception(
                    "Error delivering %s for game %s", payload.event.name, payload.game_id
                )

    def _poll_loop(
        self,
        game_id: str,
        interval: float,
        stop_event: threading.Event,
    ) -> None:
        """Poll the registry for changes and emit events."""
        last_record: dict[str, Any] | None = None

        while not stop_event.is_set():
            try:
                last_record = self.poll_once(game_id, self._deliver_polled, last_record)
            except Exception:
                logger.exception("Polling error for game %s", game_id)

            stop_event.wait(interval)

    def poll_once(
        self,
        game_id: str,
        on_event: Callback,
        last_record: dict[str, Any] | None,
    ) -> dict[str, Any]:
        """Take one snapshot, emit an event if it differs from ``last_record``.

        The first poll only records the baseline.

        Returns:
            The snapshot dict to diff against next time.
        """
        record = self.get_snapshot(game_id)
        if last_record is not None:
            event = classify_game_change(record, last_record)
            if event is not None:
                on_event(EventPayload(
                    event=event,
                    game_id=game_id,
                    data={"game": record},
                ))
        return record
