"""
Dice Duel - Game Registry

The keyed, in-memory store of every game in flight, and the one place that
serializes writes.

Locking:
    - A registry lock guards the id -> state and id -> lock maps. It is held
      only for lookups, inserts and listings, never while an existing game
      is being played.
    - Each game has its own lock. A mutating call holds it for the whole
      read / compute / store cycle, so at most one mutation per game is in
      flight and unrelated games never contend.
    - States are immutable, so readers take the stored state as-is and
      always see a complete game.
"""

from __future__ import annotations

import logging
import random
import threading
from contextlib import contextmanager
from typing import Callable, Iterator, Sequence

from src.config.settings import Settings
from src.engine.attack import AttackOutcome
from src.engine.base import DEFAULT_STARTING_DICE
from src.engine.errors import GameNotFound
from src.engine.game import GameState
from src.engine.round import RoundManager
from src.engine.turn import TurnController
from src.realtime.events import EventPayload, GameEvent
from src.realtime.subscriptions import ChannelManager
from src.registry.lobby import LatestGames, generate_game_id
from src.registry.player import PlayerIndex

logger = logging.getLogger(__name__)


class GameRegistry:
    """Owns all GameStates and their locks."""

    def __init__(
        self,
        *,
        default_starting_dice: Sequence[int] = DEFAULT_STARTING_DICE,
        latest_games_limit: int = 10,
        rng: random.Random | None = None,
        channels: ChannelManager | None = None,
        id_factory: Callable[[set[str]], str] | None = None,
    ) -> None:
        self._games: dict[str, GameState] = {}
        self._game_locks: dict[str, threading.Lock] = {}
        self._lock = threading.Lock()
        self._default_starting_dice = tuple(default_starting_dice)
        self._rng = rng
        self._id_factory = id_factory or generate_game_id
        self._players = PlayerIndex()
        self._latest = LatestGames(latest_games_limit)
        self.channels = channels

    @classmethod
    def from_settings(
        cls, settings: Settings, channels: ChannelManager | None = None
    ) -> "GameRegistry":
        """Build a registry from application settings."""
        rng = random.Random(settings.rng_seed) if settings.rng_seed is not None else None
        return cls(
            default_starting_dice=settings.default_starting_dice,
            latest_games_limit=settings.latest_games_limit,
            rng=rng,
            channels=channels,
        )

    # -- internals -------------------------------------------------------

    def _get(self, game_id: str) -> GameState:
        with self._lock:
            state = self._games.get(game_id)
        if state is None:
            raise GameNotFound(game_id)
        return state

    @contextmanager
    def _locked(self, game_id: str) -> Iterator[GameState]:
        """Hold the game's lock and yield its current state."""
        with self._lock:
            game_lock = self._game_locks.get(game_id)
        if game_lock is None:
            raise GameNotFound(game_id)
        with game_lock:
            yield self._get(game_id)

    def _store(self, state: GameState) -> None:
        with self._lock:
            self._games[state.id] = state

    def _publish(
        self,
        event: GameEvent,
        state: GameState,
        player_id: str | None = None,
        **data,
    ) -> None:
        if self.channels is None:
            return
        self.channels.publish(
            EventPayload(event=event, game_id=state.id, player_id=player_id, data=data)
        )

    # -- mutating operations ---------------------------------------------

    def create_game(
        self, creator: str, starting_dice: Sequence[int] | None = None
    ) -> GameState:
        """Create a game with ``creator`` in seat 0; returns the new state."""
        sizes = self._default_starting_dice if starting_dice is None else starting_dice

        # the registry lock covers only picking the id and inserting
        draft = TurnController.create_game("", creator, sizes, rng=self._rng)

        with self._lock:
            game_id = self._id_factory(set(self._games))
            state = draft.replace(id=game_id)
            self._games[game_id] = state
            self._game_locks[game_id] = threading.Lock()

        self._players.add(creator, game_id)
        self._latest.add(game_id)
        logger.info("Game %s created by %s with dice %s", game_id, creator, list(sizes))
        self._publish(GameEvent.GAME_CREATED, state, creator)
        return state

    def join_game(
        self, game_id: str, joiner: str, starting_dice: Sequence[int] | None = None
    ) -> GameState:
        """Seat ``joiner`` in the open slot."""
        with self._locked(game_id) as state:
            joined = TurnController.join_game(state, joiner, starting_dice, rng=self._rng)
            self._store(joined)

        self._players.add(joiner, game_id)
        logger.info("Player %s joined game %s", joiner, game_id)
        self._publish(GameEvent.PLAYER_JOINED, joined, joiner)
        return joined

    def attack(
        self,
        game_id: str,
        caller: str,
        attacker_die_indices: Sequence[int],
        defender_die_index: int,
    ) -> tuple[GameState, AttackOutcome]:
        """Resolve an attack; the state is only replaced when it succeeds."""
        with self._locked(game_id) as state:
            new_state, outcome = TurnController.attack(
                state, caller, attacker_die_indices, defender_die_index, rng=self._rng
            )
            if outcome.success:
                self._store(new_state)

        logger.debug(
            "Game %s: %s %s attack %s -> %d %s",
            game_id, caller, outcome.kind.value, list(attacker_die_indices),
            defender_die_index, "succeeded" if outcome.success else "failed",
        )

        if not outcome.success:
            self._publish(
                GameEvent.ATTACK_FAILED, new_state, caller,
                attacker_die_indices=list(attacker_die_indices),
                defender_die_index=defender_die_index,
            )
            return new_state, outcome

        self._publish(
            GameEvent.ATTACK_SUCCEEDED, new_state, caller,
            kind=outcome.kind.value,
            captured_size=outcome.captured.size,
        )
        if new_state.is_round_over:
            self._publish(
                GameEvent.ROUND_WON, new_state, caller,
                round=new_state.round,
                wins=list(new_state.wins),
            )
        return new_state, outcome

    def pass_turn(self, game_id: str, caller: str) -> GameState:
        """Pass when the caller has no legal attack."""
        with self._locked(game_id) as state:
            passed = TurnController.pass_turn(state, caller)
            self._store(passed)

        logger.debug("Game %s: %s passed", game_id, caller)
        self._publish(GameEvent.TURN_PASSED, passed, caller)
        return passed

    def start_next_round(self, game_id: str, caller: str) -> GameState:
        """Start the next round once the current one is over."""
        with self._locked(game_id) as state:
            next_round = RoundManager.start_next_round(state, caller, rng=self._rng)
            self._store(next_round)

        self._publish(GameEvent.ROUND_STARTED, next_round, caller, round=next_round.round)
        return next_round

    # -- queries ---------------------------------------------------------

    def get_status(self, game_id: str) -> GameState:
        """Current state of a game."""
        return self._get(game_id)

    def all_games(self) -> list[GameState]:
        with self._lock:
            return list(self._games.values())

    def list_open_games(self) -> list[GameState]:
        """Games with an empty seat, oldest first."""
        return [state for state in self.all_games() if state.has_open_slot]

    def list_games_awaiting_player(self, identity: str) -> list[GameState]:
        """Games where it is currently ``identity``'s turn to act."""
        return [state for state in self.all_games() if state.is_turn_of(identity)]

    def list_player_games(self, identity: str) -> list[GameState]:
        """Every game ``identity`` created or joined, in join order."""
        return self._states_for(self._players.list_by_player(identity))

    def list_latest_games(self) -> list[GameState]:
        """Most recently created games, newest last."""
        return self._states_for(self._latest.ids())

    def _states_for(self, game_ids: Sequence[str]) -> list[GameState]:
        with self._lock:
            return [self._games[gid] for gid in game_ids if gid in self._games]

    def __len__(self) -> int:
        with self._lock:
            return len(self._games)

    def __contains__(self, game_id: object) -> bool:
        with self._lock:
            return game_id in self._games
