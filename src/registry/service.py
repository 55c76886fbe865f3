"""
Dice Duel - Game Service

The boundary the transport layer talks to. It takes a caller identity and a
raw action payload, runs the action through the registry and always answers
with an ActionResult: either the updated snapshot or a structured error.
"""

import logging
from typing import Any

from src.engine.errors import GameError, InvalidAction
from src.registry.actions import (
    AttackAction,
    CreateGameAction,
    JoinGameAction,
    NextRoundAction,
    PassAction,
    parse_action,
)
from src.registry.models import ActionResult, GameSnapshot
from src.registry.registry import GameRegistry

logger = logging.getLogger(__name__)


class GameService:
    """Translates payloads into registry calls and errors into results."""

    def __init__(self, registry: GameRegistry) -> None:
        self.registry = registry

    def handle(
        self,
        identity: str,
        payload: dict[str, Any],
        game_id: str | None = None,
    ) -> ActionResult:
        """
        Run one action for ``identity``.

        Args:
            identity: Caller identity, already established by the transport
            payload: Raw action dict with a ``type`` key
            game_id: Target game; required for everything but create_game

        Returns:
            ActionResult with ok=False and error details on any GameError
        """
        try:
            action = parse_action(payload)
            return self._dispatch(identity, action, game_id)
        except GameError as exc:
            logger.info(
                "Rejected %s from %s on game %s: %s",
                payload.get("type") if isinstance(payload, dict) else None,
                identity, game_id, exc.message,
            )
            return ActionResult.failure(exc, game_id)

    def _dispatch(self, identity: str, action: Any, game_id: str | None) -> ActionResult:
        if isinstance(action, CreateGameAction):
            state = self.registry.create_game(identity, action.starting_dice)
            return self._ok(f"Game {state.id} created", state)

        if game_id is None:
            raise InvalidAction(f"Action {action.type} requires a game id")

        if isinstance(action, JoinGameAction):
            state = self.registry.join_game(game_id, identity, action.starting_dice)
            seat = state.slot_index_of(identity)
            return self._ok(
                f"Player {identity} joined game {game_id} as Player {seat + 1}", state
            )

        if isinstance(action, AttackAction):
            state, outcome = self.registry.attack(
                game_id, identity, action.attacker_die_indices, action.defender_die_index
            )
            message = "Attack successful" if outcome.success else "Attack failed"
            if state.is_round_over:
                message += f"; round {state.round} won by {identity}"
            return self._ok(message, state, attack_succeeded=outcome.success)

        if isinstance(action, PassAction):
            state = self.registry.pass_turn(game_id, identity)
            return self._ok(f"Player {identity} passed", state)

        if isinstance(action, NextRoundAction):
            state = self.registry.start_next_round(game_id, identity)
            return self._ok(f"Round {state.round} started", state)

        raise InvalidAction(f"Unsupported action: {action!r}")

    @staticmethod
    def _ok(message: str, state, attack_succeeded: bool | None = None) -> ActionResult:
        return ActionResult(
            ok=True,
            message=message,
            game_id=state.id,
            game=GameSnapshot.from_state(state),
            attack_succeeded=attack_succeeded,
        )

    # -- read helpers ----------------------------------------------------

    def status(self, game_id: str) -> ActionResult:
        """Snapshot of one game, or a GameNotFound result."""
        try:
            state = self.registry.get_status(game_id)
        except GameError as exc:
            return ActionResult.failure(exc, game_id)
        return self._ok("OK", state)

    def open_games(self) -> list[GameSnapshot]:
        return [GameSnapshot.from_state(s) for s in self.registry.list_open_games()]

    def games_awaiting(self, identity: str) -> list[GameSnapshot]:
        return [
            GameSnapshot.from_state(s)
            for s in self.registry.list_games_awaiting_player(identity)
        ]

    def player_games(self, identity: str) -> list[GameSnapshot]:
        return [GameSnapshot.from_state(s) for s in self.registry.list_player_games(identity)]

    def latest_games(self) -> list[GameSnapshot]:
        return [GameSnapshot.from_state(s) for s in self.registry.list_latest_games()]
