"""
Dice Duel - Turn Controller

The state machine that decides which actions are legal:

    AWAITING_OPPONENT --join--> IN_PROGRESS
    IN_PROGRESS --successful attack / pass--> IN_PROGRESS (turn toggles)
    IN_PROGRESS --attack empties a pool--> ROUND_OVER (turn frozen)
    ROUND_OVER --start next round--> IN_PROGRESS

All methods are stateless class methods. Each takes a GameState and returns a
new one; a rejected action raises before anything is built, so the caller's
state is never touched.
"""

import random
from dataclasses import replace
from datetime import datetime
from typing import Sequence

from src.engine.attack import AttackOutcome, AttackResolver
from src.engine.base import DEFAULT_STARTING_DICE, DicePool, PlayerSlot
from src.engine.errors import (
    AlreadyJoined,
    GameFull,
    GameNotStarted,
    NotAPlayer,
    NotYourTurn,
    PassNotAllowed,
    RoundAlreadyOver,
)
from src.engine.game import GameState
from src.engine.round import RoundManager
from src.engine.validators import validate_identity, validate_starting_dice


class TurnController:
    """
    Stateless engine for game setup and turn-by-turn play.

    State is passed in and returned, never stored.
    """

    @classmethod
    def create_game(
        cls,
        game_id: str,
        creator: str,
        starting_dice: Sequence[int] = DEFAULT_STARTING_DICE,
        rng: random.Random | None = None,
        created_at: datetime | None = None,
    ) -> GameState:
        """
        Create a game with the creator seated and rolled.

        The empty seat inherits the creator's starting dice unless the
        joiner brings their own.
        """
        validate_identity(creator)
        sizes = validate_starting_dice(starting_dice)

        creator_slot = PlayerSlot(
            identity=creator,
            starting_dice=sizes,
            pool=DicePool.roll(sizes, rng),
        )
        open_slot = PlayerSlot(identity=None, starting_dice=sizes)

        state = GameState(id=game_id, players=(creator_slot, open_slot))
        if created_at is not None:
            state = state.replace(created_at=created_at)
        return state

    @classmethod
    def join_game(
        cls,
        state: GameState,
        joiner: str,
        starting_dice: Sequence[int] | None = None,
        rng: random.Random | None = None,
    ) -> GameState:
        """
        Seat a second player and roll their pool.

        Raises:
            AlreadyJoined: Joiner already holds a seat
            GameFull: No empty seat left
        """
        validate_identity(joiner)
        if state.slot_index_of(joiner) is not None:
            raise AlreadyJoined(joiner, state.id)

        open_index = next(
            (i for i, slot in enumerate(state.players) if slot.is_empty), None
        )
        if open_index is None:
            raise GameFull(state.id)

        slot = state.players[open_index]
        sizes = (
            validate_starting_dice(starting_dice)
            if starting_dice is not None
            else slot.starting_dice
        )
        joined = replace(
            slot,
            identity=joiner,
            starting_dice=sizes,
            pool=DicePool.roll(sizes, rng),
        )
        return state.with_slot(open_index, joined)

    @classmethod
    def require_turn(cls, state: GameState, caller: str) -> int:
        """
        Check the caller may act right now; returns their seat.

        Raises:
            NotAPlayer: Caller holds no seat
            GameNotStarted: Still waiting for an opponent
            RoundAlreadyOver: Only starting the next round is allowed
            NotYourTurn: Caller is seated but it is the other player's turn
        """
        seat = state.slot_index_of(caller)
        if seat is None:
            raise NotAPlayer(caller, state.id)
        if not state.is_game_started:
            raise GameNotStarted(state.id)
        if state.is_round_over:
            raise RoundAlreadyOver()
        if seat != state.current_player_index:
            raise NotYourTurn()
        return seat

    @classmethod
    def attack(
        cls,
        state: GameState,
        caller: str,
        attacker_indices: Sequence[int],
        defender_index: int,
        rng: random.Random | None = None,
    ) -> tuple[GameState, AttackOutcome]:
        """
        Declare an attack for the player to move.

        A failed attack returns the original state unchanged; the same player
        stays on turn and may try something else or pass.

        Returns:
            (new state, outcome)
        """
        attacker_seat = cls.require_turn(state, caller)
        defender_seat = 1 - attacker_seat
        attacker = state.players[attacker_seat]
        defender = state.players[defender_seat]

        attack = AttackResolver.build(
            attacker_indices, defender_index, attacker.pool, defender.pool
        )
        outcome = AttackResolver.resolve(attack, attacker.pool, defender.pool, rng)
        if not outcome.success:
            return state, outcome

        next_state = state.with_slot(
            attacker_seat,
            replace(attacker.with_capture(outcome.captured), pool=outcome.attacker_pool),
        )
        next_state = next_state.with_slot(
            defender_seat, defender.with_pool(outcome.defender_pool)
        )
        return RoundManager.settle(next_state, attacker_seat), outcome

    @classmethod
    def pass_turn(cls, state: GameState, caller: str) -> GameState:
        """
        Hand the turn over without attacking.

        Raises:
            PassNotAllowed: The caller still has a legal attack
        """
        cls.require_turn(state, caller)
        if not state.is_pass_allowed:
            raise PassNotAllowed("A legal attack is available; passing is not allowed")
        return state.replace(current_player_index=state.opponent_index)
