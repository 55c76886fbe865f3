"""
Dice Duel - Round Manager

Round Rules:
    - A round ends the moment either pool is emptied by a capture
    - The attacker who emptied the pool wins the round (+1 win) and keeps
      the turn, so they also open the next round
    - Starting the next round rerolls both pools from each seat's starting
      dice, clears captures and increments the round counter
    - Wins are never reset; there is no round limit
"""

import logging
import random
from dataclasses import replace

from src.engine.base import DicePool
from src.engine.errors import InvariantViolation, NotAPlayer, RoundNotOver
from src.engine.game import GameState

logger = logging.getLogger(__name__)


class RoundManager:
    """Stateless round bookkeeping on immutable game states."""

    @classmethod
    def settle(cls, state: GameState, attacker_index: int) -> GameState:
        """
        Apply the end-of-attack bookkeeping after a successful attack.

        Either hands the turn to the opponent, or, when the defender's pool
        is now empty, records the round win and freezes the turn.
        """
        defender_index = 1 - attacker_index
        defender = state.players[defender_index]

        if not defender.pool.is_empty:
            return state.replace(current_player_index=defender_index)

        attacker = state.players[attacker_index]
        winner = replace(attacker, wins=attacker.wins + 1)
        settled = state.with_slot(attacker_index, winner)
        if not settled.is_round_over:
            raise InvariantViolation(f"Game {state.id} emptied a pool but round is not over")

        logger.info(
            "Game %s round %d won by %s (wins %s)",
            state.id, state.round, attacker.identity, settled.wins,
        )
        return settled

    @classmethod
    def round_winner_index(cls, state: GameState) -> int | None:
        """Seat whose pool survived the current round, or None if still running."""
        if not state.is_round_over:
            return None
        for i, slot in enumerate(state.players):
            if not slot.pool.is_empty:
                return i
        return None

    @classmethod
    def start_next_round(
        cls,
        state: GameState,
        caller: str,
        rng: random.Random | None = None,
    ) -> GameState:
        """
        Begin a fresh round. Either seated player may call this.

        Raises:
            NotAPlayer: Caller holds no seat
            RoundNotOver: The current round is still being played
        """
        if state.slot_index_of(caller) is None:
            raise NotAPlayer(caller, state.id)
        if not state.is_round_over:
            raise RoundNotOver()

        finished_scores = state.scores
        next_state = state
        for i, slot in enumerate(state.players):
            fresh = replace(slot, pool=DicePool.roll(slot.starting_dice, rng), captured=())
            next_state = next_state.with_slot(i, fresh)

        next_state = next_state.replace(
            round=state.round + 1,
            round_scores=state.round_scores + (finished_scores,),
        )
        logger.info("Game %s starting round %d", state.id, next_state.round)
        return next_state
