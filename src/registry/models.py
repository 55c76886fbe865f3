"""
Dice Duel - Snapshot Models

Pydantic models handed to the transport layer. A GameSnapshot mirrors the
engine's GameState field for field, including the derived flags, so a polling
client can render the whole table from one response.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from src.engine.base import GamePhase, PlayerSlot
from src.engine.errors import GameError
from src.engine.game import GameState


class DieView(BaseModel):
    """A single rolled die."""

    size: int = Field(ge=1)
    value: int = Field(ge=1)

    model_config = {"from_attributes": True}


class PlayerView(BaseModel):
    """One seat at the table."""

    identity: str | None = None
    dice: list[DieView] = Field(default_factory=list)
    captured: list[int] = Field(default_factory=list)
    score: int = 0
    wins: int = 0
    starting_dice: list[int] = Field(default_factory=list)

    model_config = {"from_attributes": True}

    @classmethod
    def from_slot(cls, slot: PlayerSlot) -> "PlayerView":
        return cls(
            identity=slot.identity,
            dice=[DieView.model_validate(die) for die in slot.pool],
            captured=list(slot.captured),
            score=slot.score,
            wins=slot.wins,
            starting_dice=list(slot.starting_dice),
        )


class GameSnapshot(BaseModel):
    """Read-only view of a GameState."""

    id: str
    players: list[PlayerView]
    current_player_index: int
    round: int
    round_scores: list[list[int]] = Field(default_factory=list)
    phase: GamePhase
    is_game_started: bool
    is_round_over: bool
    is_pass_allowed: bool
    created_at: datetime

    model_config = {"from_attributes": True}

    @classmethod
    def from_state(cls, state: GameState) -> "GameSnapshot":
        return cls(
            id=state.id,
            players=[PlayerView.from_slot(slot) for slot in state.players],
            current_player_index=state.current_player_index,
            round=state.round,
            round_scores=[list(scores) for scores in state.round_scores],
            phase=state.phase,
            is_game_started=state.is_game_started,
            is_round_over=state.is_round_over,
            is_pass_allowed=state.is_pass_allowed,
            created_at=state.created_at,
        )

    @property
    def current_identity(self) -> str | None:
        return self.players[self.current_player_index].identity


class ErrorInfo(BaseModel):
    """Structured error: stable kind, category and a readable message."""

    kind: str
    category: str
    message: str

    @classmethod
    def from_error(cls, error: GameError) -> "ErrorInfo":
        return cls.model_validate(error.to_dict())


class ActionResult(BaseModel):
    """Outcome of one action, success or failure."""

    ok: bool
    message: str
    game_id: str | None = None
    game: GameSnapshot | None = None
    attack_succeeded: bool | None = None
    error: ErrorInfo | None = None

    @classmethod
    def failure(cls, error: GameError, game_id: str | None = None) -> "ActionResult":
        return cls(
            ok=False,
            message=error.message,
            game_id=game_id,
            error=ErrorInfo.from_error(error),
        )
