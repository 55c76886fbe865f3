"""
Dice Duel - Action Payloads

Pydantic models for the action payloads the transport layer forwards. The
``type`` field selects the action; everything else is validated here before
it reaches the engine.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from src.engine.errors import InvalidAction


class CreateGameAction(BaseModel):
    type: Literal["create_game"] = "create_game"
    starting_dice: list[int] | None = None


class JoinGameAction(BaseModel):
    type: Literal["join_game"] = "join_game"
    starting_dice: list[int] | None = None


class AttackAction(BaseModel):
    """Attacker dice by position in the caller's pool, one defender die."""

    type: Literal["attack"] = "attack"
    attacker_die_indices: list[int]
    defender_die_index: int


class PassAction(BaseModel):
    type: Literal["pass"] = "pass"


class NextRoundAction(BaseModel):
    type: Literal["next_round"] = "next_round"


Action = Annotated[
    Union[CreateGameAction, JoinGameAction, AttackAction, PassAction, NextRoundAction],
    Field(discriminator="type"),
]

_action_adapter: TypeAdapter[Action] = TypeAdapter(Action)


def parse_action(payload: dict[str, Any]) -> Action:
    """
    Validate a raw payload into an action model.

    Raises:
        InvalidAction: Unknown type or malformed fields
    """
    try:
        return _action_adapter.validate_python(payload)
    except ValidationError as exc:
        errors = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'payload'}: {err['msg']}"
            for err in exc.errors()
        )
        raise InvalidAction(f"Invalid action payload: {errors}") from exc
