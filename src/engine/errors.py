"""
Dice Duel - Engine Errors

Every rejected action raises a GameError subclass. They are ValueErrors so the
engine reads like any other validating Python code, and each carries a stable
``kind`` plus an ``ErrorCategory`` the transport layer can map to its own
status signalling.
"""

from enum import Enum
from typing import Any, ClassVar


class ErrorCategory(Enum):
    """Broad families of recoverable engine errors."""
    NOT_FOUND = "not_found"
    AUTHORIZATION = "authorization"
    CAPACITY = "capacity"
    VALIDATION = "validation"
    PHASE = "phase"


class GameError(ValueError):
    """Base class for recoverable errors reported back to the caller."""

    kind: ClassVar[str] = "GameError"
    category: ClassVar[ErrorCategory] = ErrorCategory.VALIDATION

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        """Structured form: kind, category and human-readable message."""
        return {
            "kind": self.kind,
            "category": self.category.value,
            "message": self.message,
        }


# -- not found ----------------------------------------------------------

class GameNotFound(GameError):
    kind = "GameNotFound"
    category = ErrorCategory.NOT_FOUND

    def __init__(self, game_id: str) -> None:
        super().__init__(f"Game not found: {game_id}")
        self.game_id = game_id


# -- authorization ------------------------------------------------------

class NotYourTurn(GameError):
    kind = "NotYourTurn"
    category = ErrorCategory.AUTHORIZATION

    def __init__(self, message: str = "It is not your turn") -> None:
        super().__init__(message)


class NotAPlayer(NotYourTurn):
    """Caller holds no slot in the game at all."""

    kind = "NotAPlayer"

    def __init__(self, identity: str, game_id: str) -> None:
        super().__init__(f"Player {identity} has not joined game {game_id}")
        self.identity = identity
        self.game_id = game_id


# -- capacity -----------------------------------------------------------

class GameFull(GameError):
    kind = "GameFull"
    category = ErrorCategory.CAPACITY

    def __init__(self, game_id: str) -> None:
        super().__init__(f"Game is full: {game_id}")


class AlreadyJoined(GameError):
    kind = "AlreadyJoined"
    category = ErrorCategory.CAPACITY

    def __init__(self, identity: str, game_id: str) -> None:
        super().__init__(f"Player {identity} has already joined game {game_id}")


# -- validation ---------------------------------------------------------

class InvalidDieIndex(GameError):
    kind = "InvalidDieIndex"


class DuplicateDieIndex(GameError):
    kind = "DuplicateDieIndex"


class EmptyAttackSelection(GameError):
    kind = "EmptyAttackSelection"

    def __init__(self, message: str = "Select at least one attacking die") -> None:
        super().__init__(message)


class InvalidStartingDice(GameError):
    kind = "InvalidStartingDice"


class InvalidIdentity(GameError):
    kind = "InvalidIdentity"


class InvalidAction(GameError):
    kind = "InvalidAction"


# -- phase --------------------------------------------------------------

class GameNotStarted(GameError):
    kind = "GameNotStarted"
    category = ErrorCategory.PHASE

    def __init__(self, game_id: str) -> None:
        super().__init__(f"Game {game_id} is still waiting for an opponent")


class RoundAlreadyOver(GameError):
    kind = "RoundAlreadyOver"
    category = ErrorCategory.PHASE

    def __init__(self, message: str = "Round is over") -> None:
        super().__init__(message)


class RoundNotOver(GameError):
    kind = "RoundNotOver"
    category = ErrorCategory.PHASE

    def __init__(self, message: str = "Round is not over yet") -> None:
        super().__init__(message)


class PassNotAllowed(GameError):
    kind = "PassNotAllowed"
    category = ErrorCategory.PHASE


class InvariantViolation(RuntimeError):
    """Engine state broke one of its own invariants. Always a bug."""
