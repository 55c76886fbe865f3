"""
Dice Duel - Input Validation Utilities

Provides validation functions for game engine inputs. All validators
either return validated data or raise a descriptive GameError.
"""

from typing import Sequence

from src.engine.errors import (
    DuplicateDieIndex,
    EmptyAttackSelection,
    InvalidDieIndex,
    InvalidIdentity,
    InvalidStartingDice,
)

# Engine-level limits on a starting-dice list; the game rules themselves set none.
MAX_POOL_SIZE = 20
MAX_DIE_SIZE = 100


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_starting_dice(sizes: Sequence[int]) -> tuple[int, ...]:
    """
    Validate and normalize a starting-dice specification.

    Args:
        sizes: Face counts, one per die

    Returns:
        Validated face counts as a tuple

    Raises:
        InvalidStartingDice: If the list is empty, too long, or holds a
            face count that is not a positive integer
    """
    if isinstance(sizes, (str, bytes)):
        raise InvalidStartingDice("Starting dice must be a list of face counts.")

    sizes_tuple = tuple(sizes)
    if not sizes_tuple:
        raise InvalidStartingDice("At least one starting die required.")

    if len(sizes_tuple) > MAX_POOL_SIZE:
        raise InvalidStartingDice(
            f"At most {MAX_POOL_SIZE} starting dice allowed, got {len(sizes_tuple)}."
        )

    for i, size in enumerate(sizes_tuple):
        if not _is_int(size):
            raise InvalidStartingDice(
                f"Die size at index {i} must be an integer, got {type(size).__name__}."
            )
        if not (1 <= size <= MAX_DIE_SIZE):
            raise InvalidStartingDice(
                f"Die size at index {i} is {size}, must be between 1 and {MAX_DIE_SIZE}."
            )

    return sizes_tuple


def validate_identity(identity: str) -> str:
    """Player identities must be non-blank strings."""
    if not isinstance(identity, str) or not identity.strip():
        raise InvalidIdentity("Player identity must be a non-empty string.")
    return identity


def validate_die_index(index: int, pool_size: int, side: str = "defender") -> int:
    """
    Validate a single die index against a pool of ``pool_size`` dice.

    Raises:
        InvalidDieIndex: If the index is not an integer inside the pool
    """
    if not _is_int(index):
        raise InvalidDieIndex(
            f"{side.capitalize()} die index must be an integer, got {type(index).__name__}."
        )
    if not (0 <= index < pool_size):
        raise InvalidDieIndex(
            f"{side.capitalize()} die index {index} is out of range. "
            f"Must be between 0 and {pool_size - 1}."
        )
    return index


def validate_attack_selection(indices: Sequence[int], pool_size: int) -> tuple[int, ...]:
    """
    Validate the attacker's chosen dice.

    Checks run in order: empty selection, type and duplicates, then range.

    Returns:
        The indices as a tuple, in the order given

    Raises:
        EmptyAttackSelection: No dice selected
        DuplicateDieIndex: The same die was selected twice
        InvalidDieIndex: An index falls outside the attacker's pool
    """
    indices_tuple = tuple(indices) if indices is not None else tuple()
    if not indices_tuple:
        raise EmptyAttackSelection()

    seen: set[int] = set()
    for idx in indices_tuple:
        if not _is_int(idx):
            raise InvalidDieIndex(
                f"Attacker die index must be an integer, got {type(idx).__name__}."
            )
        if idx in seen:
            raise DuplicateDieIndex(f"Die index {idx} selected more than once.")
        seen.add(idx)

    for idx in indices_tuple:
        validate_die_index(idx, pool_size, side="attacker")

    return indices_tuple
