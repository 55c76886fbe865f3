"""
Dice Duel - Attack Resolver

Decides whether a declared attack succeeds and what it does to both pools.

Attack Rules:
    - Power attack: one attacking die whose value is greater than or equal
      to the defending die's value
    - Skill attack: two or more attacking dice whose values sum exactly to
      the defending die's value
    - On success the defending die is captured (scored by its size) and
      every attacking die is rerolled in place
    - On failure nothing changes

All methods are stateless class methods that operate on immutable inputs.
"""

import random
from dataclasses import dataclass
from typing import Sequence, Union

from src.engine.base import AttackKind, DicePool, Die
from src.engine.validators import validate_attack_selection, validate_die_index


@dataclass(frozen=True)
class PowerAttack:
    """A single die against a single die."""
    attacker_index: int
    defender_index: int

    @property
    def kind(self) -> AttackKind:
        return AttackKind.POWER

    @property
    def attacker_indices(self) -> frozenset[int]:
        return frozenset({self.attacker_index})


@dataclass(frozen=True)
class SkillAttack:
    """Several dice whose values add up to a single defending die."""
    attacker_indices: frozenset[int]
    defender_index: int

    def __post_init__(self) -> None:
        if len(self.attacker_indices) < 2:
            raise ValueError("Skill attack needs at least two attacking dice.")

    @property
    def kind(self) -> AttackKind:
        return AttackKind.SKILL


Attack = Union[PowerAttack, SkillAttack]


@dataclass(frozen=True)
class AttackOutcome:
    """
    Result of resolving an attack.

    Attributes:
        success: Whether the attack captured the defending die
        attack: The attack that was resolved
        attacker_pool: Attacker's pool afterwards (used dice rerolled)
        defender_pool: Defender's pool afterwards (captured die removed)
        captured: The captured die, or None on failure
    """
    success: bool
    attack: Attack
    attacker_pool: DicePool
    defender_pool: DicePool
    captured: Die | None = None

    @property
    def kind(self) -> AttackKind:
        return self.attack.kind


class AttackResolver:
    """
    Stateless resolver for power and skill attacks.

    All methods are class methods operating on immutable data.
    """

    MIN_SKILL_DICE = 2

    @classmethod
    def build(
        cls,
        attacker_indices: Sequence[int],
        defender_index: int,
        attacker_pool: DicePool,
        defender_pool: DicePool,
    ) -> Attack:
        """
        Validate a raw selection and turn it into an explicit attack.

        Args:
            attacker_indices: Positions of the attacking dice
            defender_index: Position of the targeted die
            attacker_pool: Attacker's current pool
            defender_pool: Defender's current pool

        Returns:
            PowerAttack for a single die, SkillAttack for two or more

        Raises:
            EmptyAttackSelection, DuplicateDieIndex, InvalidDieIndex
        """
        indices = validate_attack_selection(attacker_indices, len(attacker_pool))
        validate_die_index(defender_index, len(defender_pool), side="defender")

        if len(indices) == 1:
            return PowerAttack(attacker_index=indices[0], defender_index=defender_index)
        return SkillAttack(attacker_indices=frozenset(indices), defender_index=defender_index)

    @classmethod
    def attack_value(cls, attack: Attack, attacker_pool: DicePool) -> int:
        """Sum of the attacking dice values."""
        return sum(attacker_pool[i].value for i in attack.attacker_indices)

    @classmethod
    def is_successful(
        cls,
        attack: Attack,
        attacker_pool: DicePool,
        defender_pool: DicePool,
    ) -> bool:
        """Check the attack against the rules without changing anything."""
        defender_value = defender_pool[attack.defender_index].value
        attack_value = cls.attack_value(attack, attacker_pool)

        if attack.kind is AttackKind.POWER:
            return attack_value >= defender_value
        return attack_value == defender_value

    @classmethod
    def resolve(
        cls,
        attack: Attack,
        attacker_pool: DicePool,
        defender_pool: DicePool,
        rng: random.Random | None = None,
    ) -> AttackOutcome:
        """
        Resolve an attack.

        Steps on success:
        1. Remove the defending die from the defender's pool
        2. Reroll every attacking die in place

        Args:
            attack: A PowerAttack or SkillAttack built against these pools
            attacker_pool: Attacker's current pool
            defender_pool: Defender's current pool
            rng: Optional random source for the rerolls

        Returns:
            AttackOutcome with the updated pools
        """
        if not cls.is_successful(attack, attacker_pool, defender_pool):
            return AttackOutcome(
                success=False,
                attack=attack,
                attacker_pool=attacker_pool,
                defender_pool=defender_pool,
            )

        captured, new_defender_pool = defender_pool.capture(attack.defender_index)

        new_attacker_pool = attacker_pool
        for index in sorted(attack.attacker_indices):
            new_attacker_pool = new_attacker_pool.reroll(index, rng)

        return AttackOutcome(
            success=True,
            attack=attack,
            attacker_pool=new_attacker_pool,
            defender_pool=new_defender_pool,
            captured=captured,
        )

    @classmethod
    def find_power_attack(
        cls,
        attacker_pool: DicePool,
        defender_pool: DicePool,
    ) -> PowerAttack | None:
        """First power attack that would succeed, or None."""
        for a_idx, attacker in enumerate(attacker_pool):
            for d_idx, defender in enumerate(defender_pool):
                if attacker.value >= defender.value:
                    return PowerAttack(attacker_index=a_idx, defender_index=d_idx)
        return None

    @classmethod
    def find_skill_attack(
        cls,
        attacker_pool: DicePool,
        defender_pool: DicePool,
    ) -> SkillAttack | None:
        """
        First skill attack that would succeed, or None.

        Subset-sum over the attacker values, capped at the largest defender
        value. Each reachable (sum, dice used) pair keeps one witness set of
        indices, where dice used is 1 or "2 or more". Runs in
        O(len(attacker) * max defender value).
        """
        if not defender_pool.values:
            return None
        target_max = max(defender_pool.values)

        # (sum, min(dice used, 2)) -> attacker indices reaching it
        reachable: dict[tuple[int, int], tuple[int, ...]] = {}
        for index, value in enumerate(attacker_pool.values):
            if value > target_max:
                continue
            found = [((value, 1), (index,))]
            for (total, used), indices in reachable.items():
                if total + value <= target_max:
                    key = (total + value, min(used + 1, cls.MIN_SKILL_DICE))
                    found.append((key, indices + (index,)))
            for key, indices in found:
                reachable.setdefault(key, indices)

        for d_idx, defender in enumerate(defender_pool):
            indices = reachable.get((defender.value, cls.MIN_SKILL_DICE))
            if indices is not None:
                return SkillAttack(attacker_indices=frozenset(indices), defender_index=d_idx)
        return None

    @classmethod
    def has_legal_attack(cls, attacker_pool: DicePool, defender_pool: DicePool) -> bool:
        """True if any power or skill attack would succeed."""
        if attacker_pool.is_empty or defender_pool.is_empty:
            return False
        if cls.find_power_attack(attacker_pool, defender_pool) is not None:
            return True
        return cls.find_skill_attack(attacker_pool, defender_pool) is not None
