"""
Dice Duel - Attack Resolver Tests

Tests for power and skill attack resolution and legal-attack search.
"""

import time

import pytest

from src.engine.attack import AttackOutcome, AttackResolver, PowerAttack, SkillAttack
from src.engine.base import AttackKind, DicePool, Die
from src.engine.errors import DuplicateDieIndex, EmptyAttackSelection, InvalidDieIndex


@pytest.fixture
def attacker_pool() -> DicePool:
    return DicePool.from_pairs([(4, 3), (6, 5), (8, 2), (20, 15)])


@pytest.fixture
def defender_pool() -> DicePool:
    return DicePool.from_pairs([(4, 4), (10, 7), (20, 16)])


class TestBuild:
    """Tests for turning raw selections into attack variants."""

    def test_single_index_builds_power_attack(self, attacker_pool, defender_pool):
        attack = AttackResolver.build([3], 0, attacker_pool, defender_pool)
        assert attack == PowerAttack(attacker_index=3, defender_index=0)
        assert attack.kind is AttackKind.POWER
        assert attack.attacker_indices == frozenset({3})

    def test_multiple_indices_build_skill_attack(self, attacker_pool, defender_pool):
        attack = AttackResolver.build([0, 2], 1, attacker_pool, defender_pool)
        assert attack == SkillAttack(attacker_indices=frozenset({0, 2}), defender_index=1)
        assert attack.kind is AttackKind.SKILL

    def test_empty_selection(self, attacker_pool, defender_pool):
        with pytest.raises(EmptyAttackSelection):
            AttackResolver.build([], 0, attacker_pool, defender_pool)

    def test_duplicate_indices(self, attacker_pool, defender_pool):
        with pytest.raises(DuplicateDieIndex):
            AttackResolver.build([1, 1], 0, attacker_pool, defender_pool)

    def test_attacker_index_out_of_range(self, attacker_pool, defender_pool):
        with pytest.raises(InvalidDieIndex):
            AttackResolver.build([4], 0, attacker_pool, defender_pool)

    def test_defender_index_out_of_range(self, attacker_pool, defender_pool):
        with pytest.raises(InvalidDieIndex, match="Defender die index 3"):
            AttackResolver.build([0], 3, attacker_pool, defender_pool)

    def test_skill_attack_needs_two_dice(self):
        with pytest.raises(ValueError, match="at least two"):
            SkillAttack(attacker_indices=frozenset({1}), defender_index=0)


class TestPowerAttack:
    """Power attack: attacker value >= defender value."""

    def test_greater_value_succeeds(self, attacker_pool, defender_pool):
        attack = PowerAttack(attacker_index=3, defender_index=1)  # 15 vs 7
        assert AttackResolver.is_successful(attack, attacker_pool, defender_pool)

    def test_equal_value_succeeds(self):
        attacker = DicePool.from_pairs([(6, 4)])
        defender = DicePool.from_pairs([(4, 4)])
        attack = PowerAttack(attacker_index=0, defender_index=0)
        assert AttackResolver.is_successful(attack, attacker, defender)

    def test_lower_value_fails(self, attacker_pool, defender_pool):
        attack = PowerAttack(attacker_index=0, defender_index=0)  # 3 vs 4
        assert not AttackResolver.is_successful(attack, attacker_pool, defender_pool)

    def test_resolve_success_captures_and_rerolls(self, attacker_pool, defender_pool, max_rng):
        attack = PowerAttack(attacker_index=3, defender_index=0)
        outcome = AttackResolver.resolve(attack, attacker_pool, defender_pool, max_rng)

        assert outcome.success
        assert outcome.captured == Die(size=4, value=4)
        assert outcome.defender_pool.values == (7, 16)
        assert outcome.attacker_pool.sizes == attacker_pool.sizes
        # only the attacking die was rerolled
        assert outcome.attacker_pool.values == (3, 5, 2, 20)

    def test_resolve_failure_changes_nothing(self, attacker_pool, defender_pool):
        attack = PowerAttack(attacker_index=2, defender_index=2)  # 2 vs 16
        outcome = AttackResolver.resolve(attack, attacker_pool, defender_pool)

        assert isinstance(outcome, AttackOutcome)
        assert not outcome.success
        assert outcome.captured is None
        assert outcome.attacker_pool is attacker_pool
        assert outcome.defender_pool is defender_pool


class TestSkillAttack:
    """Skill attack: sum of attacker values == defender value."""

    def test_exact_sum_succeeds(self, attacker_pool, defender_pool):
        attack = SkillAttack(attacker_indices=frozenset({1, 2}), defender_index=1)  # 5+2 == 7
        assert AttackResolver.is_successful(attack, attacker_pool, defender_pool)

    def test_sum_too_high_fails(self, attacker_pool, defender_pool):
        attack = SkillAttack(attacker_indices=frozenset({0, 1}), defender_index=1)  # 3+5 == 8
        assert not AttackResolver.is_successful(attack, attacker_pool, defender_pool)

    def test_sum_too_low_fails(self, attacker_pool, defender_pool):
        attack = SkillAttack(attacker_indices=frozenset({0, 2}), defender_index=2)  # 3+2 == 5
        assert not AttackResolver.is_successful(attack, attacker_pool, defender_pool)

    def test_three_dice_skill(self, attacker_pool, defender_pool):
        attack = SkillAttack(attacker_indices=frozenset({0, 1, 2}), defender_index=1)  # 10 != 7
        assert not AttackResolver.is_successful(attack, attacker_pool, defender_pool)
        defender = DicePool.from_pairs([(10, 10)])
        attack = SkillAttack(attacker_indices=frozenset({0, 1, 2}), defender_index=0)
        assert AttackResolver.is_successful(attack, attacker_pool, defender)

    def test_resolve_rerolls_every_attacking_die(self, attacker_pool, defender_pool, max_rng):
        attack = SkillAttack(attacker_indices=frozenset({1, 2}), defender_index=1)
        outcome = AttackResolver.resolve(attack, attacker_pool, defender_pool, max_rng)

        assert outcome.success
        assert outcome.kind is AttackKind.SKILL
        assert outcome.captured == Die(size=10, value=7)
        assert outcome.attacker_pool.values == (3, 6, 8, 15)
        assert outcome.defender_pool.sizes == (4, 20)


class TestFindAttacks:
    """Tests for legal-attack search used by the pass rule."""

    def test_find_power_attack(self, attacker_pool, defender_pool):
        attack = AttackResolver.find_power_attack(attacker_pool, defender_pool)
        assert attack is not None
        assert AttackResolver.is_successful(attack, attacker_pool, defender_pool)

    def test_no_power_attack(self):
        attacker = DicePool.from_pairs([(4, 1), (4, 2)])
        defender = DicePool.from_pairs([(20, 19)])
        assert AttackResolver.find_power_attack(attacker, defender) is None

    def test_find_skill_attack(self):
        attacker = DicePool.from_pairs([(4, 1), (4, 2), (6, 4)])
        defender = DicePool.from_pairs([(20, 19), (10, 7)])
        attack = AttackResolver.find_skill_attack(attacker, defender)
        assert attack == SkillAttack(attacker_indices=frozenset({0, 1, 2}), defender_index=1)

    def test_single_die_equal_is_not_skill(self):
        # a one-die match is a power attack, never a skill attack
        attacker = DicePool.from_pairs([(4, 3), (4, 4)])
        defender = DicePool.from_pairs([(20, 3)])
        attack = AttackResolver.find_skill_attack(attacker, defender)
        assert attack is None

    def test_no_legal_attack(self):
        attacker = DicePool.from_pairs([(4, 1), (4, 1)])
        defender = DicePool.from_pairs([(20, 19), (20, 18)])
        assert not AttackResolver.has_legal_attack(attacker, defender)

    def test_has_legal_attack_via_skill_only(self):
        attacker = DicePool.from_pairs([(4, 2), (4, 3)])
        defender = DicePool.from_pairs([(20, 5)])
        assert AttackResolver.find_power_attack(attacker, defender) is None
        assert AttackResolver.has_legal_attack(attacker, defender)

    def test_empty_pools_have_no_attack(self):
        pool = DicePool.from_pairs([(4, 4)])
        assert not AttackResolver.has_legal_attack(DicePool(), pool)
        assert not AttackResolver.has_legal_attack(pool, DicePool())

    def test_skill_attack_using_every_die(self):
        attacker = DicePool.from_pairs([(4, 1)] * 20)
        defender = DicePool.from_pairs([(20, 20)])
        attack = AttackResolver.find_skill_attack(attacker, defender)
        assert attack == SkillAttack(attacker_indices=frozenset(range(20)), defender_index=0)

    def test_skill_attack_skips_unreachable_defender(self):
        attacker = DicePool.from_pairs([(6, 6), (6, 6), (8, 3)])
        defender = DicePool.from_pairs([(20, 10), (20, 9)])
        attack = AttackResolver.find_skill_attack(attacker, defender)
        assert attack == SkillAttack(attacker_indices=frozenset({0, 2}), defender_index=1)

    def test_full_pools_without_attack_resolve_quickly(self):
        # 20 dice showing 4 can never sum to 5
        attacker = DicePool.from_pairs([(4, 4)] * 20)
        defender = DicePool.from_pairs([(20, 5)] * 20)

        started = time.perf_counter()
        assert not AttackResolver.has_legal_attack(attacker, defender)
        assert time.perf_counter() - started < 0.5
