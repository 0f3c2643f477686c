"""
Tests for Ryan-Foster pair selection and the incumbent.
"""

import math
import threading

import numpy as np
import pytest

from binpack_bp.core.column import Column, ColumnPool
from binpack_bp.master import MasterSolution, SolutionStatus
from binpack_bp.solver.branching import (
    BranchingDecision,
    BranchingSelector,
    Incumbent,
)


def make_pool(num_items, patterns):
    """Seeded pool with extra patterns (ids num_items, num_items + 1, ...)."""
    pool = ColumnPool()
    pool.seed_singletons(num_items)
    for items in patterns:
        pool.add(Column(items=frozenset(items)))
    return pool


def make_solution(objective, column_values):
    return MasterSolution(
        status=SolutionStatus.OPTIMAL,
        objective_value=objective,
        column_values=column_values,
    )


# =============================================================================
# Incumbent
# =============================================================================

class TestIncumbent:
    """Tests for Incumbent."""

    def test_starts_unset(self):
        incumbent = Incumbent()
        assert incumbent.value == math.inf
        assert not incumbent.is_set

    def test_only_strict_improvements(self):
        incumbent = Incumbent(tolerance=1e-6)

        assert incumbent.update(5.0)
        assert not incumbent.update(5.0)
        assert not incumbent.update(5.0 - 1e-9)
        assert not incumbent.update(6.0)
        assert incumbent.update(4.0)
        assert incumbent.value == 4.0
        assert incumbent.is_set

    def test_concurrent_updates_keep_minimum(self):
        incumbent = Incumbent()
        candidates = [float(v) for v in range(50, 10, -1)]

        threads = [
            threading.Thread(target=incumbent.update, args=(value,))
            for value in candidates
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert incumbent.value == 11.0


# =============================================================================
# Pair coverage
# =============================================================================

class TestPairCoverage:
    """Tests for the z matrix."""

    def test_upper_triangle(self):
        pool = make_pool(4, [{0, 1, 2}, {1, 3}])
        selector = BranchingSelector(4, Incumbent())
        z = selector.compute_pair_coverage(pool, {4: 0.5, 5: 0.25})

        assert z.shape == (4, 4)
        assert z[0, 1] == pytest.approx(0.5)
        assert z[0, 2] == pytest.approx(0.5)
        assert z[1, 2] == pytest.approx(0.5)
        assert z[1, 3] == pytest.approx(0.25)
        assert z[0, 3] == 0.0
        # lower triangle and diagonal stay empty
        assert np.all(np.tril(z) == 0.0)

    def test_seeds_ignored(self):
        pool = make_pool(3, [])
        selector = BranchingSelector(3, Incumbent())
        z = selector.compute_pair_coverage(pool, {0: 1.0, 1: 1.0, 2: 1.0})
        assert not z.any()


# =============================================================================
# Selection
# =============================================================================

class TestBranchingSelector:
    """Tests for BranchingSelector.select."""

    def test_fractional_pair_selected(self):
        """Patterns {0,1}, {1,2}, {0,2} at 0.5: first pair wins ties."""
        pool = make_pool(3, [{0, 1}, {1, 2}, {0, 2}])
        incumbent = Incumbent()
        selector = BranchingSelector(3, incumbent)
        decision = selector.select(make_solution(1.5, {3: 0.5, 4: 0.5, 5: 0.5}), pool)

        assert decision.pair == (0, 1)
        assert decision.delta == pytest.approx(0.0)
        assert decision.z_value == pytest.approx(0.5)
        assert not decision.is_integral
        assert not incumbent.is_set

    def test_closest_to_half_wins(self):
        pool = make_pool(4, [{0, 1}, {2, 3}])
        selector = BranchingSelector(4, Incumbent())
        decision = selector.select(
            make_solution(3.0, {4: 0.8, 5: 0.4, 0: 0.2, 1: 0.2, 2: 0.6, 3: 0.6}),
            pool,
        )
        assert decision.pair == (2, 3)
        assert decision.delta == pytest.approx(0.1)

    def test_strict_tie_break(self):
        """A later pair must be better by more than the tolerance."""
        pool = make_pool(4, [{0, 1}, {2, 3}])
        selector = BranchingSelector(4, Incumbent(), tolerance=1e-6)
        decision = selector.select(
            make_solution(3.0, {4: 0.3, 5: 0.7 + 1e-9}),
            pool,
        )
        assert decision.pair == (0, 1)

    def test_integral_updates_incumbent(self):
        pool = make_pool(3, [{0, 1}])
        incumbent = Incumbent()
        selector = BranchingSelector(3, incumbent)
        decision = selector.select(make_solution(2.0, {3: 1.0, 2: 1.0}), pool)

        assert decision == BranchingDecision(pair=None, delta=0.5)
        assert decision.is_integral
        assert incumbent.value == 2.0

    def test_integral_does_not_worsen_incumbent(self):
        pool = make_pool(3, [])
        incumbent = Incumbent()
        incumbent.update(2.0)
        selector = BranchingSelector(3, incumbent)
        decision = selector.select(make_solution(3.0, {0: 1.0, 1: 1.0, 2: 1.0}), pool)

        assert decision.is_integral
        assert incumbent.value == 2.0

    def test_single_item_is_integral(self):
        """With one item there is no pair to branch on."""
        pool = make_pool(1, [])
        incumbent = Incumbent()
        selector = BranchingSelector(1, incumbent)
        decision = selector.select(make_solution(1.0, {0: 1.0}), pool)

        assert decision.is_integral
        assert incumbent.value == 1.0
