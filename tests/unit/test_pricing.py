"""
Tests for the pricing module.

This module tests:
- PricingSolution dataclass
- HiGHSPricingProblem (knapsack MIP with branching constraints)
- Pricing/Master integration
"""

import pytest

from binpack_bp.core.column import Column, ColumnPool
from binpack_bp.core.node import BranchNode
from binpack_bp.master import HiGHSMasterProblem
from binpack_bp.pricing import (
    HiGHSPricingProblem,
    PricingSolution,
    PricingStatus,
)

UNIT_DUALS = {0: 1.0, 1: 1.0, 2: 1.0}


# =============================================================================
# Test PricingSolution
# =============================================================================

class TestPricingSolution:
    """Tests for PricingSolution dataclass."""

    def test_default_status(self):
        """Test default pricing solution."""
        solution = PricingSolution()
        assert solution.status == PricingStatus.NO_COLUMNS
        assert solution.num_columns == 0
        assert not solution.has_negative_reduced_cost
        assert solution.get_best_column() is None

    def test_with_columns(self):
        """Test pricing solution with columns."""
        worse = Column(items=frozenset({0}), reduced_cost=-0.2)
        better = Column(items=frozenset({0, 1}), reduced_cost=-1.0)
        solution = PricingSolution(
            status=PricingStatus.COLUMNS_FOUND,
            columns=[worse, better],
            best_reduced_cost=-1.0,
        )

        assert solution.has_negative_reduced_cost
        assert solution.num_columns == 2
        assert solution.get_best_column() is better

    def test_best_column_with_zero_reduced_cost(self):
        """A reduced cost of exactly zero still ranks below unpriced columns."""
        unpriced = Column(items=frozenset({0}))
        zero = Column(items=frozenset({1}), reduced_cost=0.0)
        solution = PricingSolution(columns=[unpriced, zero])

        assert solution.get_best_column() is zero

    def test_best_column_negative_beats_zero(self):
        zero = Column(items=frozenset({1}), reduced_cost=0.0)
        negative = Column(items=frozenset({0, 1}), reduced_cost=-0.5)
        solution = PricingSolution(columns=[zero, negative])

        assert solution.get_best_column() is negative


# =============================================================================
# Test HiGHSPricingProblem
# =============================================================================

class TestHiGHSPricingProblem:
    """Tests for the knapsack pricing MIP."""

    def test_finds_best_pattern(self, pairable_instance, solver_config):
        """With unit duals the fullest pattern is {0, 1}."""
        pricing = HiGHSPricingProblem(pairable_instance, BranchNode.root(), solver_config)
        pricing.set_dual_values(UNIT_DUALS)
        solution = pricing.solve()

        assert solution.status == PricingStatus.COLUMNS_FOUND
        assert solution.best_reduced_cost == pytest.approx(-1.0)
        column = solution.get_best_column()
        assert column.items == frozenset({0, 1})
        assert column.column_id is None
        assert column.reduced_cost == pytest.approx(-1.0)

    def test_zero_duals_no_columns(self, pairable_instance, solver_config):
        """Without duals every pattern costs a full bin."""
        pricing = HiGHSPricingProblem(pairable_instance, BranchNode.root(), solver_config)
        pricing.set_dual_values({})
        solution = pricing.solve()

        assert solution.status == PricingStatus.NO_COLUMNS
        assert solution.best_reduced_cost == pytest.approx(1.0)
        assert solution.columns == []

    def test_separate_pair_respected(self, pairable_instance, solver_config):
        node = BranchNode(separate=((0, 1),))
        pricing = HiGHSPricingProblem(pairable_instance, node, solver_config)
        pricing.set_dual_values(UNIT_DUALS)
        solution = pricing.solve()

        assert solution.status == PricingStatus.NO_COLUMNS
        assert solution.best_reduced_cost == pytest.approx(0.0)

    def test_together_pair_respected(self, pairable_instance, solver_config):
        """Items 0 and 2 do not fit together, so only {1} remains."""
        node = BranchNode(together=((0, 2),))
        pricing = HiGHSPricingProblem(pairable_instance, node, solver_config)
        pricing.set_dual_values(UNIT_DUALS)
        solution = pricing.solve()

        assert solution.status == PricingStatus.NO_COLUMNS
        assert solution.best_reduced_cost == pytest.approx(0.0)

    def test_together_pair_allows_joint_pattern(self, pairable_instance, solver_config):
        node = BranchNode(together=((0, 1),))
        pricing = HiGHSPricingProblem(pairable_instance, node, solver_config)
        pricing.set_dual_values(UNIT_DUALS)
        solution = pricing.solve()

        assert solution.status == PricingStatus.COLUMNS_FOUND
        assert solution.get_best_column().items == frozenset({0, 1})

    def test_duals_can_be_updated(self, pairable_instance, solver_config):
        """The same model is re-solved with a new objective."""
        pricing = HiGHSPricingProblem(pairable_instance, BranchNode.root(), solver_config)

        pricing.set_dual_values(UNIT_DUALS)
        assert pricing.solve().status == PricingStatus.COLUMNS_FOUND

        pricing.set_dual_values({0: 0.5, 1: 0.5, 2: 1.0})
        solution = pricing.solve()
        assert solution.status == PricingStatus.NO_COLUMNS
        assert solution.best_reduced_cost == pytest.approx(0.0)

    def test_capacity_respected(self, six_item_instance, solver_config):
        duals = {i: w / 10.0 + 0.1 for i, w in enumerate(six_item_instance.item_weights)}
        pricing = HiGHSPricingProblem(six_item_instance, BranchNode.root(), solver_config)
        pricing.set_dual_values(duals)
        solution = pricing.solve()

        assert solution.status == PricingStatus.COLUMNS_FOUND
        column = solution.get_best_column()
        assert six_item_instance.fits(column.items)
        reduced_cost = 1.0 - sum(duals[i] for i in column.items)
        assert reduced_cost == pytest.approx(solution.best_reduced_cost)

    def test_dual_values_copied(self, pairable_instance, solver_config):
        pricing = HiGHSPricingProblem(pairable_instance, BranchNode.root(), solver_config)
        duals = dict(UNIT_DUALS)
        pricing.set_dual_values(duals)
        duals[0] = 10.0
        assert pricing.dual_values[0] == 1.0


# =============================================================================
# Integration Tests
# =============================================================================

class TestPricingMasterIntegration:
    """Test pricing with master problem integration."""

    def test_pricing_finds_improving_columns(self, pairable_instance, solver_config):
        """A column priced from master duals lowers the master objective."""
        pool = ColumnPool()
        master = HiGHSMasterProblem(pairable_instance, solver_config)
        master.add_columns(pool.seed_singletons(pairable_instance.num_items))
        before = master.solve_lp()

        pricing = HiGHSPricingProblem(pairable_instance, BranchNode.root(), solver_config)
        pricing.set_dual_values(before.dual_values)
        priced = pricing.solve()
        assert priced.has_negative_reduced_cost

        master.add_column(pool.add(priced.get_best_column()))
        after = master.solve_lp()

        assert after.objective_value < before.objective_value
        assert after.objective_value == pytest.approx(2.0)
