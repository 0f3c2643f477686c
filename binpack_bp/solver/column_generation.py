"""
Column Generation controller.

This module implements the column generation loop run at every node of the
branch-and-price tree. It coordinates the restricted master problem and the
pricing subproblem:

Algorithm Overview:
------------------
1. Restrict the master to the node (suppress incompatible columns)
2. Solve the master LP relaxation
3. Prune if the node is not the root and ceil(LP) cannot beat the incumbent
4. Build the pricing problem for the node (once)
5. Price with the current duals
6. If a column with negative reduced cost exists, add it to the pool and
   the master and go to step 2 (without the prune check)
7. Otherwise the LP bound of the node is proven

The loop terminates because a node has finitely many feasible patterns and
a column already in the master never prices out negative again.
"""

import logging
import time
from typing import Callable, Optional

from binpack_bp.config import BinPackConfig, config as default_config
from binpack_bp.core.column import ColumnPool
from binpack_bp.core.node import BranchNode
from binpack_bp.core.problem import BinPackingInstance
from binpack_bp.errors import SolverError
from binpack_bp.master import MasterProblem, MasterSolution, SolutionStatus
from binpack_bp.pricing import (
    HiGHSPricingProblem,
    PricingProblem,
    PricingSolution,
    PricingStatus,
)
from binpack_bp.solver.branching import Incumbent
from binpack_bp.solver.solution import CGIteration, CGResult, CGStatus

logger = logging.getLogger(__name__)

# Builds the pricing problem of a node
PricingFactory = Callable[
    [BinPackingInstance, BranchNode, BinPackConfig], PricingProblem
]


class ColumnGeneration:
    """
    Column generation loop for one node at a time.

    The master problem, the column pool and the incumbent are owned by the
    engine and shared across nodes; this class only drives them.

    Example:
        >>> cg = ColumnGeneration(instance, pool, master, incumbent)
        >>> result = cg.run(BranchNode.root())
        >>> print(result.status, result.objective_value)

    Customization:
        A different pricing solver can be plugged in:

        >>> cg = ColumnGeneration(instance, pool, master, incumbent,
        ...                       pricing_factory=MyPricing)
    """

    def __init__(
        self,
        instance: BinPackingInstance,
        pool: ColumnPool,
        master: MasterProblem,
        incumbent: Incumbent,
        config: Optional[BinPackConfig] = None,
        pricing_factory: Optional[PricingFactory] = None,
    ):
        """
        Initialize the column generation controller.

        Args:
            instance: The bin packing instance
            pool: Shared column pool (already seeded)
            master: Shared master problem (holding every pool column)
            incumbent: Best known integer objective, used for pruning
            config: Solver configuration
            pricing_factory: Builds the pricing problem of a node
                (default: HiGHSPricingProblem)
        """
        self._instance = instance
        self._pool = pool
        self._master = master
        self._incumbent = incumbent
        self._config = config or default_config
        self._pricing_factory = pricing_factory or HiGHSPricingProblem

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def master(self) -> MasterProblem:
        """The master problem solver."""
        return self._master

    @property
    def column_pool(self) -> ColumnPool:
        """The column pool containing all generated columns."""
        return self._pool

    # =========================================================================
    # Main Algorithm
    # =========================================================================

    def run(self, node: BranchNode) -> CGResult:
        """
        Run column generation at a node.

        Args:
            node: The node to solve

        Returns:
            CGResult with the final master solution and iteration history

        Raises:
            SolverError: If the master or pricing solver fails
        """
        start_time = time.time()
        result = CGResult()

        suppressed = self._master.apply_branching(node)
        logger.debug(
            "Node %r: %d of %d columns suppressed",
            node, len(suppressed), self._master.num_columns,
        )

        master_solution = self._solve_master()
        result.master_solution = master_solution

        if master_solution.is_infeasible:
            result.status = CGStatus.MASTER_INFEASIBLE
            result.total_time = time.time() - start_time
            return result

        if self._should_prune(node, master_solution):
            logger.debug(
                "Node pruned: LP %.6f vs incumbent %s",
                master_solution.objective_value, self._incumbent.value,
            )
            result.status = CGStatus.PRUNED
            result.total_time = time.time() - start_time
            return result

        pricing = self._pricing_factory(self._instance, node, self._config)

        iteration = 0
        while True:
            iteration += 1
            master_obj = master_solution.objective_value

            pricing_start = time.time()
            pricing.set_dual_values(master_solution.dual_values)
            pricing_solution = pricing.solve()
            pricing_time = time.time() - pricing_start

            if pricing_solution.status == PricingStatus.ERROR:
                raise SolverError(
                    f"Pricing solve failed with status "
                    f"{pricing_solution.solver_status.name}",
                    status=pricing_solution.solver_status,
                )

            iter_info = CGIteration(
                iteration=iteration,
                master_objective=master_obj,
                best_reduced_cost=pricing_solution.best_reduced_cost,
                num_columns_added=0,
                master_time=master_solution.solve_time,
                pricing_time=pricing_time,
                total_columns=self._pool.size,
            )
            result.iteration_history.append(iter_info)

            if pricing_solution.status == PricingStatus.INFEASIBLE:
                logger.debug("Iteration %d: pricing infeasible", iteration)
                result.status = CGStatus.PRICING_INFEASIBLE
                break

            if not pricing_solution.has_negative_reduced_cost:
                logger.debug(
                    "Iteration %d: obj=%.6f, best_rc=%.6f. LP optimal.",
                    iteration, master_obj, pricing_solution.best_reduced_cost,
                )
                result.status = CGStatus.CONVERGED
                break

            num_added = self._insert_columns(pricing_solution)
            iter_info.num_columns_added = num_added
            iter_info.total_columns = self._pool.size
            result.columns_added += num_added

            logger.debug(
                "Iteration %d: obj=%.6f, best_rc=%.6f, pattern=%s, added=%d, total=%d",
                iteration, master_obj, pricing_solution.best_reduced_cost,
                pricing_solution.get_best_column().sorted_items(),
                num_added, self._pool.size,
            )

            master_solution = self._solve_master()
            result.master_solution = master_solution

            if master_solution.is_infeasible:
                result.status = CGStatus.MASTER_INFEASIBLE
                break

        result.total_time = time.time() - start_time
        return result

    # =========================================================================
    # Internal Methods
    # =========================================================================

    def _solve_master(self) -> MasterSolution:
        """Solve the master LP; anything but optimal/infeasible is fatal."""
        solution = self._master.solve_lp()
        if solution.status not in (SolutionStatus.OPTIMAL, SolutionStatus.INFEASIBLE):
            raise SolverError(
                f"Master LP solve failed with status {solution.status.name}",
                status=solution.status,
            )
        return solution

    def _should_prune(self, node: BranchNode, solution: MasterSolution) -> bool:
        """
        Bound test: ceil(LP) >= incumbent. The root is never pruned.

        The LP objective counts bins, so any integer solution below the
        node is at least its ceiling.
        """
        if node.is_root:
            return False
        tol = self._config.tolerance
        return solution.bin_lower_bound(tol) >= self._incumbent.value - tol

    def _insert_columns(self, pricing_solution: PricingSolution) -> int:
        """Add priced columns to the pool, then to the master."""
        tol = self._config.tolerance
        num_added = 0
        for col in pricing_solution.columns:
            if not self._instance.fits(col.items, tol):
                raise SolverError(
                    f"Pricing returned pattern {col.sorted_items()} exceeding "
                    f"capacity {self._instance.bin_capacity}"
                )
            if self._pool.find(col.items) is not None:
                raise SolverError(
                    f"Pricing regenerated existing pattern {col.sorted_items()} "
                    f"(rc={col.reduced_cost})"
                )

            col_with_id = self._pool.add(col)
            self._master.add_column(col_with_id)
            num_added += 1

        return num_added

    def __repr__(self) -> str:
        return (
            f"ColumnGeneration(items={self._instance.num_items}, "
            f"columns={self._pool.size})"
        )
