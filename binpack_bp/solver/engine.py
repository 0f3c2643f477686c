"""
Branch-and-price node engine for bin packing.

The engine owns everything that persists across the nodes of one search:
the column pool, the master problem and the incumbent. An external driver
owns the tree itself: it hands nodes to solve() and receives either a pair
to branch on or NO_BRANCHING_PAIR.

Example:
    >>> engine = BranchAndPriceEngine(instance)
    >>> stack = [BranchNode.root()]
    >>> while stack:
    ...     node = stack.pop()
    ...     i, j = engine.solve(node)
    ...     if (i, j) != NO_BRANCHING_PAIR:
    ...         stack.append(node.with_separate(i, j))
    ...         stack.append(node.with_together(i, j))
    >>> engine.incumbent.value
"""

import logging
import sys
import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional, TextIO, Tuple

from binpack_bp.config import BinPackConfig, config as default_config
from binpack_bp.core.column import ColumnPool
from binpack_bp.core.node import BranchNode, ItemPair
from binpack_bp.core.problem import BinPackingInstance
from binpack_bp.master import HiGHSMasterProblem, MasterProblem, MasterSolution
from binpack_bp.solver.branching import BranchingSelector, Incumbent
from binpack_bp.solver.column_generation import ColumnGeneration, PricingFactory
from binpack_bp.solver.solution import CGIteration, CGStatus

logger = logging.getLogger(__name__)

NO_BRANCHING_PAIR: Tuple[int, int] = (-1, -1)


class NodeOutcome(Enum):
    """
    Outcome of solving one node.
    """
    BRANCH = auto()              # Fractional LP: branch on the returned pair
    INTEGRAL = auto()            # Integral LP: incumbent offered the objective
    PRUNED = auto()              # ceil(LP) cannot beat the incumbent
    MASTER_INFEASIBLE = auto()
    PRICING_INFEASIBLE = auto()


_CG_OUTCOMES = {
    CGStatus.PRUNED: NodeOutcome.PRUNED,
    CGStatus.MASTER_INFEASIBLE: NodeOutcome.MASTER_INFEASIBLE,
    CGStatus.PRICING_INFEASIBLE: NodeOutcome.PRICING_INFEASIBLE,
}


@dataclass
class NodeResult:
    """
    Result of solving one node.

    Attributes:
        outcome: What happened at the node
        pair: Branching pair (only for BRANCH)
        objective_value: Last master LP objective
        lower_bound: ceil of the LP objective (None without an LP objective)
        iterations: Column generation history
        columns_added: Columns generated at this node
        solve_time: Wall time in seconds
    """
    outcome: NodeOutcome
    pair: Optional[ItemPair] = None
    objective_value: Optional[float] = None
    lower_bound: Optional[float] = None
    iterations: List[CGIteration] = field(default_factory=list)
    columns_added: int = 0
    solve_time: float = 0.0

    @property
    def branching_pair(self) -> Tuple[int, int]:
        """The pair to branch on, or NO_BRANCHING_PAIR."""
        if self.pair is None:
            return NO_BRANCHING_PAIR
        return self.pair

    def __repr__(self) -> str:
        obj = self.objective_value
        obj_str = f", obj={obj:.4f}" if obj is not None else ""
        pair_str = f", pair={self.pair}" if self.pair is not None else ""
        return f"NodeResult({self.outcome.name}{obj_str}{pair_str})"


class BranchAndPriceEngine:
    """
    Solves search-tree nodes of a bin packing instance by column generation.

    On construction the pool is seeded with one singleton column per item
    and every seed enters the master, so the master is feasible at every
    node. Columns generated at any node stay in the pool for the lifetime
    of the engine and are reused (or suppressed) at later nodes.
    """

    def __init__(
        self,
        instance: BinPackingInstance,
        config: Optional[BinPackConfig] = None,
        pricing_factory: Optional[PricingFactory] = None,
    ):
        """
        Create the engine.

        Args:
            instance: The bin packing instance
            config: Solver configuration (uses the global config if not provided)
            pricing_factory: Builds the pricing problem of a node
                (default: HiGHSPricingProblem)
        """
        self._instance = instance
        self._config = config or default_config

        self._pool = ColumnPool()
        self._master: MasterProblem = HiGHSMasterProblem(instance, self._config)
        self._master.add_columns(self._pool.seed_singletons(instance.num_items))

        self._incumbent = Incumbent(self._config.tolerance)
        self._cg = ColumnGeneration(
            instance,
            self._pool,
            self._master,
            self._incumbent,
            self._config,
            pricing_factory=pricing_factory,
        )
        self._selector = BranchingSelector(
            instance.num_items, self._incumbent, self._config.tolerance
        )

        self._last_solution: Optional[MasterSolution] = None
        self._nodes_solved = 0

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def instance(self) -> BinPackingInstance:
        return self._instance

    @property
    def incumbent(self) -> Incumbent:
        """Best integer objective found so far."""
        return self._incumbent

    @property
    def column_pool(self) -> ColumnPool:
        return self._pool

    @property
    def master(self) -> MasterProblem:
        return self._master

    @property
    def last_solution(self) -> Optional[MasterSolution]:
        """Master solution of the last solved node."""
        return self._last_solution

    @property
    def nodes_solved(self) -> int:
        return self._nodes_solved

    # =========================================================================
    # Public API
    # =========================================================================

    def solve(self, node: BranchNode) -> Tuple[int, int]:
        """
        Solve a node and return the pair to branch on.

        Args:
            node: The node to solve

        Returns:
            (i, j) with i < j, or NO_BRANCHING_PAIR if the node is pruned,
            infeasible or integral

        Raises:
            ValueError: If the node references invalid items
            SolverError: If HiGHS fails on the master or pricing problem
        """
        return self.solve_node(node).branching_pair

    def solve_node(self, node: BranchNode) -> NodeResult:
        """
        Solve a node and return the full result.

        Args:
            node: The node to solve

        Returns:
            NodeResult describing the outcome
        """
        node.validate(self._instance.num_items)

        start_time = time.time()
        cg_result = self._cg.run(node)
        self._last_solution = cg_result.master_solution
        self._nodes_solved += 1

        result = NodeResult(
            outcome=_CG_OUTCOMES.get(cg_result.status, NodeOutcome.BRANCH),
            objective_value=cg_result.objective_value,
            lower_bound=cg_result.lower_bound(self._config.tolerance),
            iterations=cg_result.iteration_history,
            columns_added=cg_result.columns_added,
        )

        logger.debug("%s", cg_result.summary())

        if cg_result.status == CGStatus.CONVERGED:
            decision = self._selector.select(cg_result.master_solution, self._pool)
            if decision.is_integral:
                result.outcome = NodeOutcome.INTEGRAL
            else:
                result.pair = decision.pair

        result.solve_time = time.time() - start_time

        logger.info(
            "Node %d (depth %d): %s, obj=%s, cols=%d (+%d), incumbent=%s",
            self._nodes_solved,
            node.depth,
            result.outcome.name,
            f"{result.objective_value:.6f}" if result.objective_value is not None else "-",
            self._pool.size,
            result.columns_added,
            self._incumbent.value,
        )
        return result

    # =========================================================================
    # Reporting
    # =========================================================================

    def print_solution(self, file: Optional[TextIO] = None) -> None:
        """
        Print the LP value of every master column, in column order.

        Args:
            file: Output stream (default: stdout)
        """
        solution = self._require_solution()
        out = file or sys.stdout
        values = [
            f"{solution.get_value(column.column_id):g}"
            for column in self._master.columns
        ]
        print(" ".join(values), file=out)

    def print_bins(self, file: Optional[TextIO] = None) -> None:
        """
        Print the items of every column with a nonzero LP value.

        One line per column: "Bin j: i1 i2 ...", j being the column id.

        Args:
            file: Output stream (default: stdout)
        """
        solution = self._require_solution()
        out = file or sys.stdout
        tol = self._config.tolerance
        for column_id in solution.used_patterns(tol):
            column = self._master.get_column(column_id)
            items = " ".join(str(i) for i in column.sorted_items())
            print(f"Bin {column_id}: {items}", file=out)

    def _require_solution(self) -> MasterSolution:
        if self._last_solution is None or not self._last_solution.has_solution:
            raise RuntimeError("No master solution available; solve a node first")
        return self._last_solution

    def __repr__(self) -> str:
        return (
            f"BranchAndPriceEngine(items={self._instance.num_items}, "
            f"columns={self._pool.size}, incumbent={self._incumbent.value})"
        )
