"""
HiGHS implementation of the pricing problem.

The pricing problem is a 0/1 knapsack with branching side constraints:

    min  1 - sum_i pi_i * x_i
    s.t. sum_i w_i * x_i <= C
         x_a + x_b <= 1        for each separate pair (a, b)
         x_a - x_b  = 0        for each together pair (a, b)
         x_i in {0, 1}

The model is built once per node; each column generation iteration only
replaces the objective coefficients with the new duals. HiGHS runs
single-threaded (config.num_threads defaults to 1) with a zero relative
MIP gap so reduced costs are exact and reproducible.
"""

import time
from typing import Optional

import highspy

from binpack_bp.config import BinPackConfig
from binpack_bp.core.column import Column
from binpack_bp.core.node import BranchNode
from binpack_bp.core.problem import BinPackingInstance
from binpack_bp.master.highs import configure_highs, map_highs_status
from binpack_bp.master.solution import SolutionStatus
from binpack_bp.pricing.base import PricingProblem, PricingSolution, PricingStatus


class HiGHSPricingProblem(PricingProblem):
    """
    Pricing MIP solved with HiGHS.

    Example:
        >>> pricing = HiGHSPricingProblem(instance, node)
        >>> pricing.set_dual_values(master_solution.dual_values)
        >>> result = pricing.solve()
        >>> if result.has_negative_reduced_cost:
        ...     column = result.get_best_column()
    """

    def __init__(
        self,
        instance: BinPackingInstance,
        node: BranchNode,
        config: Optional[BinPackConfig] = None,
    ):
        super().__init__(instance, node, config)

        self._highs: Optional[highspy.Highs] = None
        self._indices = list(range(instance.num_items))
        self._build_model()

    def _build_model(self) -> None:
        """Build the knapsack model with the node's pair constraints."""
        n = self._instance.num_items

        self._highs = highspy.Highs()
        configure_highs(self._highs, self._config)
        self._highs.setOptionValue('mip_rel_gap', 0.0)
        self._highs.changeObjectiveSense(highspy.ObjSense.kMinimize)

        # x_i in {0, 1}
        self._highs.addVars(n, [0.0] * n, [1.0] * n)
        self._highs.changeColsIntegrality(
            n, self._indices, [highspy.HighsVarType.kInteger] * n
        )

        # -inf <= sum_i w_i * x_i <= C
        self._highs.addRow(
            -highspy.kHighsInf,
            float(self._instance.bin_capacity),
            n,
            self._indices,
            [float(w) for w in self._instance.item_weights],
        )

        # -inf <= x_a + x_b <= 1
        for a, b in self._node.separate:
            self._highs.addRow(-highspy.kHighsInf, 1.0, 2, [a, b], [1.0, 1.0])

        # 0 <= x_a - x_b <= 0
        for a, b in self._node.together:
            self._highs.addRow(0.0, 0.0, 2, [a, b], [1.0, -1.0])

    def _on_duals_updated(self) -> None:
        """Swap the objective: cost of x_i is -pi_i (the constant 1 is added back)."""
        costs = [-self._dual_values.get(i, 0.0) for i in self._indices]
        self._highs.changeColsCost(len(self._indices), self._indices, costs)

    def _solve_impl(self) -> PricingSolution:
        """Solve the pricing MIP."""
        start_time = time.time()

        run_status = self._highs.run()
        solve_time = time.time() - start_time

        if run_status == highspy.HighsStatus.kError:
            solver_status = SolutionStatus.ERROR
        else:
            solver_status = map_highs_status(self._highs.getModelStatus())

        if solver_status == SolutionStatus.INFEASIBLE:
            return PricingSolution(
                status=PricingStatus.INFEASIBLE,
                solve_time=solve_time,
                solver_status=solver_status,
            )

        if solver_status != SolutionStatus.OPTIMAL:
            return PricingSolution(
                status=PricingStatus.ERROR,
                solve_time=solve_time,
                solver_status=solver_status,
            )

        reduced_cost = 1.0 + self._highs.getInfo().objective_function_value

        if reduced_cost >= -self._config.tolerance:
            return PricingSolution(
                status=PricingStatus.NO_COLUMNS,
                best_reduced_cost=reduced_cost,
                solve_time=solve_time,
                solver_status=solver_status,
            )

        values = self._highs.getSolution().col_value
        items = frozenset(i for i in self._indices if values[i] > 0.5)
        column = Column(items=items, reduced_cost=reduced_cost)

        return PricingSolution(
            status=PricingStatus.COLUMNS_FOUND,
            columns=[column],
            best_reduced_cost=reduced_cost,
            solve_time=solve_time,
            solver_status=solver_status,
        )
