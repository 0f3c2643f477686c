"""
HiGHS implementation of the master problem.

This module provides the restricted master problem solver using HiGHS,
a high-performance open-source LP/MIP solver, through its highspy bindings.

The HiGHS model is built once and lives as long as the engine: columns are
appended with addCol and nodes only change column bounds, so every LP solve
warm starts from the previous basis.

Usage:
    >>> from binpack_bp.master import HiGHSMasterProblem
    >>> master = HiGHSMasterProblem(instance)
    >>> master.add_columns(pool.seed_singletons(instance.num_items))
    >>> solution = master.solve_lp()
    >>> solution.dual_values
"""

import math
import time
from typing import Dict, Optional

import highspy

from binpack_bp.config import BinPackConfig
from binpack_bp.core.column import Column
from binpack_bp.core.problem import BinPackingInstance
from binpack_bp.master.base import MasterProblem
from binpack_bp.master.solution import MasterSolution, SolutionStatus


_STATUS_MAP = {
    highspy.HighsModelStatus.kNotset: SolutionStatus.NOT_SOLVED,
    highspy.HighsModelStatus.kLoadError: SolutionStatus.ERROR,
    highspy.HighsModelStatus.kModelError: SolutionStatus.ERROR,
    highspy.HighsModelStatus.kPresolveError: SolutionStatus.ERROR,
    highspy.HighsModelStatus.kSolveError: SolutionStatus.ERROR,
    highspy.HighsModelStatus.kPostsolveError: SolutionStatus.ERROR,
    highspy.HighsModelStatus.kModelEmpty: SolutionStatus.ERROR,
    highspy.HighsModelStatus.kOptimal: SolutionStatus.OPTIMAL,
    highspy.HighsModelStatus.kInfeasible: SolutionStatus.INFEASIBLE,
    highspy.HighsModelStatus.kUnbounded: SolutionStatus.UNBOUNDED,
    highspy.HighsModelStatus.kUnboundedOrInfeasible: SolutionStatus.INF_OR_UNBOUNDED,
    highspy.HighsModelStatus.kTimeLimit: SolutionStatus.TIME_LIMIT,
    highspy.HighsModelStatus.kIterationLimit: SolutionStatus.ITERATION_LIMIT,
}


def map_highs_status(status) -> SolutionStatus:
    """Map HiGHS model status to our SolutionStatus."""
    return _STATUS_MAP.get(status, SolutionStatus.ERROR)


def configure_highs(highs: highspy.Highs, config: BinPackConfig) -> None:
    """
    Apply the shared solver options to a HiGHS instance.

    Master and pricing use the same thread count: HiGHS keeps a global
    task scheduler and rejects a run whose 'threads' option differs from
    the one it was started with.

    Args:
        highs: The HiGHS instance
        config: Solver configuration
    """
    highs.setOptionValue('output_flag', config.verbosity > 0)
    highs.setOptionValue('log_to_console', config.verbosity > 0)
    highs.setOptionValue('threads', config.num_threads)
    highs.setOptionValue('random_seed', config.random_seed)

    if config.time_limit is not None:
        highs.setOptionValue('time_limit', float(config.time_limit))


class HiGHSMasterProblem(MasterProblem):
    """
    Restricted master problem solver using HiGHS.

    Every column enters with cost config.objective_scale (the scaling
    constant is the same for all columns, so it does not change the optimal
    solution). Objective and duals are divided back by it, so callers
    always see bins.

    Example:
        >>> master = HiGHSMasterProblem(instance)
        >>> master.add_columns(pool.seed_singletons(instance.num_items))
        >>> master.apply_branching(BranchNode.root())
        >>> solution = master.solve_lp()
        >>> print(f"Bins: {solution.objective_value}")
    """

    def __init__(
        self,
        instance: BinPackingInstance,
        config: Optional[BinPackConfig] = None,
    ):
        """
        Initialize the HiGHS master problem.

        Args:
            instance: The bin packing instance
            config: Solver configuration
        """
        self._highs: Optional[highspy.Highs] = None

        # Column id -> HiGHS column index
        self._column_to_solver_idx: Dict[int, int] = {}

        super().__init__(instance, config)

    # =========================================================================
    # Abstract Method Implementations
    # =========================================================================

    def _build_model(self) -> None:
        """Build the HiGHS model with one partition row per item."""
        self._highs = highspy.Highs()
        configure_highs(self._highs, self._config)
        self._highs.changeObjectiveSense(highspy.ObjSense.kMinimize)

        # sum_{j : i in column j} lambda_j = 1, initially without columns
        for _ in range(self._instance.num_items):
            self._highs.addRow(1.0, 1.0, 0, [], [])

    def _add_column_impl(self, column: Column) -> int:
        """Add a column to the HiGHS model."""
        indices = column.sorted_items()
        values = [1.0] * len(indices)

        self._highs.addCol(
            self._config.objective_scale * column.cost,
            0.0,
            highspy.kHighsInf,
            len(indices),
            indices,
            values,
        )

        solver_idx = self._highs.getNumCol() - 1
        self._column_to_solver_idx[column.column_id] = solver_idx
        return solver_idx

    def _set_column_upper_bound(self, column_id: int, upper: float) -> None:
        """Set the upper bound of a column variable (lower bound stays 0)."""
        if column_id not in self._column_to_solver_idx:
            raise ValueError(f"Column {column_id} not found in master")

        if math.isinf(upper):
            upper = highspy.kHighsInf
        self._highs.changeColBounds(self._column_to_solver_idx[column_id], 0.0, upper)

    def _solve_lp_impl(self) -> MasterSolution:
        """Solve the LP relaxation."""
        start_time = time.time()

        run_status = self._highs.run()
        solve_time = time.time() - start_time

        if run_status == highspy.HighsStatus.kError:
            status = SolutionStatus.ERROR
        else:
            status = map_highs_status(self._highs.getModelStatus())

        solution = MasterSolution(status=status, solve_time=solve_time)

        if status == SolutionStatus.OPTIMAL:
            scale = self._config.objective_scale
            solution.objective_value = (
                self._highs.getInfo().objective_function_value / scale
            )

            sol = self._highs.getSolution()
            for col_id, solver_idx in self._column_to_solver_idx.items():
                value = sol.col_value[solver_idx]
                if abs(value) > 1e-10:  # Only store non-zero
                    solution.column_values[col_id] = value

            solution.dual_values = self._get_dual_values(sol, scale)

        return solution

    # =========================================================================
    # HiGHS-specific Methods
    # =========================================================================

    def _get_dual_values(self, sol, scale: float) -> Dict[int, float]:
        """Extract the partition row duals, in bins."""
        return {
            i: sol.row_dual[i] / scale
            for i in range(self._instance.num_items)
        }
