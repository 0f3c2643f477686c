"""
Column generation solution module.

This module defines the data structures describing one run of the column
generation loop at a search-tree node.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional

from binpack_bp.master.solution import MasterSolution


class CGStatus(Enum):
    """
    How the column generation loop of a node ended.
    """
    CONVERGED = auto()           # No improving column: LP bound is proven
    PRUNED = auto()              # Bound cannot beat the incumbent
    MASTER_INFEASIBLE = auto()   # Restricted master has no solution
    PRICING_INFEASIBLE = auto()  # No pattern satisfies the node's constraints
    NOT_SOLVED = auto()          # Not yet run


@dataclass
class CGIteration:
    """
    Information about a single column generation iteration.

    Attributes:
        iteration: Iteration number (1-based)
        master_objective: Master LP objective the duals came from
        best_reduced_cost: Optimal reduced cost from pricing (None if infeasible)
        num_columns_added: Number of columns added in this iteration
        master_time: Time spent on the master solve
        pricing_time: Time spent on the pricing solve
        total_columns: Total columns in the pool after this iteration
    """
    iteration: int
    master_objective: float
    best_reduced_cost: Optional[float]
    num_columns_added: int
    master_time: float
    pricing_time: float
    total_columns: int


@dataclass
class CGResult:
    """
    Result of the column generation loop at one node.

    Attributes:
        status: How the loop ended
        master_solution: Last master LP solution
        iteration_history: One entry per pricing round
        columns_added: Columns inserted into the pool during the run
        total_time: Wall time of the run
    """
    status: CGStatus = CGStatus.NOT_SOLVED
    master_solution: Optional[MasterSolution] = None
    iteration_history: List[CGIteration] = field(default_factory=list)
    columns_added: int = 0
    total_time: float = 0.0

    @property
    def objective_value(self) -> Optional[float]:
        """Master LP objective (bins), if available."""
        if self.master_solution is None:
            return None
        return self.master_solution.objective_value

    @property
    def iterations(self) -> int:
        """Number of pricing rounds."""
        return len(self.iteration_history)

    def lower_bound(self, tol: float = 1e-6) -> Optional[float]:
        """
        Integer lower bound on the node: ceil of the LP objective.

        Args:
            tol: Values within tol of an integer are not rounded up

        Returns:
            The bound, or None without an LP objective
        """
        if self.master_solution is None:
            return None
        return self.master_solution.bin_lower_bound(tol)

    def summary(self) -> str:
        """Return a human-readable summary."""
        lines = [
            "CGResult:",
            f"  Status: {self.status.name}",
        ]
        if self.objective_value is not None:
            lines.append(f"  Objective: {self.objective_value:.6f}")
        lines.extend([
            f"  Iterations: {self.iterations}",
            f"  Columns added: {self.columns_added}",
            f"  Time: {self.total_time:.3f}s",
        ])
        return "\n".join(lines)

    def __repr__(self) -> str:
        obj = self.objective_value
        obj_str = f", obj={obj:.4f}" if obj is not None else ""
        return f"CGResult({self.status.name}{obj_str}, iters={self.iterations})"
