"""
Restricted master LP result.

A MasterSolution is what one LP solve of the set partitioning master tells
the rest of the engine: how many bins the fractional packing uses, how much
of each pattern it takes, and the item duals that drive pricing.
"""

import math
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, List, Optional


class SolutionStatus(Enum):
    """
    Outcome of a HiGHS run, shared by the master LP and the pricing MIP.
    """
    OPTIMAL = auto()
    INFEASIBLE = auto()
    UNBOUNDED = auto()
    INF_OR_UNBOUNDED = auto()  # HiGHS could not tell which
    TIME_LIMIT = auto()
    ITERATION_LIMIT = auto()
    NOT_SOLVED = auto()
    ERROR = auto()


@dataclass
class MasterSolution:
    """
    LP packing of the items into the current patterns.

    Objective and duals are in bins, whatever objective scaling the solver
    used internally.

    Attributes:
        status: HiGHS outcome
        objective_value: Fractional number of bins (None unless optimal)
        column_values: Pattern id -> LP value, for the patterns in use
        dual_values: Item -> dual of its partition row
        solve_time: Wall time of the LP solve in seconds
    """
    status: SolutionStatus = SolutionStatus.NOT_SOLVED
    objective_value: Optional[float] = None
    column_values: Dict[int, float] = field(default_factory=dict)
    dual_values: Dict[int, float] = field(default_factory=dict)
    solve_time: float = 0.0

    @property
    def is_optimal(self) -> bool:
        return self.status == SolutionStatus.OPTIMAL

    @property
    def is_infeasible(self) -> bool:
        return self.status == SolutionStatus.INFEASIBLE

    @property
    def has_solution(self) -> bool:
        """True when a packing with an objective is available."""
        return self.is_optimal and self.objective_value is not None

    def get_value(self, column_id: int) -> float:
        """LP value of a pattern (0.0 for patterns not in use)."""
        return self.column_values.get(column_id, 0.0)

    def bin_lower_bound(self, tol: float = 1e-6) -> Optional[float]:
        """
        Bins needed by any integer packing below this LP: ceil(objective).

        Objectives within tol of an integer are not rounded up.
        """
        if self.objective_value is None:
            return None
        return float(math.ceil(self.objective_value - tol))

    def used_patterns(self, tol: float = 1e-6) -> List[int]:
        """Ids of the patterns with nonzero LP value, ascending."""
        return sorted(
            col_id for col_id, value in self.column_values.items()
            if abs(value) > tol
        )

    def __repr__(self) -> str:
        obj_str = f", bins={self.objective_value:.4f}" if self.objective_value is not None else ""
        return f"MasterSolution({self.status.name}{obj_str}, patterns={len(self.column_values)})"
