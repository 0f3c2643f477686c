"""
Pricing problem abstract base class.

The pricing problem looks for a bin pattern with negative reduced cost.
For bin packing the reduced cost of a pattern S is:

    RC(S) = 1 - sum_{i in S} pi_i

where pi_i is the dual value of item i's partition constraint. The
pattern must fit into one bin and respect the branching decisions of the
current node (separate pairs never together, together pairs both or none).

A pricing problem lives for one node: its constraints are fixed when it is
created, and only the dual values change between column generation
iterations.

Customization Guide:
-------------------
To create a custom pricing solver:

1. Subclass PricingProblem
2. Implement _solve_impl
3. Optionally override _on_duals_updated to update a persistent model
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional

from binpack_bp.config import BinPackConfig, config as default_config
from binpack_bp.core.column import Column
from binpack_bp.core.node import BranchNode
from binpack_bp.core.problem import BinPackingInstance
from binpack_bp.master.solution import SolutionStatus


class PricingStatus(Enum):
    """
    Status of the pricing problem solution.
    """
    COLUMNS_FOUND = auto()    # Found a column with negative RC
    NO_COLUMNS = auto()       # No column with negative RC exists
    INFEASIBLE = auto()       # No pattern satisfies capacity and branching
    ERROR = auto()            # Solver failed


@dataclass
class PricingSolution:
    """
    Result of solving the pricing problem.

    Attributes:
        status: Solution status
        columns: Columns with negative reduced cost (at most one)
        best_reduced_cost: Optimal reduced cost (None if not solved)
        solve_time: Time spent solving in seconds
        solver_status: Raw status reported by the MIP solver
    """
    status: PricingStatus = PricingStatus.NO_COLUMNS
    columns: list[Column] = field(default_factory=list)
    best_reduced_cost: Optional[float] = None
    solve_time: float = 0.0
    solver_status: SolutionStatus = SolutionStatus.NOT_SOLVED

    @property
    def has_negative_reduced_cost(self) -> bool:
        """Check if a column with negative reduced cost was found."""
        return self.status == PricingStatus.COLUMNS_FOUND

    @property
    def num_columns(self) -> int:
        """Number of columns found."""
        return len(self.columns)

    def get_best_column(self) -> Optional[Column]:
        """Get the column with most negative reduced cost."""
        if not self.columns:
            return None
        return min(
            self.columns,
            key=lambda c: c.reduced_cost if c.reduced_cost is not None else math.inf,
        )

    def __repr__(self) -> str:
        rc_str = (
            f", rc={self.best_reduced_cost:.4f}"
            if self.best_reduced_cost is not None else ""
        )
        return f"PricingSolution({self.status.name}, cols={self.num_columns}{rc_str})"


class PricingProblem(ABC):
    """
    Abstract base class for pricing problem solvers.

    Lifecycle:
    ---------
    1. Create for a node: pricing = HiGHSPricingProblem(instance, node)
    2. Set duals: pricing.set_dual_values(duals)
    3. Solve: solution = pricing.solve()
    4. Update duals and repeat

    Attributes:
        instance: The bin packing instance
        node: The node whose branching decisions constrain the patterns
        config: Solver configuration
    """

    def __init__(
        self,
        instance: BinPackingInstance,
        node: BranchNode,
        config: Optional[BinPackConfig] = None,
    ):
        """
        Initialize the pricing problem.

        Args:
            instance: The bin packing instance
            node: The node being solved
            config: Solver configuration (uses the global config if not provided)
        """
        self._instance = instance
        self._node = node
        self._config = config or default_config

        # Dual values (item -> pi)
        self._dual_values: dict[int, float] = {}

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def instance(self) -> BinPackingInstance:
        """The underlying instance."""
        return self._instance

    @property
    def node(self) -> BranchNode:
        """The node this pricing problem was built for."""
        return self._node

    @property
    def config(self) -> BinPackConfig:
        """Solver configuration."""
        return self._config

    @property
    def dual_values(self) -> dict[int, float]:
        """Current dual values."""
        return self._dual_values.copy()

    # =========================================================================
    # Public API
    # =========================================================================

    def set_dual_values(self, dual_values: dict[int, float]) -> None:
        """
        Set dual values from the master problem.

        Args:
            dual_values: Mapping from item to dual value (pi)
        """
        self._dual_values = dual_values.copy()
        self._on_duals_updated()

    def solve(self) -> PricingSolution:
        """
        Solve the pricing problem under the current dual values.

        Returns:
            PricingSolution with the found column (if any)
        """
        return self._solve_impl()

    # =========================================================================
    # Abstract Methods
    # =========================================================================

    @abstractmethod
    def _solve_impl(self) -> PricingSolution:
        """
        Implementation of the pricing algorithm.

        Returns:
            PricingSolution with found columns
        """

    # =========================================================================
    # Hooks (override for custom behavior)
    # =========================================================================

    def _on_duals_updated(self) -> None:
        """
        Hook called when dual values are updated.

        Override to push the new objective into a persistent model.
        """

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(items={self._instance.num_items}, node={self._node!r})"
