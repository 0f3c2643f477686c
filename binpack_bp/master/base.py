"""
Master problem abstract base class.

This module defines the interface of the restricted master problem.
Users can either:
1. Use the provided HiGHSMasterProblem (default implementation)
2. Implement their own by subclassing MasterProblem

The restricted master problem is the LP relaxation of the set partitioning
formulation of bin packing over the columns generated so far:

    min  sum_j lambda_j
    s.t. sum_{j : i in column j} lambda_j = 1    for every item i
         0 <= lambda_j <= u_j

The upper bound u_j is +inf, or 0 when the current node's branching
decisions exclude column j. Columns are never deleted from the model; a
node only changes bounds, so one model serves the whole search tree.

Customization Guide:
-------------------
To create a custom master problem solver:

1. Subclass MasterProblem
2. Implement _build_model, _add_column_impl, _set_column_upper_bound
   and _solve_lp_impl
"""

import math
from abc import ABC, abstractmethod
from typing import FrozenSet, Optional

from binpack_bp.config import BinPackConfig, config as default_config
from binpack_bp.core.column import Column
from binpack_bp.core.node import BranchNode
from binpack_bp.core.problem import BinPackingInstance
from binpack_bp.master.solution import MasterSolution


class MasterProblem(ABC):
    """
    Abstract base class for restricted master problem solvers.

    Lifecycle:
    ---------
    1. Create: master = HiGHSMasterProblem(instance)
    2. Add the singleton seed columns: master.add_columns(pool.seed_singletons(n))
    3. Restrict to a node: master.apply_branching(node)
    4. Solve LP: solution = master.solve_lp()
    5. Add priced columns: master.add_column(column)
    6. Repeat 4-5 until pricing finds no improving column

    Attributes:
        instance: The BinPackingInstance being solved
        config: Solver configuration
    """

    def __init__(
        self,
        instance: BinPackingInstance,
        config: Optional[BinPackConfig] = None,
    ):
        """
        Initialize the master problem.

        Args:
            instance: The bin packing instance
            config: Solver configuration (uses the global config if not provided)
        """
        self._instance = instance
        self._config = config or default_config

        # Column tracking
        self._columns: list[Column] = []
        self._column_id_to_index: dict[int, int] = {}

        # Columns excluded by the node passed to the last apply_branching()
        self._suppressed: FrozenSet[int] = frozenset()

        self._build_model()

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def instance(self) -> BinPackingInstance:
        """The underlying instance."""
        return self._instance

    @property
    def config(self) -> BinPackConfig:
        """Solver configuration."""
        return self._config

    @property
    def num_columns(self) -> int:
        """Number of columns currently in the master problem."""
        return len(self._columns)

    @property
    def num_constraints(self) -> int:
        """Number of partition constraints (one per item)."""
        return self._instance.num_items

    @property
    def columns(self) -> list[Column]:
        """List of columns in the master problem."""
        return self._columns.copy()

    @property
    def suppressed_columns(self) -> FrozenSet[int]:
        """Column ids whose upper bound is forced to 0 at the current node."""
        return self._suppressed

    # =========================================================================
    # Abstract Methods (MUST be implemented by subclasses)
    # =========================================================================

    @abstractmethod
    def _build_model(self) -> None:
        """
        Build the initial model: objective sense and one empty equality
        row per item. Columns are added later.
        """

    @abstractmethod
    def _add_column_impl(self, column: Column) -> int:
        """
        Add a column to the solver model with bounds [0, +inf).

        Returns:
            The index of the column in the solver model
        """

    @abstractmethod
    def _set_column_upper_bound(self, column_id: int, upper: float) -> None:
        """Change the upper bound of a column variable."""

    @abstractmethod
    def _solve_lp_impl(self) -> MasterSolution:
        """
        Solve the LP relaxation.

        Returns:
            MasterSolution with status, objective, primals and duals
        """

    # =========================================================================
    # Public API - Column Management
    # =========================================================================

    def add_column(self, column: Column) -> int:
        """
        Add a column to the master problem.

        The column enters with unit cost, coefficient 1 in the row of each
        item it packs, and bounds [0, +inf).

        Args:
            column: The column to add (must have column_id set)

        Returns:
            Index of the column in the master problem

        Raises:
            ValueError: If column has no column_id or is already present
        """
        if column.column_id is None:
            raise ValueError("Column must have column_id set before adding to master")
        if column.column_id in self._column_id_to_index:
            raise ValueError(f"Column {column.column_id} already in master")
        for item in column.items:
            if not 0 <= item < self._instance.num_items:
                raise ValueError(f"Column {column.column_id} packs unknown item {item}")

        idx = len(self._columns)
        self._columns.append(column)
        self._column_id_to_index[column.column_id] = idx

        self._add_column_impl(column)

        return idx

    def add_columns(self, columns: list[Column]) -> list[int]:
        """Add multiple columns to the master problem."""
        return [self.add_column(col) for col in columns]

    def get_column(self, column_id: int) -> Optional[Column]:
        """
        Get a column by its ID.

        Returns:
            The column, or None if not found
        """
        idx = self._column_id_to_index.get(column_id)
        if idx is None:
            return None
        return self._columns[idx]

    # =========================================================================
    # Public API - Branching Support
    # =========================================================================

    def apply_branching(self, node: BranchNode) -> FrozenSet[int]:
        """
        Restrict the usable columns to those compatible with a node.

        Every generated column first gets its upper bound reset to +inf.
        It is then suppressed (upper bound 0) if it packs both items of a
        separate pair, or exactly one item of a together pair. Seed
        singletons are never suppressed, so the master stays feasible.

        Args:
            node: The node whose decisions apply

        Returns:
            Ids of the suppressed columns
        """
        suppressed = set()
        for column in self._columns:
            if column.seed:
                continue

            upper = math.inf
            if violates_branching(column, node):
                upper = 0.0
                suppressed.add(column.column_id)

            self._set_column_upper_bound(column.column_id, upper)

        self._suppressed = frozenset(suppressed)
        return self._suppressed

    # =========================================================================
    # Public API - Solving
    # =========================================================================

    def solve_lp(self) -> MasterSolution:
        """
        Solve the LP relaxation.

        Returns:
            MasterSolution with status, objective, primals, and duals
        """
        return self._solve_lp_impl()

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"columns={self.num_columns}, "
            f"constraints={self.num_constraints})"
        )


def violates_branching(column: Column, node: BranchNode) -> bool:
    """
    Check whether a column is incompatible with a node's decisions.

    Args:
        column: The column to check
        node: The node whose separate/together pairs apply

    Returns:
        True if the column packs both items of a separate pair, or exactly
        one item of a together pair
    """
    for a, b in node.separate:
        if column.contains(a) and column.contains(b):
            return True
    for a, b in node.together:
        if column.contains(a) != column.contains(b):
            return True
    return False
