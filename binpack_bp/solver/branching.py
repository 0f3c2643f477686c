"""
Ryan-Foster branching for bin packing.

For every pair of items (i, j), z_ij is the total LP value of the patterns
that pack both items. In an integer solution every z_ij is 0 or 1; a
fractional z_ij gives a pair to branch on:

- "separate" child: i and j in different bins
- "together" child: i and j in the same bin

The selector picks the pair whose z_ij is closest to 0.5. When every z_ij
is integral the LP solution is integral too, and the incumbent is updated.
"""

import logging
import math
import threading
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

import numpy as np

from binpack_bp.core.column import Column, ColumnPool
from binpack_bp.core.node import ItemPair
from binpack_bp.master.solution import MasterSolution

logger = logging.getLogger(__name__)


class Incumbent:
    """
    Best integer objective found so far (number of bins).

    Starts at +inf and only ever decreases. Reads and updates take a
    re-entrant lock so several drivers may share one engine.

    Example:
        >>> incumbent = Incumbent()
        >>> incumbent.update(5.0)
        True
        >>> incumbent.update(5.0)
        False
    """

    def __init__(self, tolerance: float = 1e-6):
        self._tolerance = tolerance
        self._value = math.inf
        self._lock = threading.RLock()

    @property
    def value(self) -> float:
        """Current best objective (inf until one is found)."""
        with self._lock:
            return self._value

    @property
    def is_set(self) -> bool:
        """Whether an integer solution has been recorded."""
        with self._lock:
            return self._value < math.inf

    def update(self, candidate: float) -> bool:
        """
        Record a new integer objective if it is strictly better.

        Args:
            candidate: Objective of an integral LP solution

        Returns:
            True if the incumbent improved
        """
        with self._lock:
            if candidate < self._value - self._tolerance:
                self._value = candidate
                return True
            return False

    def __repr__(self) -> str:
        return f"Incumbent({self.value})"


@dataclass(frozen=True)
class BranchingDecision:
    """
    Outcome of branching selection at a converged node.

    Attributes:
        pair: Pair (i, j), i < j, to branch on; None if the LP is integral
        delta: |z_ij - 0.5| of the chosen pair (0.5 when integral)
        z_value: z_ij of the chosen pair (None if integral)
    """
    pair: Optional[ItemPair]
    delta: float
    z_value: Optional[float] = None

    @property
    def is_integral(self) -> bool:
        """Whether the master solution needs no branching."""
        return self.pair is None


class BranchingSelector:
    """
    Ryan-Foster pair selection.

    Example:
        >>> selector = BranchingSelector(instance.num_items, incumbent)
        >>> decision = selector.select(master_solution, pool)
        >>> if not decision.is_integral:
        ...     i, j = decision.pair
    """

    def __init__(
        self,
        num_items: int,
        incumbent: Incumbent,
        tolerance: float = 1e-6,
    ):
        self._num_items = num_items
        self._incumbent = incumbent
        self._tolerance = tolerance

    def compute_pair_coverage(
        self,
        columns: Iterable[Column],
        column_values: Mapping[int, float],
    ) -> np.ndarray:
        """
        Compute z_ij for every pair of items.

        Seed singletons never pack a pair and are skipped.

        Args:
            columns: Columns of the master (with ids)
            column_values: LP value per column id

        Returns:
            n x n array; entry [i, j] with i < j holds z_ij, the rest is 0
        """
        n = self._num_items
        z = np.zeros((n, n))
        for column in columns:
            if column.seed:
                continue
            value = column_values.get(column.column_id, 0.0)
            if value == 0.0:
                continue
            idx = np.array(column.sorted_items(), dtype=int)
            z[np.ix_(idx, idx)] += value
        return np.triu(z, k=1)

    def select(
        self,
        master_solution: MasterSolution,
        pool: ColumnPool,
    ) -> BranchingDecision:
        """
        Choose the branching pair of a converged node.

        Pairs are scanned in ascending (i, j) order and the first pair with
        the smallest |z_ij - 0.5| wins; a later pair replaces it only when
        strictly smaller by more than the tolerance.

        If no pair is fractional, the master objective is offered to the
        incumbent and no pair is returned.

        Args:
            master_solution: Optimal LP solution of the node
            pool: Column pool (to map column ids to item sets)

        Returns:
            The branching decision
        """
        tol = self._tolerance
        z = self.compute_pair_coverage(pool, master_solution.column_values)

        best_pair: Optional[ItemPair] = None
        best_delta = 0.5
        best_z: Optional[float] = None

        rows, cols = np.triu_indices(self._num_items, k=1)
        deltas = np.abs(z[rows, cols] - 0.5)
        for i, j, delta in zip(rows.tolist(), cols.tolist(), deltas.tolist()):
            if best_pair is None or delta < best_delta - tol:
                best_pair = (i, j)
                best_delta = delta
                best_z = float(z[i, j])

        if best_pair is None or abs(best_delta - 0.5) <= tol:
            objective = master_solution.objective_value
            if self._incumbent.update(objective):
                logger.info("New incumbent: %g bins", objective)
            return BranchingDecision(pair=None, delta=0.5)

        return BranchingDecision(pair=best_pair, delta=best_delta, z_value=best_z)
