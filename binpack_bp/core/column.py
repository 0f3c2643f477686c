"""
Column module - a bin pattern in the column generation framework.

In bin packing column generation, a "column" is a set of items that fit
together into one bin. Each column becomes one variable of the restricted
master problem; selecting it costs one bin.

This module provides:
- Column: An immutable bin pattern
- ColumnPool: The append-only collection of every pattern generated so far

Design Notes:
------------
- Columns are immutable once created (hashable for use in sets)
- Equality and hashing use the item set only
- The pool starts with one singleton column per item ("seed" columns),
  which keeps the master feasible at every node
- The pool is shared by all nodes of the search tree; nodes suppress
  columns through variable bounds in the master, never by removing them

Column Lifecycle:
----------------
1. Created by the pricing subproblem (pattern with negative reduced cost)
2. Added to the pool (gets its stable column_id)
3. Added to the master problem (becomes a variable)
4. Suppressed or re-enabled per node through its upper bound
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional


@dataclass(frozen=True)
class Column:
    """
    Represents a bin pattern (set of items packed into one bin).

    Attributes:
        items: Set of item indices packed in the bin
        cost: Objective coefficient (one bin)
        column_id: Stable identifier assigned by the ColumnPool
        seed: True for the initial singleton columns
        reduced_cost: Reduced cost when pricing produced it

    Example:
        >>> column = Column(items=frozenset({0, 1}))
        >>> column.contains(1)
        True
        >>> column.size
        2
    """
    items: FrozenSet[int] = field(default_factory=frozenset)
    cost: float = 1.0
    column_id: Optional[int] = None
    seed: bool = False
    reduced_cost: Optional[float] = None

    def __post_init__(self):
        """Ensure items is a frozenset."""
        if not isinstance(self.items, frozenset):
            object.__setattr__(self, 'items', frozenset(self.items))

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def size(self) -> int:
        """Number of items in the pattern."""
        return len(self.items)

    # =========================================================================
    # Methods
    # =========================================================================

    def contains(self, item: int) -> bool:
        """Check if the pattern packs a specific item."""
        return item in self.items

    def sorted_items(self) -> List[int]:
        """Items in ascending order."""
        return sorted(self.items)

    def with_id(self, column_id: int) -> 'Column':
        """Create a copy with column_id set."""
        return Column(
            items=self.items,
            cost=self.cost,
            column_id=column_id,
            seed=self.seed,
            reduced_cost=self.reduced_cost,
        )

    def __hash__(self) -> int:
        """Hash based on the item set (patterns are unique by their items)."""
        return hash(self.items)

    def __eq__(self, other: object) -> bool:
        """Equality based on the item set."""
        if not isinstance(other, Column):
            return NotImplemented
        return self.items == other.items

    def __repr__(self) -> str:
        id_str = f"id={self.column_id}, " if self.column_id is not None else ""
        rc_str = f", rc={self.reduced_cost:.4f}" if self.reduced_cost is not None else ""
        return f"Column({id_str}items={self.sorted_items()}{rc_str})"


# =============================================================================
# Column Pool
# =============================================================================


class ColumnPool:
    """
    Append-only arena of columns addressed by stable column_id.

    Column ids are assigned in insertion order starting from 0, so the id
    of a column is also its position in the pool. The pool only grows.

    Example:
        >>> pool = ColumnPool()
        >>> seeds = pool.seed_singletons(3)
        >>> pool.size
        3
        >>> pool.add(Column(items=frozenset({0, 1}))).column_id
        3
    """

    def __init__(self):
        """Create an empty column pool."""
        self._columns: List[Column] = []
        self._id_to_index: Dict[int, int] = {}
        self._items_to_id: Dict[FrozenSet[int], int] = {}
        self._next_id: int = 0
        self._num_seed: int = 0

    @property
    def size(self) -> int:
        """Number of columns in the pool."""
        return len(self._columns)

    def seed_singletons(self, num_items: int) -> List[Column]:
        """
        Create the singleton column of every item.

        Must be called once, on an empty pool.

        Args:
            num_items: Number of items of the instance

        Returns:
            The seed columns, with ids 0..num_items-1
        """
        if self._columns:
            raise ValueError("singleton columns must be seeded into an empty pool")

        seeds = [
            self.add(Column(items=frozenset({i}), seed=True))
            for i in range(num_items)
        ]
        self._num_seed = num_items
        return seeds

    def add(self, column: Column) -> Column:
        """
        Add a column to the pool.

        If the column doesn't have an ID, one is assigned.

        Args:
            column: Column to add

        Returns:
            Column with ID assigned
        """
        if column.column_id is None:
            column = column.with_id(self._next_id)
        elif column.column_id in self._id_to_index:
            raise ValueError(f"column id {column.column_id} already in pool")
        self._next_id = max(self._next_id, column.column_id + 1)

        index = len(self._columns)
        self._columns.append(column)
        self._id_to_index[column.column_id] = index
        self._items_to_id.setdefault(column.items, column.column_id)

        return column

    def get(self, column_id: int) -> Optional[Column]:
        """
        Get a column by ID.

        Args:
            column_id: Column identifier

        Returns:
            The column, or None if not found
        """
        index = self._id_to_index.get(column_id)
        if index is None:
            return None
        return self._columns[index]

    def find(self, items: Iterable[int]) -> Optional[Column]:
        """
        Look up the column packing exactly these items.

        Args:
            items: Items of the pattern

        Returns:
            The pooled column, or None if the pattern is not in the pool
        """
        column_id = self._items_to_id.get(frozenset(items))
        if column_id is None:
            return None
        return self.get(column_id)

    def all_columns(self) -> List[Column]:
        """Get all columns in the pool."""
        return self._columns.copy()

    def generated_columns(self) -> List[Column]:
        """Get the columns produced by pricing (everything but the seeds)."""
        return [col for col in self._columns if not col.seed]

    def __contains__(self, column: object) -> bool:
        return column in self._columns

    def __len__(self) -> int:
        return self.size

    def __iter__(self) -> Iterator[Column]:
        return iter(self._columns)

    def __repr__(self) -> str:
        return f"ColumnPool(size={self.size}, seeds={self._num_seed})"
