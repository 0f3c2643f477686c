"""
Problem module - the Bin Packing instance.

A BinPackingInstance is the immutable description of the problem handed to
the engine: item weights and the bin capacity. The engine never mutates it.

Instances are built in code or loaded from BPPLIB files:

    >>> from binpack_bp.core.problem import BinPackingInstance
    >>> instance = BinPackingInstance(item_weights=[2, 3, 5], bin_capacity=5)
    >>> instance.num_items
    3
    >>> instance.continuous_lower_bound
    2
"""

import math
import os
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple


@dataclass(frozen=True)
class BinPackingInstance:
    """
    A one-dimensional Bin Packing instance.

    Attributes:
        item_weights: Weight of each item (item i has weight item_weights[i])
        bin_capacity: Capacity shared by every bin
        name: Optional instance name
    """
    item_weights: Tuple[float, ...]
    bin_capacity: float
    name: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.item_weights, tuple):
            object.__setattr__(self, 'item_weights', tuple(self.item_weights))
        if not self.item_weights:
            raise ValueError("instance must contain at least one item")
        if self.bin_capacity <= 0:
            raise ValueError(f"bin_capacity must be positive, got {self.bin_capacity}")
        for i, weight in enumerate(self.item_weights):
            if weight <= 0:
                raise ValueError(f"item {i} has non-positive weight {weight}")
            if weight > self.bin_capacity:
                raise ValueError(
                    f"item {i} of weight {weight} exceeds bin capacity {self.bin_capacity}"
                )

    @property
    def num_items(self) -> int:
        """Number of items."""
        return len(self.item_weights)

    @property
    def total_weight(self) -> float:
        """Sum of all item weights."""
        return sum(self.item_weights)

    @property
    def continuous_lower_bound(self) -> int:
        """
        L1 lower bound: ceil(total weight / capacity).
        """
        return math.ceil(self.total_weight / self.bin_capacity)

    def item_weight(self, item: int) -> float:
        """Weight of a single item."""
        return self.item_weights[item]

    def pattern_weight(self, items: Iterable[int]) -> float:
        """Total weight of a set of items."""
        return sum(self.item_weights[i] for i in items)

    def fits(self, items: Iterable[int], tol: float = 1e-6) -> bool:
        """Check whether a set of items fits into one bin."""
        return self.pattern_weight(items) <= self.bin_capacity + tol

    @classmethod
    def from_bpplib(cls, filepath: str) -> 'BinPackingInstance':
        """
        Load an instance from a BPPLIB file.

        Two layouts are accepted:
            BPP:  line 1 = n, line 2 = capacity, then n lines with one weight
            CSP:  line 1 = number of item types, line 2 = capacity, then
                  lines "weight demand" (expanded into demand copies)

        Args:
            filepath: Path to the BPPLIB .txt file

        Returns:
            BinPackingInstance
        """
        name = os.path.splitext(os.path.basename(filepath))[0]

        with open(filepath, 'r') as f:
            lines = [line.strip() for line in f if line.strip()]

        if len(lines) < 2:
            raise ValueError(f"{filepath}: expected item count and capacity")

        num_lines = int(lines[0])
        capacity = _parse_number(lines[1])

        weights: List[float] = []
        for line in lines[2:2 + num_lines]:
            parts = line.split()
            weight = _parse_number(parts[0])
            copies = int(parts[1]) if len(parts) > 1 else 1
            weights.extend([weight] * copies)

        return cls(item_weights=tuple(weights), bin_capacity=capacity, name=name)

    def __repr__(self) -> str:
        name_str = f"{self.name!r}, " if self.name else ""
        return (
            f"BinPackingInstance({name_str}items={self.num_items}, "
            f"capacity={self.bin_capacity})"
        )


def _parse_number(token: str) -> float:
    value = float(token)
    return int(value) if value.is_integer() else value
