"""
Core module - fundamental data structures for branch-and-price.

Components:
----------
- BinPackingInstance: Item weights and bin capacity (read-only)
- Column: A bin pattern (set of items fitting into one bin)
- ColumnPool: Append-only collection of every generated pattern
- BranchNode: Separate/together pair decisions of a search-tree node
"""

from binpack_bp.core.column import Column, ColumnPool
from binpack_bp.core.node import BranchNode, ItemPair
from binpack_bp.core.problem import BinPackingInstance

__all__ = [
    # Problem definition
    "BinPackingInstance",
    # Solution representation
    "Column",
    "ColumnPool",
    # Branching
    "BranchNode",
    "ItemPair",
]
