"""
Node module - the branching decisions of a search-tree node.

A BranchNode is produced by the tree-search driver and consumed read-only by
the engine. It carries Ryan-Foster pair decisions:

- separate (i, j): items i and j must be packed in different bins
- together (i, j): items i and j must be packed in the same bin

Children are derived from a parent by appending one decision:

    >>> root = BranchNode.root()
    >>> left = root.with_separate(0, 1)
    >>> right = root.with_together(0, 1)
    >>> left.is_root, left.separate
    (False, ((0, 1),))
"""

from dataclasses import dataclass
from typing import Tuple

ItemPair = Tuple[int, int]


@dataclass(frozen=True)
class BranchNode:
    """
    Pairwise branching decisions of one node.

    Attributes:
        is_root: True for the root of the search tree (never pruned)
        separate: Pairs forced into different bins, in decision order
        together: Pairs forced into the same bin, in decision order
    """
    is_root: bool = False
    separate: Tuple[ItemPair, ...] = ()
    together: Tuple[ItemPair, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'separate', tuple(tuple(p) for p in self.separate))
        object.__setattr__(self, 'together', tuple(tuple(p) for p in self.together))

    @classmethod
    def root(cls) -> 'BranchNode':
        """The root node: no decisions."""
        return cls(is_root=True)

    @property
    def depth(self) -> int:
        return len(self.separate) + len(self.together)

    def with_separate(self, i: int, j: int) -> 'BranchNode':
        """Child node forcing items i and j into different bins."""
        return BranchNode(
            is_root=False,
            separate=self.separate + ((i, j),),
            together=self.together,
        )

    def with_together(self, i: int, j: int) -> 'BranchNode':
        """Child node forcing items i and j into the same bin."""
        return BranchNode(
            is_root=False,
            separate=self.separate,
            together=self.together + ((i, j),),
        )

    def validate(self, num_items: int) -> None:
        """
        Check every pair references two distinct items in range.

        Args:
            num_items: Number of items of the instance

        Raises:
            ValueError: If a pair is malformed
        """
        for kind, pairs in (("separate", self.separate), ("together", self.together)):
            for pair in pairs:
                if len(pair) != 2:
                    raise ValueError(f"{kind} entry {pair!r} is not a pair")
                a, b = pair
                if not (0 <= a < num_items and 0 <= b < num_items):
                    raise ValueError(
                        f"{kind} pair {pair!r} out of range for {num_items} items"
                    )
                if a == b:
                    raise ValueError(f"{kind} pair {pair!r} repeats an item")

    def __repr__(self) -> str:
        kind = "root" if self.is_root else f"depth={self.depth}"
        return (
            f"BranchNode({kind}, separate={list(self.separate)}, "
            f"together={list(self.together)})"
        )
