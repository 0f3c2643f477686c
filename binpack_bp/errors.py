"""
Exceptions raised by the branch-and-price engine.
"""

from typing import Any, Optional


class SolverError(RuntimeError):
    """
    The LP or MIP engine returned a status the engine cannot work with.

    Raised for numerical failures, solver errors, time limits and any other
    status that is neither optimal nor infeasible. The node solve is
    abandoned; the tree-search driver decides what to do next.

    Attributes:
        status: The status reported by the failing solve (if any)
    """

    def __init__(self, message: str, status: Optional[Any] = None):
        super().__init__(message)
        self.status = status
