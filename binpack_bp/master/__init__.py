"""
Master problem module - the restricted master LP.

The master problem of bin packing column generation is the set
partitioning LP over the generated bin patterns:

    min  sum_j lambda_j
    s.t. sum_{j : i in column j} lambda_j = 1   for each item i
         lambda_j >= 0

This module provides:
- MasterProblem: Abstract base class for custom implementations
- HiGHSMasterProblem: Default implementation using HiGHS
- MasterSolution: Solution data structure
- SolutionStatus: Enum for solution status

Usage:
------
    >>> from binpack_bp.master import HiGHSMasterProblem
    >>> master = HiGHSMasterProblem(instance)
    >>> master.add_columns(pool.seed_singletons(instance.num_items))
    >>> solution = master.solve_lp()
    >>> duals = solution.dual_values
"""

from binpack_bp.master.base import MasterProblem, violates_branching
from binpack_bp.master.highs import (
    HiGHSMasterProblem,
    configure_highs,
    map_highs_status,
)
from binpack_bp.master.solution import MasterSolution, SolutionStatus

__all__ = [
    # Solution
    'MasterSolution',
    'SolutionStatus',

    # Base class
    'MasterProblem',
    'violates_branching',

    # HiGHS implementation
    'HiGHSMasterProblem',
    'configure_highs',
    'map_highs_status',
]
