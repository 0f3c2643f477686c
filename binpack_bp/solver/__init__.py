"""
Solver module - column generation and branch-and-price node solving.

This module provides:
- ColumnGeneration: Column generation loop at one node
- BranchingSelector / Incumbent: Ryan-Foster pair selection and best bound
- BranchAndPriceEngine: Node solver used by an external tree driver
"""

from binpack_bp.solver.branching import (
    BranchingDecision,
    BranchingSelector,
    Incumbent,
)
from binpack_bp.solver.column_generation import ColumnGeneration
from binpack_bp.solver.engine import (
    NO_BRANCHING_PAIR,
    BranchAndPriceEngine,
    NodeOutcome,
    NodeResult,
)
from binpack_bp.solver.solution import CGIteration, CGResult, CGStatus

__all__ = [
    # Column generation
    'ColumnGeneration',
    'CGIteration',
    'CGResult',
    'CGStatus',

    # Branching
    'BranchingDecision',
    'BranchingSelector',
    'Incumbent',

    # Engine
    'BranchAndPriceEngine',
    'NodeOutcome',
    'NodeResult',
    'NO_BRANCHING_PAIR',
]
