"""
binpack-bp: Branch-and-Price for One-Dimensional Bin Packing

Solves nodes of a Ryan-Foster branch-and-price tree by column generation,
with HiGHS for both the restricted master LP and the knapsack pricing MIP.
"""

__version__ = "0.1.0"

# Configuration
from binpack_bp.config import BinPackConfig, config, configure_logging
from binpack_bp.errors import SolverError

# Core classes
from binpack_bp.core.column import Column, ColumnPool
from binpack_bp.core.node import BranchNode
from binpack_bp.core.problem import BinPackingInstance

# Master problem
from binpack_bp.master import (
    HiGHSMasterProblem,
    MasterProblem,
    MasterSolution,
    SolutionStatus,
)

# Pricing problem
from binpack_bp.pricing import (
    HiGHSPricingProblem,
    PricingProblem,
    PricingSolution,
    PricingStatus,
)

# Solver
from binpack_bp.solver import (
    NO_BRANCHING_PAIR,
    BranchAndPriceEngine,
    CGStatus,
    ColumnGeneration,
    Incumbent,
    NodeOutcome,
    NodeResult,
)

__all__ = [
    # Version
    "__version__",
    # Configuration
    "BinPackConfig",
    "config",
    "configure_logging",
    "SolverError",
    # Core classes
    "BinPackingInstance",
    "Column",
    "ColumnPool",
    "BranchNode",
    # Master problem
    "MasterProblem",
    "MasterSolution",
    "SolutionStatus",
    "HiGHSMasterProblem",
    # Pricing problem
    "PricingProblem",
    "PricingSolution",
    "PricingStatus",
    "HiGHSPricingProblem",
    # Solver
    "ColumnGeneration",
    "CGStatus",
    "Incumbent",
    "BranchAndPriceEngine",
    "NodeOutcome",
    "NodeResult",
    "NO_BRANCHING_PAIR",
]
