"""
Pricing module - find bin patterns with negative reduced cost.

This module provides:
- PricingProblem: Abstract base class for custom implementations
- HiGHSPricingProblem: Knapsack MIP with branching constraints, solved by HiGHS
- PricingSolution: Solution data structure
- PricingStatus: Enum for solution status

Usage:
------
    >>> from binpack_bp.pricing import HiGHSPricingProblem
    >>> pricing = HiGHSPricingProblem(instance, node)
    >>> pricing.set_dual_values(duals)
    >>> solution = pricing.solve()
"""

from binpack_bp.pricing.base import (
    PricingProblem,
    PricingSolution,
    PricingStatus,
)
from binpack_bp.pricing.highs import HiGHSPricingProblem

__all__ = [
    'PricingProblem',
    'PricingSolution',
    'PricingStatus',
    'HiGHSPricingProblem',
]
