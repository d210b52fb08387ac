"""
Automatic design layer for signcalc.

- FoundationOptimizer: grid search for the smallest passing footing
- AutoDesigner: section, anchor, base plate and footing selection

Usage:
    from signcalc.ai import AutoDesigner

    result = AutoDesigner(inputs).run()
"""

from .optimizer import (
    FoundationOptimizer,
    OptimizationResult,
    OptimizationStatus,
    generate_candidates,
)
from .auto_design import AutoDesigner, AutoDesignResult

__all__ = [
    "FoundationOptimizer",
    "OptimizationResult",
    "OptimizationStatus",
    "generate_candidates",
    "AutoDesigner",
    "AutoDesignResult",
]
