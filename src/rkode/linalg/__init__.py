"""
Dense Linear Algebra for Butcher-Tableau Stage Equations

Immutable value types used throughout the stepping engine:
- Vector: fixed-dimension real vector with Euclidean and max-magnitude norms
- Matrix: dense real matrix with row-wise function application and LU solve
"""

from .vector import Vector
from .matrix import Matrix, PIVOT_TOLERANCE

__all__ = [
    'Vector',
    'Matrix',
    'PIVOT_TOLERANCE',
]
