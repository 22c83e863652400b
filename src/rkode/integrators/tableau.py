"""
Butcher Tableaus for the Supported Runge-Kutta Methods

A tableau bundles the coefficients (A, b, c) of one method with its
consistency order p and the step-size controller constants:

    h_next = h * clamp(h_fac * (tol / err)^exponent, h_min, h_max)

h_min and h_max bound the per-step change FACTOR, not the step itself;
h_fac is the safety damping applied before clamping.

Available tableaus:
- ERK4: classical explicit 4-stage Runge-Kutta, order 4
    0   |
    1/2 | 1/2
    1/2 | 0    1/2
    1   | 0    0    1
    ----+-------------------
        | 1/6  1/3  1/3  1/6

- DIRK3: two-stage diagonally implicit (Crouzeix), order 3,
  gamma = (3 + sqrt(3)) / 6
  (A[1, 0] is 1 - 2 gamma, not gamma, so c matches the row sums of A
  and the order 3 conditions hold)
    gamma     | gamma
    1 - gamma | 1 - 2 gamma   gamma
    ----------+--------------------
              | 1/2           1/2

- IRK4: two-stage Gauss-Legendre, order 4
    1/2 - sqrt(3)/6 | 1/4              1/4 - sqrt(3)/6
    1/2 + sqrt(3)/6 | 1/4 + sqrt(3)/6  1/4
    ----------------+----------------------------------
                    | 1/2              1/2

Reference: Hairer, Norsett & Wanner (1993), Hairer & Wanner (1996)
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Optional

import numpy as np

from ..errors import ConfigurationError
from ..linalg import Matrix, Vector

# Row sums of A must reproduce c to within this tolerance
NODE_CONSISTENCY_TOL = 1e-12


class TableauKind(Enum):
    """Stage coupling structure of a tableau."""
    EXPLICIT = "explicit"
    DIAGONALLY_IMPLICIT = "diagonally implicit"
    IMPLICIT = "implicit"


@dataclass(frozen=True)
class Tableau:
    """
    Immutable parameter set describing one Runge-Kutta method.

    Attributes:
        name: Short identifier (e.g. 'ERK4')
        kind: Stage coupling structure
        a: Butcher matrix, s x s
        b: Weights, length s
        c: Nodes, length s
        p: Consistency order
        h_min: Lower clamp of the step-size change factor
        h_max: Upper clamp of the step-size change factor
        h_fac: Safety damping factor in (0, 1)
    """
    name: str
    kind: TableauKind
    a: Matrix
    b: Vector
    c: Vector
    p: int
    h_min: float = 1.0 / 3.0
    h_max: float = 6.0
    h_fac: float = 0.9

    def __post_init__(self):
        s = self.b.dimension
        if self.a.shape != (s, s):
            raise ConfigurationError(
                f"Tableau {self.name}: A must be {s} x {s}, got {self.a.shape}"
            )
        if self.c.dimension != s:
            raise ConfigurationError(
                f"Tableau {self.name}: c must have length {s}, got {self.c.dimension}"
            )
        if self.p < 1:
            raise ConfigurationError(f"Tableau {self.name}: order must be >= 1, got {self.p}")
        if not 0.0 < self.h_min <= self.h_max:
            raise ConfigurationError(
                f"Tableau {self.name}: need 0 < h_min <= h_max, got {self.h_min}, {self.h_max}"
            )
        if not 0.0 < self.h_fac < 1.0:
            raise ConfigurationError(f"Tableau {self.name}: h_fac must lie in (0, 1), got {self.h_fac}")

        row_sums = self.a.to_array().sum(axis=1)
        if not np.allclose(row_sums, self.c.to_array(), rtol=0.0, atol=NODE_CONSISTENCY_TOL):
            raise ConfigurationError(
                f"Tableau {self.name}: nodes c {self.c} do not match row sums of A {row_sums.tolist()}"
            )
        if self.kind is TableauKind.EXPLICIT and not self.is_explicit:
            raise ConfigurationError(f"Tableau {self.name}: explicit methods need strictly lower triangular A")

    @property
    def s(self) -> int:
        """Number of stages."""
        return self.b.dimension

    @property
    def is_explicit(self) -> bool:
        """True when A is strictly lower triangular."""
        return not np.any(np.triu(self.a.to_array()))

    def with_bounds(
        self,
        h_min: Optional[float] = None,
        h_max: Optional[float] = None,
        h_fac: Optional[float] = None,
    ) -> 'Tableau':
        """Return a validated copy with different controller constants."""
        changes = {}
        if h_min is not None:
            changes['h_min'] = h_min
        if h_max is not None:
            changes['h_max'] = h_max
        if h_fac is not None:
            changes['h_fac'] = h_fac
        return replace(self, **changes)

    def describe(self) -> str:
        return f"{self.kind.value} {self.s}-stage RK method of order {self.p}"

    def __repr__(self) -> str:
        return f"Tableau({self.name}: {self.describe()})"


_SQRT3 = np.sqrt(3.0)
_GAMMA = (3.0 + _SQRT3) / 6.0

ERK4 = Tableau(
    name="ERK4",
    kind=TableauKind.EXPLICIT,
    a=Matrix.square(
        0.0, 0.0, 0.0, 0.0,
        0.5, 0.0, 0.0, 0.0,
        0.0, 0.5, 0.0, 0.0,
        0.0, 0.0, 1.0, 0.0,
    ),
    b=Vector.of(1.0 / 6.0, 1.0 / 3.0, 1.0 / 3.0, 1.0 / 6.0),
    c=Vector.of(0.0, 0.5, 0.5, 1.0),
    p=4,
)

DIRK3 = Tableau(
    name="DIRK3",
    kind=TableauKind.DIAGONALLY_IMPLICIT,
    a=Matrix.square(
        _GAMMA, 0.0,
        1.0 - 2.0 * _GAMMA, _GAMMA,
    ),
    b=Vector.of(0.5, 0.5),
    c=Vector.of(_GAMMA, 1.0 - _GAMMA),
    p=3,
)

IRK4 = Tableau(
    name="IRK4",
    kind=TableauKind.IMPLICIT,
    a=Matrix.square(
        0.25, 0.25 - _SQRT3 / 6.0,
        0.25 + _SQRT3 / 6.0, 0.25,
    ),
    b=Vector.of(0.5, 0.5),
    c=Vector.of(0.5 - _SQRT3 / 6.0, 0.5 + _SQRT3 / 6.0),
    p=4,
)

TABLEAUS: Dict[str, Tableau] = {
    tableau.name: tableau for tableau in (ERK4, DIRK3, IRK4)
}
