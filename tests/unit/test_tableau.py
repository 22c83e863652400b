"""
Unit Tests for Butcher Tableaus

Tests verify:
1. Shapes, orders and controller constants of the shipped tableaus
2. Order conditions of the coefficients
3. Construction-time validation of ill-formed tableaus
4. Controller overrides via with_bounds()
"""

import pytest
import numpy as np

from rkode.errors import ConfigurationError
from rkode.integrators import DIRK3, ERK4, IRK4, TABLEAUS, Tableau, TableauKind
from rkode.linalg import Matrix, Vector


class TestShippedTableaus:
    """Tests for ERK4, DIRK3 and IRK4."""

    @pytest.mark.parametrize("tableau,stages,order", [
        (ERK4, 4, 4),
        (DIRK3, 2, 3),
        (IRK4, 2, 4),
    ])
    def test_shape_and_order(self, tableau, stages, order):
        """Test stage count and consistency order."""
        assert tableau.s == stages
        assert tableau.p == order
        assert tableau.a.shape == (stages, stages)
        assert tableau.h_min == pytest.approx(1.0 / 3.0)
        assert tableau.h_max == 6.0
        assert tableau.h_fac == 0.9

    @pytest.mark.parametrize("tableau", [ERK4, DIRK3, IRK4])
    def test_weights_sum_to_one(self, tableau):
        """Test the first order condition."""
        assert sum(tableau.b) == pytest.approx(1.0, abs=1e-14)

    @pytest.mark.parametrize("tableau", [ERK4, DIRK3, IRK4])
    def test_second_and_third_order_conditions(self, tableau):
        """Test b.c = 1/2, b.c^2 = 1/3 and b.A.c = 1/6."""
        b = tableau.b.to_array()
        c = tableau.c.to_array()
        a = tableau.a.to_array()

        assert b @ c == pytest.approx(1.0 / 2.0, abs=1e-14)
        assert b @ c ** 2 == pytest.approx(1.0 / 3.0, abs=1e-14)
        assert b @ a @ c == pytest.approx(1.0 / 6.0, abs=1e-14)

    @pytest.mark.parametrize("tableau", [ERK4, IRK4])
    def test_fourth_order_conditions(self, tableau):
        """Test the four fourth-order conditions."""
        b = tableau.b.to_array()
        c = tableau.c.to_array()
        a = tableau.a.to_array()

        assert b @ c ** 3 == pytest.approx(1.0 / 4.0, abs=1e-14)
        assert (b * c) @ a @ c == pytest.approx(1.0 / 8.0, abs=1e-14)
        assert b @ a @ c ** 2 == pytest.approx(1.0 / 12.0, abs=1e-14)
        assert b @ a @ a @ c == pytest.approx(1.0 / 24.0, abs=1e-14)

    def test_coupling_structure(self):
        """Test which tableaus are explicit."""
        assert ERK4.kind is TableauKind.EXPLICIT
        assert ERK4.is_explicit
        assert DIRK3.kind is TableauKind.DIAGONALLY_IMPLICIT
        assert not DIRK3.is_explicit
        assert DIRK3.a[0, 1] == 0.0
        assert DIRK3.a[1, 0] == pytest.approx(1.0 - 2.0 * DIRK3.c[0], abs=1e-15)
        assert IRK4.kind is TableauKind.IMPLICIT
        assert not IRK4.is_explicit

    def test_registry(self):
        """Test lookup by name."""
        assert TABLEAUS == {'ERK4': ERK4, 'DIRK3': DIRK3, 'IRK4': IRK4}

    def test_describe(self):
        """Test human-readable description."""
        assert ERK4.describe() == "explicit 4-stage RK method of order 4"
        assert "diagonally implicit" in DIRK3.describe()


class TestTableauValidation:
    """Tests for construction-time checks."""

    def _euler(self, **overrides):
        fields = dict(
            name="EULER",
            kind=TableauKind.EXPLICIT,
            a=Matrix.square(0.0),
            b=Vector.of(1.0),
            c=Vector.of(0.0),
            p=1,
        )
        fields.update(overrides)
        return Tableau(**fields)

    def test_valid_minimal_tableau(self):
        """Test that forward Euler is accepted."""
        euler = self._euler()
        assert euler.s == 1
        assert euler.is_explicit

    def test_wrong_matrix_shape(self):
        """Test that A must be s x s."""
        with pytest.raises(ConfigurationError):
            self._euler(a=Matrix.zeros(2, 2))

    def test_wrong_node_count(self):
        """Test that c must have s entries."""
        with pytest.raises(ConfigurationError):
            self._euler(c=Vector.of(0.0, 1.0))

    def test_order_must_be_positive(self):
        """Test that p >= 1."""
        with pytest.raises(ConfigurationError):
            self._euler(p=0)

    @pytest.mark.parametrize("h_min,h_max", [(0.0, 6.0), (2.0, 1.0), (-1.0, 1.0)])
    def test_invalid_factor_bounds(self, h_min, h_max):
        """Test that 0 < h_min <= h_max."""
        with pytest.raises(ConfigurationError):
            self._euler(h_min=h_min, h_max=h_max)

    @pytest.mark.parametrize("h_fac", [0.0, 1.0, 1.5])
    def test_invalid_safety_factor(self, h_fac):
        """Test that 0 < h_fac < 1."""
        with pytest.raises(ConfigurationError):
            self._euler(h_fac=h_fac)

    def test_nodes_must_match_row_sums(self):
        """Test that c_i equals the i-th row sum of A."""
        with pytest.raises(ConfigurationError, match="row sums"):
            Tableau(
                name="BAD",
                kind=TableauKind.IMPLICIT,
                a=Matrix.square(0.5, 0.0, 0.0, 0.5),
                b=Vector.of(0.5, 0.5),
                c=Vector.of(0.5, 0.25),
                p=1,
            )

    def test_explicit_kind_requires_lower_triangular(self):
        """Test that an explicit tableau cannot have a diagonal entry."""
        with pytest.raises(ConfigurationError):
            self._euler(a=Matrix.square(1.0), c=Vector.of(1.0))


class TestWithBounds:
    """Tests for controller overrides."""

    def test_overrides_only_given_values(self):
        """Test that unspecified constants are kept."""
        bounded = ERK4.with_bounds(h_max=2.0)
        assert bounded.h_max == 2.0
        assert bounded.h_min == ERK4.h_min
        assert bounded.h_fac == ERK4.h_fac
        assert bounded.a == ERK4.a

    def test_original_unchanged(self):
        """Test that the shipped tableau is not modified."""
        IRK4.with_bounds(h_min=0.5, h_max=0.5, h_fac=0.5)
        assert IRK4.h_max == 6.0

    def test_no_overrides_is_equal(self):
        """Test that with_bounds() without arguments returns an equal tableau."""
        assert ERK4.with_bounds() == ERK4

    def test_overrides_are_validated(self):
        """Test that invalid overrides are rejected."""
        with pytest.raises(ConfigurationError):
            DIRK3.with_bounds(h_min=3.0, h_max=2.0)

    def test_frozen(self):
        """Test that tableaus are immutable."""
        with pytest.raises(AttributeError):
            ERK4.p = 5
