"""
Unit Tests for the Sample Problems
"""

import pytest
import numpy as np

from rkode.linalg import Matrix, Vector
from rkode.problems import (
    PROBLEM_NAMES,
    exponential_decay,
    get_problem,
    harmonic_oscillator,
    van_der_pol,
)


class TestRightHandSides:
    """Tests for the problem functions"""

    def test_exponential_decay(self):
        assert exponential_decay(0.0, Vector.of(2.0, -1.0)) == Vector.of(-2.0, 1.0)

    def test_harmonic_oscillator(self):
        assert harmonic_oscillator(0.0, Vector.of(1.0, 2.0)) == Vector.of(2.0, -1.0)

    def test_van_der_pol(self):
        problem, _ = van_der_pol(2.0)
        # y1' = mu (1 - y0^2) y1 - y0 = 2 * (1 - 4) * 3 - 2
        assert problem(0.0, Vector.of(2.0, 3.0)) == Vector.of(3.0, -20.0)

    def test_van_der_pol_jacobian_matches_finite_differences(self):
        """Test the analytic Jacobian column by column"""
        problem, jacobian = van_der_pol(1.5)
        y = Vector.of(0.7, -0.4)
        eps = 1e-7

        numeric = Matrix.from_columns(
            (1.0 / eps) * (problem(0.0, y + eps * e) - problem(0.0, y))
            for e in (Vector.of(1.0, 0.0), Vector.of(0.0, 1.0))
        )
        np.testing.assert_allclose(jacobian(0.0, y).to_array(), numeric.to_array(), atol=1e-5)


class TestGetProblem:
    """Tests for lookup by name"""

    @pytest.mark.parametrize("name", PROBLEM_NAMES)
    def test_known_names(self, name):
        selected = get_problem(name)
        dy = selected.problem(0.0, selected.start_values)
        assert dy.dimension == selected.start_values.dimension

    def test_only_van_der_pol_has_jacobian(self):
        assert get_problem('van_der_pol', mu=1.0).jacobian is not None
        assert get_problem('decay').jacobian is None

    def test_unknown_name(self):
        with pytest.raises(KeyError, match="lorenz"):
            get_problem('lorenz')
