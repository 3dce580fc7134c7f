"""
Tests for regularized prediction on the probability simplex and by Frank-Wolfe.
"""

import warnings

import pytest
import numpy as np
from hypothesis import given, settings
from hypothesis import strategies as st

from inferopt import (
    DimensionError,
    InvalidConfigError,
    NumericalError,
    OneHotArgmax,
    RegularizedFrankWolfe,
    SoftArgmax,
    SparseArgmax,
    half_square_norm,
    isproba,
    isprobadist,
    one_hot_argmax,
    positive_part,
    ranking,
    shannon_entropy,
    simplex_projection_and_support,
    soft_argmax,
    sparse_argmax,
)

score_vectors = st.lists(
    st.floats(min_value=-100, max_value=100, allow_nan=False), min_size=1, max_size=20
).map(np.array)


def numerical_vjp(f, theta, dy, h=1e-6):
    """Central-difference estimate of dyᵀ J_f(theta)."""
    grad = np.zeros_like(theta)
    for i in range(theta.size):
        e = np.zeros_like(theta)
        e[i] = h
        grad[i] = (dy @ f(theta + e) - dy @ f(theta - e)) / (2 * h)
    return grad


# ============================================================================
# Closed-form predictions
# ============================================================================

class TestOneHotArgmax:
    """Tests for one_hot_argmax."""

    def test_basic(self, theta):
        np.testing.assert_array_equal(one_hot_argmax(theta), [1.0, 0.0, 0.0])

    def test_ties_first_index(self):
        np.testing.assert_array_equal(one_hot_argmax(np.array([1.0, 2.0, 2.0])), [0.0, 1.0, 0.0])

    def test_accepts_lists(self):
        np.testing.assert_array_equal(one_hot_argmax([0.0, -1.0]), [1.0, 0.0])

    def test_empty_raises(self):
        with pytest.raises(DimensionError):
            one_hot_argmax(np.array([]))

    def test_matrix_raises(self):
        with pytest.raises(DimensionError):
            one_hot_argmax(np.ones((2, 2)))


class TestSoftArgmax:
    """Tests for soft_argmax."""

    def test_worked_example(self, theta):
        """soft_argmax([3, 1, 2]) = exp(θ) / Σ exp(θ)."""
        s = soft_argmax(theta)
        np.testing.assert_allclose(s, [0.665241, 0.090031, 0.244728], atol=1e-6)
        np.testing.assert_allclose(s, np.exp(theta) / np.exp(theta).sum())

    def test_large_scores_do_not_overflow(self):
        s = soft_argmax(np.array([1000.0, 0.0, -1000.0]))
        assert np.all(np.isfinite(s))
        np.testing.assert_allclose(s, [1.0, 0.0, 0.0], atol=1e-12)

    def test_shift_invariance(self, theta):
        np.testing.assert_allclose(soft_argmax(theta), soft_argmax(theta + 50.0))

    @pytest.mark.parametrize("bad", [np.nan, np.inf, -np.inf])
    def test_non_finite_raises(self, bad):
        with pytest.raises(NumericalError):
            soft_argmax(np.array([1.0, bad]))

    def test_empty_raises(self):
        with pytest.raises(DimensionError):
            soft_argmax(np.array([]))

    @given(score_vectors)
    @settings(max_examples=50, deadline=None)
    def test_interior_of_simplex(self, z):
        s = soft_argmax(z)
        assert np.all(s > 0)
        assert abs(s.sum() - 1.0) < 1e-9


class TestSparseArgmax:
    """Tests for sparse_argmax and simplex_projection_and_support."""

    def test_interior_solution(self):
        p = sparse_argmax(np.array([0.5, 0.3, 0.1]))
        np.testing.assert_allclose(p, [8 / 15, 5 / 15, 2 / 15])

    def test_vertex_solution(self, theta):
        p, support = sparse_argmax(theta, return_support=True)
        np.testing.assert_allclose(p, [1.0, 0.0, 0.0])
        np.testing.assert_array_equal(support, [True, False, False])

    def test_partial_support(self):
        p, support = simplex_projection_and_support(np.array([1.0, 0.8, -1.0]))
        np.testing.assert_allclose(p, [0.6, 0.4, 0.0])
        np.testing.assert_array_equal(support, [True, True, False])

    def test_point_in_simplex_is_fixed(self):
        p = np.array([0.2, 0.5, 0.3])
        np.testing.assert_allclose(sparse_argmax(p), p)

    def test_empty_raises(self):
        with pytest.raises(DimensionError):
            sparse_argmax(np.array([]))

    def test_non_finite_raises(self):
        with pytest.raises(NumericalError):
            sparse_argmax(np.array([0.0, np.nan]))

    @given(score_vectors)
    @settings(max_examples=50, deadline=None)
    def test_in_simplex(self, z):
        p, support = simplex_projection_and_support(z)
        assert isprobadist(p)
        np.testing.assert_array_equal(support, p > 0)

    @given(score_vectors)
    @settings(max_examples=50, deadline=None)
    def test_is_closest_point(self, z):
        """The projection is at least as close to z as every vertex of the simplex."""
        p = sparse_argmax(z)
        dist = np.sum((z - p) ** 2)
        for j in range(z.size):
            vertex = np.zeros_like(z)
            vertex[j] = 1.0
            assert dist <= np.sum((z - vertex) ** 2) + 1e-9


# ============================================================================
# Helpers
# ============================================================================

class TestHelpers:
    """Tests for the simplex helper functions."""

    def test_shannon_entropy(self):
        assert shannon_entropy(np.array([0.5, 0.5])) == pytest.approx(np.log(2))
        assert shannon_entropy(np.array([1.0, 0.0])) == 0.0

    def test_half_square_norm(self):
        assert half_square_norm(np.array([3.0, 4.0])) == pytest.approx(12.5)

    def test_positive_part(self):
        assert positive_part(-1.5) == 0
        assert positive_part(2.0) == 2.0
        np.testing.assert_array_equal(positive_part(np.array([-1.0, 0.5])), [0.0, 0.5])

    def test_isproba(self):
        assert isproba(0.5)
        assert not isproba(1.5)
        assert not isproba(np.array([0.2, -0.1]))

    def test_isprobadist(self):
        assert isprobadist(np.array([0.25, 0.75]))
        assert not isprobadist(np.array([0.5, 0.6]))
        assert not isprobadist(np.array([1.5, -0.5]))
        assert not isprobadist(np.array([]))

    def test_ranking(self, theta):
        np.testing.assert_array_equal(ranking(theta), [1, 3, 2])
        np.testing.assert_array_equal(ranking(theta, rev=True), [3, 1, 2])

    def test_ranking_ties_by_index(self):
        np.testing.assert_array_equal(ranking(np.array([2.0, 2.0, 1.0])), [1, 2, 3])


# ============================================================================
# Predictor objects
# ============================================================================

class TestRegularizedPredictors:
    """Tests for predictor objects: regularizers and pullbacks."""

    def test_call_matches_functions(self, theta):
        np.testing.assert_allclose(SoftArgmax()(theta), soft_argmax(theta))
        np.testing.assert_allclose(SparseArgmax()(theta), sparse_argmax(theta))
        np.testing.assert_allclose(OneHotArgmax()(theta), one_hot_argmax(theta))

    def test_regularization_values(self):
        p = np.array([0.5, 0.5])
        assert SoftArgmax().compute_regularization(p) == pytest.approx(-np.log(2))
        assert SparseArgmax().compute_regularization(p) == pytest.approx(0.25)
        assert OneHotArgmax().compute_regularization(np.array([0.0, 1.0])) == 0.0

    def test_regularization_outside_domain(self):
        y = np.array([0.7, 0.7])
        assert SoftArgmax().compute_regularization(y) == np.inf
        assert SparseArgmax().compute_regularization(y) == np.inf
        assert OneHotArgmax().compute_regularization(np.array([0.5, 0.5])) == np.inf

    def test_soft_argmax_pullback(self, rng):
        theta = rng.normal(size=5)
        dy = rng.normal(size=5)
        y, backward = SoftArgmax().forward(theta)

        np.testing.assert_allclose(y, soft_argmax(theta))
        np.testing.assert_allclose(
            backward(dy), numerical_vjp(soft_argmax, theta, dy), atol=1e-6
        )

    @pytest.mark.parametrize("theta", [[0.5, 0.3, 0.1], [1.0, 0.8, -1.0]])
    def test_sparse_argmax_pullback(self, theta, rng):
        theta = np.array(theta)
        dy = rng.normal(size=3)
        _, backward = SparseArgmax().forward(theta)

        np.testing.assert_allclose(
            backward(dy), numerical_vjp(sparse_argmax, theta, dy), atol=1e-6
        )

    def test_one_hot_pullback_is_zero(self, theta):
        _, backward = OneHotArgmax().forward(theta)
        np.testing.assert_array_equal(backward(np.ones(3)), np.zeros(3))

    @pytest.mark.parametrize("predictor", [SoftArgmax(), SparseArgmax(), OneHotArgmax()])
    def test_pullback_rejects_wrong_dy_shape(self, predictor, theta):
        _, backward = predictor.forward(theta)
        with pytest.raises(DimensionError):
            backward(np.array([1.0]))

    @pytest.mark.parametrize("predictor", [SoftArgmax(), SparseArgmax()])
    def test_regularization_accepts_float32_targets(self, predictor):
        y = np.array([0.2, 0.5, 0.3], dtype=np.float32)
        assert abs(np.sum(y, dtype=np.float64) - 1.0) > 1e-9
        assert np.isfinite(predictor.compute_regularization(y))

    def test_regularization_rejects_targets_beyond_tolerance(self):
        y = np.array([0.2, 0.5, 0.3 + 1e-4])
        assert SoftArgmax().compute_regularization(y) == np.inf
        assert SparseArgmax().compute_regularization(y) == np.inf


# ============================================================================
# Frank-Wolfe
# ============================================================================

class TestRegularizedFrankWolfe:
    """Tests for generic regularized prediction by Frank-Wolfe."""

    def test_matches_sparse_argmax(self):
        """With Ω = ½‖y‖² over the simplex, Frank-Wolfe recovers sparse_argmax."""
        fw = RegularizedFrankWolfe(
            one_hot_argmax, half_square_norm, lambda y: y, max_iteration=1000, tol=1e-6
        )
        theta = np.array([0.5, 0.3, 0.1])

        with warnings.catch_warnings():
            warnings.simplefilter("error")
            y = fw(theta)

        np.testing.assert_allclose(y, sparse_argmax(theta), atol=1e-3)
        assert isprobadist(y, tol=1e-6)

    def test_vertex_solution_converges_immediately(self, theta):
        fw = RegularizedFrankWolfe(one_hot_argmax, half_square_norm, lambda y: y)
        np.testing.assert_allclose(fw(theta), [1.0, 0.0, 0.0])

    def test_step_rule_without_line_search(self):
        """The open-loop 2/(t+2) step gets close but does not reach tol=1e-6."""
        fw = RegularizedFrankWolfe(
            one_hot_argmax, half_square_norm, lambda y: y,
            max_iteration=2000, line_search=False,
        )
        theta = np.array([0.5, 0.3, 0.1])

        with pytest.warns(UserWarning, match="Frank-Wolfe stopped"):
            y = fw(theta)

        np.testing.assert_allclose(y, sparse_argmax(theta), atol=2e-2)

    def test_non_convergence_warns(self):
        fw = RegularizedFrankWolfe(
            one_hot_argmax, half_square_norm, lambda y: y, max_iteration=1, tol=1e-12
        )
        with pytest.warns(UserWarning, match="Frank-Wolfe"):
            fw(np.array([0.5, 0.3, 0.1]))

    def test_no_pullback(self, theta):
        calls = []

        def maximizer(t):
            calls.append(t)
            return one_hot_argmax(t)

        fw = RegularizedFrankWolfe(maximizer, half_square_norm, lambda y: y)
        with pytest.raises(InvalidConfigError, match="FenchelYoungLoss"):
            fw.forward(theta)
        with pytest.raises(InvalidConfigError):
            fw.pullback(theta, one_hot_argmax(theta))
        assert calls == []

    def test_bad_maximizer_shape(self, theta):
        fw = RegularizedFrankWolfe(lambda t: np.ones(2), half_square_norm, lambda y: y)
        with pytest.raises(DimensionError):
            fw(theta)

    @pytest.mark.parametrize("kwargs", [{"max_iteration": 0}, {"tol": 0.0}])
    def test_invalid_config(self, kwargs):
        with pytest.raises(InvalidConfigError):
            RegularizedFrankWolfe(one_hot_argmax, half_square_norm, lambda y: y, **kwargs)
