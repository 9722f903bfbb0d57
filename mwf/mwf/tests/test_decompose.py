"""Test the generalized eigendecomposition and the filter construction."""

import numpy as np
import pytest

from mwf.errors import NumericalInstabilityError
from mwf.mwf.covariances import CovariancePair
from mwf.mwf.decompose import build_filter, regularize, select_rank, solve_gevd
from mwf.mwf.params import FixedRank, PositiveEigenvalueCount

rng = np.random.default_rng(42)


def _spd(n, scale=1.0):
    a = rng.standard_normal((n, 4 * n))
    return scale * (a @ a.T) / (4 * n)


artifact_cov = _spd(5, scale=4.0)
background_cov = _spd(5)
covs = CovariancePair(artifact_cov, background_cov, 100, 100)


def test_regularize():
    cov = np.diag([1.0, 3.0])
    np.testing.assert_allclose(regularize(cov, 0.5), np.diag([2.0, 4.0]))


def test_solve_gevd():
    eigen = solve_gevd(covs, regularization=1e-8)
    background = regularize(background_cov, 1e-8)
    assert len(eigen) == 5
    assert np.all(np.diff(eigen.eigenvalues) <= 0)
    for value, vector in eigen:
        np.testing.assert_allclose(artifact_cov @ vector, value * background @ vector, atol=1e-9)
    np.testing.assert_allclose(
        eigen.eigenvectors.T @ background @ eigen.eigenvectors, np.eye(5), atol=1e-9
    )


def test_solve_gevd_singular_background():
    singular = CovariancePair(artifact_cov, np.zeros((5, 5)), 100, 100)
    with pytest.raises(NumericalInstabilityError, match="singular"):
        solve_gevd(singular)


def test_solve_gevd_rank_deficient_background_is_regularized():
    vector = rng.standard_normal((5, 1))
    deficient = CovariancePair(artifact_cov, vector @ vector.T, 100, 100)
    eigen = solve_gevd(deficient, regularization=1e-6)
    assert np.all(np.isfinite(eigen.eigenvalues))


def test_solve_gevd_non_finite():
    bad = artifact_cov.copy()
    bad[0, 0] = np.nan
    with pytest.raises(NumericalInstabilityError):
        solve_gevd(CovariancePair(bad, background_cov, 100, 100))


def test_select_rank_positive_prefix():
    eigen = solve_gevd(covs)
    eigen = type(eigen)(np.array([5.0, 2.0, 1.0, 3.0, 0.5]), eigen.eigenvectors)
    assert select_rank(eigen, PositiveEigenvalueCount()) == 2
    assert select_rank(eigen, FixedRank(3)) == 3
    assert select_rank(eigen, FixedRank(10)) == 5


def test_select_rank_zero_warns(caplog, monkeypatch):
    from mwf import logger

    monkeypatch.setattr(logger, "propagate", True)
    eigen = solve_gevd(covs)
    eigen = type(eigen)(np.array([0.9, 0.5, 0.4, 0.2, 0.1]), eigen.eigenvectors)
    with caplog.at_level("WARNING", logger="mwf"):
        assert select_rank(eigen, PositiveEigenvalueCount()) == 0
    assert "leaves the signal unchanged" in caplog.text


def test_build_filter_full_rank_is_mmse():
    eigen = solve_gevd(covs, regularization=1e-8)
    background = regularize(background_cov, 1e-8)
    weights = build_filter(eigen, len(eigen))
    expected = np.linalg.solve(artifact_cov, artifact_cov - background)
    np.testing.assert_allclose(weights, expected, atol=1e-8)


def test_build_filter_acts_on_retained_subspace_only():
    eigen = solve_gevd(covs)
    weights = build_filter(eigen, 2)
    vectors = eigen.eigenvectors
    values = eigen.eigenvalues
    for k in range(2):
        np.testing.assert_allclose(
            weights @ vectors[:, k], (values[k] - 1) / values[k] * vectors[:, k], atol=1e-9
        )
    for k in range(2, 5):
        np.testing.assert_allclose(weights @ vectors[:, k], 0, atol=1e-9)


def test_build_filter_mu():
    eigen = solve_gevd(covs)
    weights = build_filter(eigen, 1, mu=3.0)
    vector = eigen.eigenvectors[:, 0]
    value = eigen.eigenvalues[0]
    np.testing.assert_allclose(weights @ vector, (value - 1) / (value + 2) * vector, atol=1e-9)


def test_build_filter_rank_zero():
    eigen = solve_gevd(covs)
    np.testing.assert_array_equal(build_filter(eigen, 0), np.zeros((5, 5)))


def test_build_filter_ill_conditioned():
    eigen = solve_gevd(covs)
    with pytest.raises(NumericalInstabilityError, match="ill-conditioned"):
        build_filter(eigen, 1, max_condition=1.0)


def test_build_filter_invalid_rank():
    eigen = solve_gevd(covs)
    with pytest.raises(ValueError):
        build_filter(eigen, 6)
