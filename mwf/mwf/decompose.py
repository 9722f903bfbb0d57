from dataclasses import dataclass

import numpy as np
from scipy.linalg import LinAlgError, eigh, lu_factor, lu_solve

from ..errors import NumericalInstabilityError
from ..utils.logs import logger


@dataclass(frozen=True)
class Eigendecomposition:
    """Generalized eigenpairs of the artifact and background covariances.

    Attributes
    ----------
    eigenvalues : array of shape (n_embedded,)
        Artifact to background energy ratios, in descending order.
    eigenvectors : array of shape (n_embedded, n_embedded)
        Eigenvectors stored as columns, in the order of ``eigenvalues``.
    """

    eigenvalues: np.ndarray
    eigenvectors: np.ndarray

    def __len__(self):
        return self.eigenvalues.size

    def __iter__(self):
        return iter(zip(self.eigenvalues, self.eigenvectors.T))


def regularize(cov, epsilon):
    """Load the diagonal of ``cov`` with ``epsilon`` times its average diagonal power."""
    avg_diag_power = np.trace(cov) / cov.shape[0]
    return cov + epsilon * avg_diag_power * np.eye(cov.shape[0])


def solve_gevd(covariances, regularization=1e-8):
    """Solve ``Rd v = lambda Ry v`` for the artifact and background covariances.

    The background covariance is always regularized before solving. The
    eigenvectors are normalized so that ``V.T @ Ry @ V`` is the identity.

    Parameters
    ----------
    covariances : CovariancePair
        Artifact (``Rd``) and background (``Ry``) covariances.
    regularization : float
        Diagonal loading of ``Ry``, relative to its average diagonal power.

    Returns
    -------
    eigen : Eigendecomposition
        Eigenpairs sorted by decreasing eigenvalue, ties kept in solver order.
    """
    artifact_cov = covariances.artifact
    background_cov = regularize(covariances.background, regularization)
    logger.debug(f"Background covariance loaded with epsilon={regularization:g}.")

    background_eigenvalues = np.linalg.eigvalsh(background_cov)
    smallest, largest = background_eigenvalues[0], background_eigenvalues[-1]
    if not smallest > 0 or largest / smallest * np.finfo(float).eps >= 1:
        raise NumericalInstabilityError(
            'The regularized background covariance is singular to working '
            f"precision (eigenvalues in [{smallest:.3g}, {largest:.3g}])."
        )

    try:
        eigenvalues, eigenvectors = eigh(artifact_cov, background_cov, check_finite=True)
    except (LinAlgError, ValueError) as exc:
        raise NumericalInstabilityError(
            f"The generalized eigenvalue problem could not be solved: {exc}"
        ) from exc
    if not np.all(np.isfinite(eigenvalues)):
        raise NumericalInstabilityError('The generalized eigenvalues are not all finite.')

    order = np.argsort(-eigenvalues, kind='stable')
    return Eigendecomposition(eigenvalues[order], eigenvectors[:, order])


def select_rank(eigen, policy):
    """Number of leading eigenpairs spanning the artifact subspace under ``policy``."""
    rank = int(policy.select(eigen.eigenvalues))
    if rank == 0:
        logger.warning(
            f"No eigenvalue qualifies under {policy!r}, the filter leaves the signal unchanged."
        )
    else:
        logger.info(f"Artifact subspace rank: {rank} / {len(eigen)}.")
    return rank


def build_filter(eigen, rank, mu=1.0, max_condition=1e12):
    """Assemble the filter weights for the first ``rank`` eigenpairs.

    With ``V`` the eigenvector basis, ``W = V @ diag(delta) @ inv(V)`` where
    ``delta_k = (lambda_k - 1) / (lambda_k - 1 + mu)`` for the retained
    eigenpairs and 0 otherwise. For ``mu=1`` this is ``inv(Rd) @ (Rd - Ry)``
    restricted to the artifact subspace, the minimum mean square error
    estimator of the artifact, applied as ``W.T @ embedded``.

    Parameters
    ----------
    eigen : Eigendecomposition
        Sorted generalized eigenpairs.
    rank : int
        Number of retained leading eigenpairs. 0 yields an all-zero filter.
    mu : float
        Trade-off between artifact suppression and signal distortion.
    max_condition : float
        Largest condition number accepted for ``V``.

    Returns
    -------
    weights : array of shape (n_embedded, n_embedded)
    """
    eigenvectors = eigen.eigenvectors
    n_embedded = eigenvectors.shape[0]
    if not 0 <= rank <= n_embedded:
        raise ValueError(f"rank must be between 0 and {n_embedded}, got {rank}.")
    if rank == 0:
        return np.zeros((n_embedded, n_embedded))

    condition = np.linalg.cond(eigenvectors)
    logger.debug(f"Eigenvector basis condition number: {condition:.3g}.")
    if not condition <= max_condition:
        raise NumericalInstabilityError(
            f"The eigenvector basis is ill-conditioned (condition number {condition:.3g} "
            f"above {max_condition:.3g})."
        )

    excess = eigen.eigenvalues[:rank] - 1
    denominator = excess + mu
    if np.any(np.abs(denominator) <= np.finfo(float).eps * max(1.0, mu)):
        raise NumericalInstabilityError(
            "A retained eigenvalue makes the filter weight unbounded, lower the rank."
        )
    delta = np.zeros(n_embedded)
    delta[:rank] = excess / denominator

    # W.T solves V.T @ W.T = diag(delta) @ V.T
    lu_piv = lu_factor(eigenvectors, check_finite=True)
    weights_t = lu_solve(lu_piv, delta[:, np.newaxis] * eigenvectors.T, trans=1)
    return weights_t.T
