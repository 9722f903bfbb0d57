from dataclasses import dataclass

import numpy as np
from mne.parallel import parallel_func

from ..errors import InsufficientDataError
from ..utils.logs import logger
from .embedding import BLOCK_SIZE, DelayEmbedding


@dataclass(frozen=True)
class CovariancePair:
    """Covariances of the embedded signal on both segment classes.

    Attributes
    ----------
    artifact : array of shape (n_embedded, n_embedded)
        Covariance over the valid artifact samples (``Rd``).
    background : array of shape (n_embedded, n_embedded)
        Covariance over the valid background samples (``Ry``).
    n_artifact : int
        Number of valid artifact samples.
    n_background : int
        Number of valid background samples.
    """

    artifact: np.ndarray
    background: np.ndarray
    n_artifact: int
    n_background: int


def _block_sums(data, delay, delay_spacing, start, stop, artifact):
    embedding = DelayEmbedding(data, delay, delay_spacing)
    block = embedding.block(start, stop)
    return (
        block[:, artifact].sum(axis=1),
        block[:, ~artifact].sum(axis=1),
    )


def _block_scatter(data, delay, delay_spacing, start, stop, artifact, mean_artifact, mean_background):
    embedding = DelayEmbedding(data, delay, delay_spacing)
    block = embedding.block(start, stop)
    centered_artifact = block[:, artifact] - mean_artifact[:, np.newaxis]
    centered_background = block[:, ~artifact] - mean_background[:, np.newaxis]
    return (
        centered_artifact @ centered_artifact.T,
        centered_background @ centered_background.T,
    )


def _map_blocks(func, embedding, artifact, n_jobs, block_size, *args):
    bounds = list(embedding.blocks(block_size))
    jobs = (
        (embedding.data, embedding.delay, embedding.delay_spacing, start, stop, artifact[start:stop]) + args
        for start, stop in bounds
    )
    if n_jobs == 1:
        return [func(*job) for job in jobs]
    parallel, p_fun, _ = parallel_func(func, n_jobs, total=len(bounds))
    # joblib returns results in submission order
    return parallel(p_fun(*job) for job in jobs)


def _reduce(partials):
    artifact, background = partials[0]
    artifact, background = artifact.copy(), background.copy()
    for part_artifact, part_background in partials[1:]:
        artifact += part_artifact
        background += part_background
    return artifact, background


def compute_covariances(embedding, mask, n_jobs=1, block_size=BLOCK_SIZE):
    """Estimate the artifact and background covariances of an embedded signal.

    Only samples inside the valid range of ``embedding`` contribute. Each
    covariance is centered on its own mean and normalized by ``n - 1``.
    The valid range is walked in blocks, the per-block partial sums are
    reduced in block order so the result does not depend on ``n_jobs``.

    Parameters
    ----------
    embedding : DelayEmbedding
        The embedded signal.
    mask : Mask
        Artifact marking of the signal.
    n_jobs : int
        Number of jobs used to compute the per-block partial sums.
    block_size : int
        Number of samples embedded at once.

    Returns
    -------
    covariances : CovariancePair
    """
    artifact = np.asarray(mask.values, dtype=bool)
    valid = embedding.valid
    n_artifact = int(np.sum(artifact & valid))
    n_background = int(np.sum(~artifact & valid))
    n_required = max(embedding.n_embedded, 2)
    logger.info(
        f"Valid samples: {n_artifact} artifact, {n_background} background, "
        f"{embedding.n_embedded} embedded channel(s)."
    )
    for name, count in (('artifact', n_artifact), ('background', n_background)):
        if count < n_required:
            raise InsufficientDataError(
                f"The {name} segments hold {count} valid sample(s), at least "
                f"{n_required} are required to estimate a covariance over "
                f"{embedding.n_embedded} embedded channel(s). Mark longer segments "
                f"or decrease the delay."
            )

    sums = _reduce(_map_blocks(_block_sums, embedding, artifact, n_jobs, block_size))
    mean_artifact = sums[0] / n_artifact
    mean_background = sums[1] / n_background

    scatter = _reduce(
        _map_blocks(_block_scatter, embedding, artifact, n_jobs, block_size, mean_artifact, mean_background)
    )
    cov_artifact = scatter[0] / (n_artifact - 1)
    cov_background = scatter[1] / (n_background - 1)

    # remove rounding asymmetry
    cov_artifact = (cov_artifact + cov_artifact.T) / 2
    cov_background = (cov_background + cov_background.T) / 2
    return CovariancePair(cov_artifact, cov_background, n_artifact, n_background)
