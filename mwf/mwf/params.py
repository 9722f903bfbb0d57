from abc import ABC, abstractmethod

import numpy as np

from ..errors import InvalidRankError
from ..utils._checks import _ensure_int, check_type
from ..utils._docs import fill_doc


class RankPolicy(ABC):
    """Base class of the policies choosing the artifact subspace dimension."""

    @abstractmethod
    def select(self, eigenvalues):
        """Return the number of leading eigenpairs to retain.

        Parameters
        ----------
        eigenvalues : array of shape (n_components,)
            Generalized eigenvalues sorted in descending order.

        Returns
        -------
        rank : int
            Number of leading eigenpairs forming the artifact subspace.
        """

    def __eq__(self, other):
        return type(self) is type(other) and vars(self) == vars(other)

    def __hash__(self):
        return hash((type(self).__name__, tuple(sorted(vars(self).items()))))

    def __repr__(self):
        args = ', '.join(f'{key}={value!r}' for key, value in vars(self).items())
        return f"{type(self).__name__}({args})"


class FixedRank(RankPolicy):
    """Keep the first ``k`` eigenpairs (fewer if the space is smaller)."""

    def __init__(self, k):
        k = _ensure_int(k, 'k')
        if k <= 0:
            raise InvalidRankError(f"A fixed rank must be strictly positive, got {k}.")
        self.k = k

    def select(self, eigenvalues):
        return min(self.k, len(eigenvalues))


class PositiveEigenvalueCount(RankPolicy):
    """Keep the leading eigenpairs whose eigenvalue exceeds 1.

    Selection stops at the first eigenvalue lower or equal to 1, an isolated
    eigenvalue above 1 appearing later is ignored.
    """

    def select(self, eigenvalues):
        below = np.flatnonzero(np.asarray(eigenvalues) <= 1)
        return int(below[0]) if below.size else len(eigenvalues)


class FullRank(RankPolicy):
    """Keep every eigenpair."""

    def select(self, eigenvalues):
        return len(eigenvalues)


class PercentRank(RankPolicy):
    """Keep the shortest leading prefix reaching ``pct`` percent of the eigenvalue sum."""

    def __init__(self, pct):
        check_type(pct, ('numeric',), 'pct')
        if not 0 < pct <= 100:
            raise InvalidRankError(f"The percentage must be in (0, 100], got {pct}.")
        self.pct = float(pct)

    def select(self, eigenvalues):
        eigenvalues = np.asarray(eigenvalues)
        total = eigenvalues.sum()
        if total <= 0:
            return 0
        cumulative = 100 * np.cumsum(eigenvalues) / total
        # tolerance so that pct=100 always reaches the last eigenpair
        return min(int(np.searchsorted(cumulative, self.pct - 1e-9)) + 1, len(eigenvalues))


_RANK_SHORTHANDS = ('poseig', 'full', 'first', 'pct')


def _check_rank(rank, rank_option=None):
    """Convert the user ``rank`` argument to a :class:`RankPolicy`."""
    if isinstance(rank, RankPolicy):
        return rank
    if isinstance(rank, str):
        if rank not in _RANK_SHORTHANDS:
            raise ValueError(
                f"Rank must be one of {_RANK_SHORTHANDS}, an int or a RankPolicy, "
                f"got '{rank}' instead."
            )
        if rank == 'poseig':
            return PositiveEigenvalueCount()
        if rank == 'full':
            return FullRank()
        if rank_option is None:
            raise ValueError(f"The '{rank}' rank policy requires 'rank_option'.")
        return FixedRank(rank_option) if rank == 'first' else PercentRank(rank_option)
    check_type(rank, (RankPolicy, str, 'int-like'), 'rank')
    return FixedRank(rank)


@fill_doc
class FilterParams:
    """Settings of the multichannel Wiener filter.

    Parameters
    ----------
    %(delay)s
    %(rank)s
    %(rank_option)s
    %(mu)s
    %(delay_spacing)s
    %(regularization)s
    %(max_condition)s
    """

    def __init__(self, delay=0, rank='poseig', rank_option=None, mu=1.0,
                 delay_spacing=1, regularization=1e-8, max_condition=1e12):
        delay = _ensure_int(delay, 'delay')
        if delay < 0:
            raise ValueError(f"delay must be a non-negative integer, got {delay}.")
        delay_spacing = _ensure_int(delay_spacing, 'delay_spacing')
        if delay_spacing < 1:
            raise ValueError(f"delay_spacing must be a positive integer, got {delay_spacing}.")
        check_type(mu, ('numeric',), 'mu')
        if not mu > 0:
            raise ValueError(f"mu must be strictly positive, got {mu}.")
        check_type(regularization, ('numeric',), 'regularization')
        if not regularization > 0:
            raise ValueError(f"regularization must be strictly positive, got {regularization}.")
        check_type(max_condition, ('numeric',), 'max_condition')
        if not max_condition > 1:
            raise ValueError(f"max_condition must be greater than 1, got {max_condition}.")

        self.delay = delay
        self.delay_spacing = delay_spacing
        self.rank = _check_rank(rank, rank_option)
        self.mu = float(mu)
        self.regularization = float(regularization)
        self.max_condition = float(max_condition)

    def __repr__(self):
        return (
            f"FilterParams(delay={self.delay}, rank={self.rank!r}, mu={self.mu}, "
            f"delay_spacing={self.delay_spacing}, regularization={self.regularization}, "
            f"max_condition={self.max_condition})"
        )
