from dataclasses import dataclass
from typing import Optional

import mne
import numpy as np
from mne.io import BaseRaw

from ..errors import InvalidSignalError
from ..mask.mask import Mask
from ..utils._checks import _check_n_jobs, check_type
from ..utils._docs import fill_doc
from ..utils.logs import logger, verbose as _verbose
from .covariances import compute_covariances
from .decompose import Eigendecomposition, build_filter, select_rank, solve_gevd
from .embedding import DelayEmbedding
from .params import FilterParams
from .signal import _check_data, _check_sfreq


@dataclass(frozen=True)
class FilterMatrix:
    """Multichannel Wiener filter computed on a marked recording.

    Attributes
    ----------
    weights : array of shape (n_embedded, n_embedded)
        Filter ``W``, the embedded artifact estimate is ``W.T @ embedded``.
    eigen : Eigendecomposition
        All the generalized eigenpairs, retained or not.
    rank : int
        Number of retained leading eigenpairs.
    n_channels : int
        Number of channels of the signal the filter applies to.
    params : FilterParams
        Settings used to compute the filter.
    """

    weights: np.ndarray
    eigen: Eigendecomposition
    rank: int
    n_channels: int
    params: FilterParams

    @property
    def delay(self):
        return self.params.delay

    @property
    def delay_spacing(self):
        return self.params.delay_spacing


@dataclass(frozen=True)
class FilterResult:
    """Outcome of an artifact removal, both arrays of shape (n_channels, n_times).

    ``cleaned`` is exactly ``original - artifact``.
    """

    cleaned: np.ndarray
    artifact: np.ndarray


@_verbose
@fill_doc
def compute_filter(data, mask, params: Optional[FilterParams] = None, n_jobs: int = None, verbose=None):
    """Compute the multichannel Wiener filter removing the marked artifacts.

    Parameters
    ----------
    %(data)s
    %(mask)s
    params : FilterParams | None
        Filter settings. If None, the defaults of :class:`FilterParams` are used.
    %(n_jobs)s
    %(verbose)s

    Returns
    -------
    filt : FilterMatrix
        The filter, to be used with :func:`apply_filter`.
    """
    data = _check_data(data)
    params = FilterParams() if params is None else check_type(params, (FilterParams,), 'params')
    n_jobs = _check_n_jobs(n_jobs)
    mask = Mask(mask, n_times=data.shape[1])

    embedding = DelayEmbedding(data, params.delay, params.delay_spacing)
    logger.info(
        f"Embedding {embedding.n_channels} channel(s) with {embedding.n_lags} lag(s) "
        f"(delay={params.delay}, spacing={params.delay_spacing})."
    )
    covariances = compute_covariances(embedding, mask, n_jobs=n_jobs)
    eigen = solve_gevd(covariances, params.regularization)
    rank = select_rank(eigen, params.rank)
    weights = build_filter(eigen, rank, mu=params.mu, max_condition=params.max_condition)
    return FilterMatrix(weights, eigen, rank, embedding.n_channels, params)


def apply_filter(data, filt: FilterMatrix):
    """Remove the artifact estimated by ``filt`` from a recording.

    The first and last ``delay * delay_spacing`` samples have no complete
    embedding, their artifact estimate is zero and they pass through unchanged.

    Parameters
    ----------
    data : array of shape (n_channels, n_times)
        Recording to clean. It may differ from the one the filter was computed
        on but must have the same number of channels.
    filt : FilterMatrix
        Filter returned by :func:`compute_filter`.

    Returns
    -------
    result : FilterResult
    """
    data = _check_data(data)
    check_type(filt, (FilterMatrix,), 'filt')
    if data.shape[0] != filt.n_channels:
        raise InvalidSignalError(
            f"The filter was computed for {filt.n_channels} channel(s), "
            f"got a signal with {data.shape[0]} channel(s)."
        )
    embedding = DelayEmbedding(data, filt.delay, filt.delay_spacing)
    # rows of W.T producing the zero-lag block of the embedded estimate
    projection = embedding.zero_lag(filt.weights.T)

    artifact = np.zeros_like(data)
    if filt.rank > 0:
        for start, stop, block in embedding.iter_blocks():
            artifact[:, start:stop] = projection @ block
    cleaned = data - artifact
    return FilterResult(cleaned, artifact)


@fill_doc
class MWF():
    r"""Multichannel Wiener filter for marked artifact removal.

    The filter is learned from a recording in which artifact segments are
    marked. It maximizes the artifact to background energy ratio through a
    generalized eigenvalue decomposition of both segment covariances, and
    subtracts the minimum mean square error estimate of the artifact in the
    retained directions only.

    Parameters
    ----------
    %(delay)s
    %(rank)s
    %(rank_option)s
    %(mu)s
    %(delay_spacing)s
    %(regularization)s
    %(max_condition)s

    Attributes
    ----------
    filter_ : FilterMatrix
        The fitted filter, available after :meth:`fit` or :meth:`fit_raw`.
    sfreq_ : float | None
        Sampling frequency of the fitted recording, None if it was not given.
    """

    def __init__(self, delay=0, rank='poseig', rank_option=None, mu=1.0,
                 delay_spacing=1, regularization=1e-8, max_condition=1e12):
        self.params = FilterParams(
            delay=delay, rank=rank, rank_option=rank_option, mu=mu,
            delay_spacing=delay_spacing, regularization=regularization,
            max_condition=max_condition,
        )

    def __repr__(self):
        status = f"rank {self.filter_.rank}" if hasattr(self, 'filter_') else 'not fitted'
        return f"<MWF | {self.params!r} | {status}>"

    @fill_doc
    def fit(self, data, mask, sfreq=None, n_jobs: int = None, verbose: Optional[str] = None):
        """Fit the filter to a marked recording.

        Parameters
        ----------
        %(data)s
        %(mask)s
        %(sfreq)s
        %(n_jobs)s
        %(verbose)s

        Returns
        -------
        self : MWF
            The fitted instance.
        """
        self.sfreq_ = None if sfreq is None else _check_sfreq(sfreq)
        self.filter_ = compute_filter(data, mask, self.params, n_jobs=n_jobs, verbose=verbose)
        return self

    @_verbose
    @fill_doc
    def transform(self, data, verbose: Optional[str] = None):
        """Remove the artifacts from a recording with the fitted filter.

        Parameters
        ----------
        %(data)s
        %(verbose)s

        Returns
        -------
        result : FilterResult
            The cleaned signal and the artifact estimate.
        """
        self._check_fitted()
        return apply_filter(data, self.filter_)

    @fill_doc
    def fit_transform(self, data, mask, sfreq=None, n_jobs: int = None,
                      verbose: Optional[str] = None):
        """Fit the filter and remove the artifacts from the same recording.

        Parameters
        ----------
        %(data)s
        %(mask)s
        %(sfreq)s
        %(n_jobs)s
        %(verbose)s

        Returns
        -------
        result : FilterResult
            The cleaned signal and the artifact estimate.
        """
        return self.fit(data, mask, sfreq, n_jobs=n_jobs, verbose=verbose).transform(data)

    @_verbose
    @fill_doc
    def fit_raw(self,
                raw: BaseRaw,
                mask=None,
                reject_prefix: str = 'bad',
                picks=None,
                n_jobs: int = None,
                verbose: Optional[str] = None):
        """Fit the filter to a raw recording.

        Parameters
        ----------
        raw : mne.io.BaseRaw
            The raw data to fit the filter to.
        mask : array-like of shape (n_times,) | Mask | None
            Artifact marking. If None, the mask is built from the annotations
            of ``raw`` selected by ``reject_prefix``.
        %(reject_prefix)s
        picks : str | list | slice | None
            Channels to filter, as accepted by :meth:`mne.io.Raw.pick`. None
            picks every data channel.
        %(n_jobs)s
        %(verbose)s

        Returns
        -------
        self : MWF
            The fitted instance.
        """
        check_type(raw, (BaseRaw,), 'raw')
        check_type(reject_prefix, (str,), 'reject_prefix')
        inst = self._pick(raw, picks)
        if mask is None:
            mask = Mask.from_raw(inst, prefix=reject_prefix)
            logger.info(f"Mask built from '{reject_prefix}' annotations: {mask.n_artifact} artifact sample(s).")
        data = inst.get_data(verbose=False)
        self.ch_names_ = list(inst.ch_names)
        return self.fit(data, mask, inst.info['sfreq'], n_jobs=n_jobs, verbose=verbose)

    @_verbose
    @fill_doc
    def transform_raw(self, raw: BaseRaw, verbose: Optional[str] = None):
        """Remove the artifacts from a raw recording with the fitted filter.

        Parameters
        ----------
        raw : mne.io.BaseRaw
            The raw data to clean. It must contain the channels used in
            :meth:`fit_raw`.
        %(verbose)s

        Returns
        -------
        raw_cleaned : mne.io.RawArray
            The cleaned recording.
        raw_artifact : mne.io.RawArray
            The artifact estimate.
        """
        check_type(raw, (BaseRaw,), 'raw')
        self._check_fitted()
        picks = getattr(self, 'ch_names_', None)
        inst = self._pick(raw, picks)
        result = apply_filter(inst.get_data(verbose=False), self.filter_)

        outputs = []
        for data in (result.cleaned, result.artifact):
            out = mne.io.RawArray(data, inst.info, first_samp=inst.first_samp, verbose=False)
            out.set_annotations(inst.annotations)
            outputs.append(out)
        return tuple(outputs)

    def _check_fitted(self):
        if not hasattr(self, 'filter_'):
            raise RuntimeError('Model has not been fitted yet. Call fit() or fit_raw() first.')

    @staticmethod
    def _pick(raw, picks):
        inst = raw.copy()
        if picks is None:
            return inst.pick('data', exclude=[]).load_data(verbose=False)
        return inst.pick(picks).load_data(verbose=False)
