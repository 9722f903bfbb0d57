from typing import Optional

from ..mask.sources import ABORTED, MaskSource, StaticMaskSource
from ..mwf.mwf import apply_filter, compute_filter
from ..mwf.params import FilterParams
from ..mwf.signal import SignalBuffer
from ..utils._checks import check_type
from ..utils.logs import logger
from .base import ArtifactSeparationMethod


class MWFMethod(ArtifactSeparationMethod):
    """Multichannel Wiener filter front end.

    Parameters
    ----------
    mask_source : MaskSource | array-like
        Supplier of the artifact mask. An array is wrapped in a
        :class:`~mwf.mask.StaticMaskSource`.
    params : FilterParams | None
        Filter settings, defaults of :class:`~mwf.FilterParams` if None.
    n_jobs : int | None
        Number of jobs for the covariance estimation.
    """

    def __init__(self, mask_source, params: Optional[FilterParams] = None, n_jobs: int = None):
        if not isinstance(mask_source, MaskSource):
            mask_source = StaticMaskSource(mask_source)
        self.mask_source = mask_source
        self.params = FilterParams() if params is None else check_type(params, (FilterParams,), 'params')
        self.n_jobs = n_jobs

    def separate(self, signal: SignalBuffer):
        check_type(signal, (SignalBuffer,), 'signal')
        mask = self.mask_source.obtain_mask(signal)
        if mask is ABORTED:
            logger.info("No mask obtained, the recording was not filtered.")
            return None
        filt = compute_filter(signal.data, mask, self.params, n_jobs=self.n_jobs)
        return apply_filter(signal.data, filt)
