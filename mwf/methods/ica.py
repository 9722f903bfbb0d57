import numpy as np
from sklearn.decomposition import FastICA

from ..mask.sources import ABORTED
from ..mwf.mwf import FilterResult
from ..mwf.signal import SignalBuffer
from ..utils._checks import _ensure_int, check_type
from ..utils.logs import logger
from .base import ArtifactSeparationMethod


class ICAMethod(ArtifactSeparationMethod):
    """Independent component analysis front end.

    The recording is decomposed with :class:`sklearn.decomposition.FastICA`,
    the artifact components are picked by ``component_source`` and projected
    back to the channels to form the artifact estimate.

    Parameters
    ----------
    component_source : sequence of int | callable
        Indices of the artifact components, or a callable receiving the
        component time courses of shape (n_components, n_times) and the
        sampling frequency, returning the indices or ``ABORTED``.
    n_components : int | None
        Number of components. None keeps one per channel.
    max_iter : int
        Maximum number of FastICA iterations.
    random_state : int | None
        Seed of the FastICA initialization.
    """

    def __init__(self, component_source, n_components=None, max_iter=250, random_state=0):
        check_type(component_source, ('callable', list, tuple, np.ndarray), 'component_source')
        self.component_source = component_source
        self.n_components = None if n_components is None else _ensure_int(n_components, 'n_components')
        self.max_iter = _ensure_int(max_iter, 'max_iter')
        self.random_state = random_state

    def decompose(self, signal: SignalBuffer):
        """Return the fitted FastICA estimator and the component time courses."""
        ica = FastICA(
            n_components=self.n_components,
            max_iter=self.max_iter,
            random_state=self.random_state,
            whiten='unit-variance',
        )
        sources = ica.fit_transform(signal.data.T).T
        return ica, sources

    def _select(self, sources, sfreq):
        if callable(self.component_source):
            picks = self.component_source(sources, sfreq)
            if picks is None or picks is ABORTED:
                return ABORTED
        else:
            picks = self.component_source
        picks = np.unique(np.asarray(picks, dtype=int).ravel())
        if picks.size and (picks.min() < 0 or picks.max() >= len(sources)):
            raise ValueError(
                f"Component indices must be between 0 and {len(sources) - 1}, got {picks.tolist()}."
            )
        return picks

    def separate(self, signal: SignalBuffer):
        check_type(signal, (SignalBuffer,), 'signal')
        ica, sources = self.decompose(signal)
        picks = self._select(sources, signal.sfreq)
        if picks is ABORTED:
            logger.info("No component selected, the recording was not filtered.")
            return None
        logger.info(f"Removing {picks.size} independent component(s): {picks.tolist()}.")

        artifact = ica.mixing_[:, picks] @ sources[picks]
        cleaned = signal.data - artifact
        return FilterResult(cleaned, artifact)
