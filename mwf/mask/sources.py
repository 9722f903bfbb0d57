from abc import ABC, abstractmethod

from ..utils._checks import check_type
from ..utils.logs import logger
from .mask import Mask


class _Aborted:
    """Sentinel returned when the marking is abandoned by the user."""

    def __repr__(self):
        return 'ABORTED'

    def __bool__(self):
        return False


ABORTED = _Aborted()


class MaskSource(ABC):
    """Supplier of an artifact mask for a recording.

    Implementations may block, e.g. while a user marks segments in an
    interactive viewer. They return :data:`ABORTED` when no mask was produced.
    """

    @abstractmethod
    def obtain_mask(self, signal):
        """Return the mask of ``signal``.

        Parameters
        ----------
        signal : SignalBuffer
            The recording to mark.

        Returns
        -------
        mask : Mask | ABORTED
        """

    def __call__(self, signal):
        return self.obtain_mask(signal)


class StaticMaskSource(MaskSource):
    """Return a mask known in advance."""

    def __init__(self, mask):
        self.mask = mask

    def obtain_mask(self, signal):
        return Mask(self.mask, n_times=signal.n_times)


class CallableMaskSource(MaskSource):
    """Delegate the marking to a callback.

    Parameters
    ----------
    func : callable
        Called as ``func(signal)``. It returns a mask-like array, or
        :data:`ABORTED` or None when the marking was abandoned.
    """

    def __init__(self, func):
        self.func = check_type(func, ('callable',), 'func')

    def obtain_mask(self, signal):
        values = self.func(signal)
        if values is None or values is ABORTED:
            logger.warning("Selection of artifact segments aborted, no mask was produced.")
            return ABORTED
        return Mask(values, n_times=signal.n_times)


class AnnotationMaskSource(MaskSource):
    """Build the mask from :class:`mne.Annotations`.

    Parameters
    ----------
    annotations : mne.Annotations
        Annotations of the recording.
    first_samp : int
        Index of the first sample of the recording.
    prefix : str
        Description prefix of the artifact annotations.
    """

    def __init__(self, annotations, first_samp=0, prefix='bad'):
        self.annotations = annotations
        self.first_samp = first_samp
        self.prefix = prefix

    def obtain_mask(self, signal):
        return Mask.from_annotations(
            self.annotations, signal.sfreq, signal.n_times,
            first_samp=self.first_samp, prefix=self.prefix,
        )
