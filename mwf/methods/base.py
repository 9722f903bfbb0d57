"""Base class of the artifact separation front ends."""

from abc import ABC, abstractmethod

from ..mwf.signal import SignalBuffer


class ArtifactSeparationMethod(ABC):
    """Identify and remove artifacts from a recording.

    Front ends only share the signal and result types: a method receives a
    :class:`~mwf.mwf.signal.SignalBuffer` and returns a
    :class:`~mwf.mwf.mwf.FilterResult`, or None when the artifact
    identification was aborted and nothing was computed.
    """

    @abstractmethod
    def separate(self, signal: SignalBuffer):
        """Separate the artifacts from ``signal``.

        Parameters
        ----------
        signal : SignalBuffer
            The recording to clean.

        Returns
        -------
        result : FilterResult | None
            The cleaned signal and the artifact estimate, None if aborted.
        """

    def __call__(self, signal: SignalBuffer):
        return self.separate(signal)
