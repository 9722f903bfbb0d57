import numpy as np

from ..errors import InvalidSignalError
from ..utils._checks import check_type


def _check_data(data, name='data'):
    """Return ``data`` as a 2-D float array, rejecting empty or non-finite input."""
    try:
        data = np.asarray(data, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise InvalidSignalError(f"'{name}' could not be converted to a float array.") from exc
    if data.ndim != 2:
        raise InvalidSignalError(
            f"'{name}' must be a 2-D array of shape (n_channels, n_times), "
            f"got {data.ndim} dimension(s) instead."
        )
    if data.size == 0:
        raise InvalidSignalError(f"'{name}' is empty, got shape {data.shape}.")
    if not np.all(np.isfinite(data)):
        n_bad = int(np.sum(~np.isfinite(data)))
        raise InvalidSignalError(f"'{name}' contains {n_bad} non-finite value(s) (NaN or Inf).")
    return data


def _check_sfreq(sfreq):
    check_type(sfreq, ('numeric',), 'sfreq')
    if not np.isfinite(sfreq) or sfreq <= 0:
        raise InvalidSignalError(f"The sampling frequency must be strictly positive, got {sfreq}.")
    return float(sfreq)


class SignalBuffer:
    """Read-only multichannel recording with its sampling frequency.

    Parameters
    ----------
    data : array of shape (n_channels, n_times)
        The recording. It is copied and the copy is made read-only.
    sfreq : float
        The sampling frequency in Hz.
    """

    __slots__ = ('_data', '_sfreq')

    def __init__(self, data, sfreq):
        data = np.array(_check_data(data), copy=True)
        data.flags.writeable = False
        self._data = data
        self._sfreq = _check_sfreq(sfreq)

    @property
    def data(self):
        return self._data

    @property
    def sfreq(self):
        return self._sfreq

    @property
    def n_channels(self):
        return self._data.shape[0]

    @property
    def n_times(self):
        return self._data.shape[1]

    @property
    def shape(self):
        return self._data.shape

    def __repr__(self):
        return f"<SignalBuffer | {self.n_channels} channels x {self.n_times} samples @ {self.sfreq:g} Hz>"
