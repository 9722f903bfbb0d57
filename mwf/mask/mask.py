import numpy as np
from mne import Annotations
from mne.io import BaseRaw

from ..errors import InvalidMaskError
from ..utils._checks import _ensure_int, check_type


class Mask:
    """Per-sample marking of artifact and background segments.

    Parameters
    ----------
    values : array-like of shape (n_times,) | Mask
        Any non-zero or true value marks an artifact sample. A row or column
        vector of shape (1, n_times) or (n_times, 1) is accepted.
    n_times : int | None
        Expected number of samples. If provided, a length mismatch raises.
    """

    __slots__ = ('_values',)

    def __init__(self, values, n_times=None):
        if isinstance(values, Mask):
            values = values.values
        values = np.asarray(values)
        if values.ndim == 2 and 1 in values.shape:
            values = values.ravel()
        if values.ndim != 1:
            raise InvalidMaskError(
                f"The mask must be one dimensional, got shape {values.shape}."
            )
        values = values != 0
        if n_times is not None and values.size != n_times:
            raise InvalidMaskError(
                f"The mask has {values.size} sample(s) but the signal has {n_times}."
            )
        if not values.any():
            raise InvalidMaskError('The mask marks no artifact sample.')
        if values.all():
            raise InvalidMaskError("The mask marks every sample as artifact, no background is left.")
        values.flags.writeable = False
        self._values = values

    @property
    def values(self):
        return self._values

    @property
    def artifact(self):
        """Indices of the artifact samples."""
        return np.flatnonzero(self._values)

    @property
    def background(self):
        """Indices of the background samples."""
        return np.flatnonzero(~self._values)

    @property
    def n_artifact(self):
        return int(self._values.sum())

    @property
    def n_background(self):
        return self._values.size - self.n_artifact

    def __len__(self):
        return self._values.size

    def __array__(self, dtype=None, copy=None):
        return self._values if dtype is None else self._values.astype(dtype)

    def __repr__(self):
        return f"<Mask | {self.n_artifact} artifact / {len(self)} samples>"

    @classmethod
    def from_intervals(cls, intervals, n_times):
        """Build a mask from marked sample intervals.

        Parameters
        ----------
        intervals : array-like of shape (n_intervals, 2)
            ``[start, stop]`` sample positions of every marked segment, both
            ends included. Fractional positions are widened to whole samples
            and positions outside the recording are clipped.
        n_times : int
            Number of samples of the recording.

        Returns
        -------
        mask : Mask
        """
        n_times = _ensure_int(n_times, 'n_times')
        intervals = np.asarray(intervals, dtype=float).reshape(-1, 2)
        values = np.zeros(n_times, dtype=bool)
        for start, stop in intervals:
            if stop < start:
                raise InvalidMaskError(f"Interval [{start}, {stop}] ends before it starts.")
            start = max(int(np.floor(start)), 0)
            stop = min(int(np.ceil(stop)), n_times - 1)
            if stop < start:
                continue
            values[start:stop + 1] = True
        return cls(values)

    @classmethod
    def from_annotations(cls, annotations, sfreq, n_times, first_samp=0, prefix='bad'):
        """Build a mask from the annotations whose description starts with ``prefix``.

        Parameters
        ----------
        annotations : mne.Annotations
            The annotations marking the artifact segments.
        sfreq : float
            Sampling frequency of the recording.
        n_times : int
            Number of samples of the recording.
        first_samp : int
            Index of the first sample of the recording. Onsets are counted
            from the start of the acquisition, as in ``raw.annotations``, and
            shifted by ``first_samp`` to index the recording.
        prefix : str
            Case-insensitive description prefix of the artifact annotations.

        Returns
        -------
        mask : Mask
        """
        check_type(annotations, (Annotations,), 'annotations')
        check_type(prefix, (str,), 'prefix')
        intervals = []
        for annot in annotations:
            if not annot['description'].lower().startswith(prefix.lower()):
                continue
            start = int(round(annot['onset'] * sfreq)) - first_samp
            length = max(int(round(annot['duration'] * sfreq)), 1)
            intervals.append((start, start + length - 1))
        return cls.from_intervals(intervals, n_times)

    @classmethod
    def from_raw(cls, raw, prefix='bad'):
        """Build a mask from the annotations of a raw recording."""
        check_type(raw, (BaseRaw,), 'raw')
        return cls.from_annotations(
            raw.annotations, raw.info['sfreq'], raw.n_times, first_samp=raw.first_samp, prefix=prefix
        )
