import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from ..errors import InvalidEmbeddingError
from ..utils._checks import _ensure_int

BLOCK_SIZE = 4096


class DelayEmbedding:
    """Lazy delay-embedded view of a multichannel signal.

    Every valid sample ``t`` maps to the column vector stacking the channel
    values at ``t + lag`` for each lag in ``lags``, lag-major: rows
    ``l * n_channels`` to ``(l + 1) * n_channels`` hold lag ``lags[l]``.
    Samples closer than ``edge`` to either end of the recording have no
    complete embedding and are excluded; they are never zero-padded.

    Nothing is materialized until a block is requested, so the memory cost
    stays bounded by the block size whatever the number of lags.

    Parameters
    ----------
    data : array of shape (n_channels, n_times)
        The signal to embed.
    delay : int
        Number of lags on each side of the zero lag.
    delay_spacing : int
        Spacing in samples between consecutive lags.
    """

    def __init__(self, data, delay=0, delay_spacing=1):
        self.data = data
        self.delay = _ensure_int(delay, 'delay')
        self.delay_spacing = _ensure_int(delay_spacing, 'delay_spacing')
        self.edge = self.delay * self.delay_spacing
        n_times = data.shape[1]
        if 2 * self.edge + 1 >= n_times:
            raise InvalidEmbeddingError(
                f"A delay of {self.delay} (spacing {self.delay_spacing}) excludes "
                f"{self.edge} samples on each side, which leaves no usable sample "
                f"in a signal of {n_times} samples."
            )

    @property
    def n_channels(self):
        return self.data.shape[0]

    @property
    def n_times(self):
        return self.data.shape[1]

    @property
    def n_lags(self):
        return 2 * self.delay + 1

    @property
    def n_embedded(self):
        return self.n_channels * self.n_lags

    @property
    def lags(self):
        return np.arange(-self.delay, self.delay + 1) * self.delay_spacing

    @property
    def start(self):
        """First valid sample index."""
        return self.edge

    @property
    def stop(self):
        """One past the last valid sample index."""
        return self.n_times - self.edge

    @property
    def n_valid(self):
        return self.stop - self.start

    @property
    def valid(self):
        """Boolean array of shape (n_times,) flagging samples with a full embedding."""
        valid = np.zeros(self.n_times, dtype=bool)
        valid[self.start:self.stop] = True
        return valid

    @property
    def center(self):
        """Rows of an embedded vector holding the zero lag."""
        return slice(self.delay * self.n_channels, (self.delay + 1) * self.n_channels)

    def _windows(self):
        # view of shape (n_channels, n_valid, n_lags), no copy
        windows = sliding_window_view(self.data, 2 * self.edge + 1, axis=1)
        return windows[:, :, ::self.delay_spacing]

    def block(self, start, stop):
        """Embed the valid samples ``start`` to ``stop`` (absolute indices).

        Returns
        -------
        block : array of shape (n_embedded, stop - start)
        """
        if not self.start <= start <= stop <= self.stop:
            raise IndexError(
                f"Samples {start}:{stop} are outside the valid range "
                f"{self.start}:{self.stop}."
            )
        windows = self._windows()[:, start - self.edge:stop - self.edge, :]
        return windows.transpose(2, 0, 1).reshape(self.n_embedded, stop - start)

    def blocks(self, block_size=BLOCK_SIZE):
        """Iterate over ``(start, stop)`` bounds covering the valid range in order."""
        for start in range(self.start, self.stop, block_size):
            yield start, min(start + block_size, self.stop)

    def iter_blocks(self, block_size=BLOCK_SIZE):
        """Iterate over ``(start, stop, block)`` covering the valid range in order.

        The iterator can be restarted by calling the method again.
        """
        for start, stop in self.blocks(block_size):
            yield start, stop, self.block(start, stop)

    def zero_lag(self, embedded):
        """Map embedded vectors back to the channel layout.

        Only the zero-lag block is read, the other lags are discarded.

        Parameters
        ----------
        embedded : array of shape (n_embedded, n)

        Returns
        -------
        data : array of shape (n_channels, n)
        """
        return embedded[self.center]
