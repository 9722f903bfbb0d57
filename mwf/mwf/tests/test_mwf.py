"""Test the multichannel Wiener filter."""

import mne
import numpy as np
import pytest

from mwf import MWF, FilterParams, apply_filter, compute_filter
from mwf.errors import (
    InvalidEmbeddingError,
    InvalidMaskError,
    InvalidSignalError,
)
from mwf.mwf.mwf import FilterMatrix, FilterResult

rng = np.random.default_rng(7)
sfreq = 250.0
n_channels, n_times = 8, 2000

# background activity plus a blink-like artifact with a fixed topography
clean = rng.standard_normal((n_channels, n_times))
segments = [(200, 300), (900, 1000), (1500, 1600)]
waveform = np.zeros(n_times)
mask = np.zeros(n_times, dtype=bool)
for start, stop in segments:
    waveform[start:stop] = 50 * np.hanning(stop - start)
    mask[start:stop] = True
topography = rng.standard_normal(n_channels)
artifact = topography[:, np.newaxis] * waveform
data = clean + artifact


@pytest.mark.parametrize("delay", [0, 2])
def test_removes_artifact(delay):
    result = MWF(delay=delay).fit_transform(data, mask)
    assert isinstance(result, FilterResult)
    error_before = np.linalg.norm(data - clean)
    error_after = np.linalg.norm(result.cleaned - clean)
    assert error_after < 0.2 * error_before
    assert np.corrcoef(result.artifact.ravel(), artifact.ravel())[0, 1] > 0.95


@pytest.mark.parametrize("delay", [0, 1, 3])
def test_cleaned_plus_artifact_is_original(delay):
    filt = compute_filter(data, mask, FilterParams(delay=delay))
    result = apply_filter(data, filt)
    assert result.cleaned.shape == data.shape
    assert result.artifact.shape == data.shape
    np.testing.assert_allclose(result.cleaned + result.artifact, data, rtol=0, atol=1e-12)


def test_edges_pass_through():
    delay = 3
    result = MWF(delay=delay).fit_transform(data, mask)
    np.testing.assert_array_equal(result.artifact[:, :delay], 0)
    np.testing.assert_array_equal(result.artifact[:, -delay:], 0)
    np.testing.assert_array_equal(result.cleaned[:, :delay], data[:, :delay])
    np.testing.assert_array_equal(result.cleaned[:, -delay:], data[:, -delay:])


def test_no_artifact_energy_is_identity():
    # the marked segments carry less energy than the background in every direction
    quiet = clean.copy()
    quiet[:, mask] *= 0.01
    filt = compute_filter(quiet, mask)
    assert filt.rank == 0
    result = apply_filter(quiet, filt)
    np.testing.assert_array_equal(result.artifact, 0)
    np.testing.assert_array_equal(result.cleaned, quiet)


def test_filter_matrix():
    filt = compute_filter(data, mask, FilterParams(delay=1))
    assert isinstance(filt, FilterMatrix)
    assert filt.weights.shape == (3 * n_channels, 3 * n_channels)
    assert filt.n_channels == n_channels
    assert filt.delay == 1
    assert filt.rank >= 1
    assert np.all(np.diff(filt.eigen.eigenvalues) <= 0)
    assert np.all(filt.eigen.eigenvalues[:filt.rank] > 1)


def test_fixed_rank():
    filt = compute_filter(data, mask, FilterParams(rank=1))
    assert filt.rank == 1
    filt = compute_filter(data, mask, FilterParams(rank="full"))
    assert filt.rank == n_channels


def test_mu_trades_suppression():
    strong = MWF(rank=1, mu=0.1).fit_transform(data, mask)
    weak = MWF(rank=1, mu=10.0).fit_transform(data, mask)
    assert np.linalg.norm(weak.artifact) < np.linalg.norm(strong.artifact)


def test_apply_to_other_recording():
    filt = compute_filter(data, mask)
    other = rng.standard_normal((n_channels, 500))
    result = apply_filter(other, filt)
    np.testing.assert_allclose(result.cleaned + result.artifact, other, atol=1e-12)
    with pytest.raises(InvalidSignalError, match="channel"):
        apply_filter(other[:4], filt)


def test_two_channel_spike():
    noise = 0.01 * np.random.default_rng(3).standard_normal(10)
    spike = np.zeros(10)
    spike[4:7] = [5.0, 10.0, 6.0]
    signal = np.vstack([noise, noise + spike])
    marks = np.zeros(10)
    marks[4:7] = 1

    filt = compute_filter(signal, marks)
    assert filt.rank >= 1
    result = apply_filter(signal, filt)
    outside = np.ones(10, dtype=bool)
    outside[4:7] = False
    energy = result.artifact ** 2
    assert energy[:, 4:7].sum() > 0.95 * energy.sum()
    assert np.abs(result.artifact[:, outside]).max() < 0.5
    np.testing.assert_allclose(result.artifact[1, 4:7], spike[4:7], atol=0.5)
    np.testing.assert_allclose(result.cleaned[:, 4:7], np.vstack([noise, noise])[:, 4:7], atol=0.5)


def test_nan_rejected_before_mask():
    bad = data.copy()
    bad[3, 10] = np.nan
    with pytest.raises(InvalidSignalError, match="non-finite"):
        compute_filter(bad, np.zeros(n_times))
    bad[3, 10] = np.inf
    with pytest.raises(InvalidSignalError):
        compute_filter(bad, mask)


@pytest.mark.parametrize("values", [np.zeros(n_times), np.ones(n_times), np.ones(10)])
def test_invalid_mask(values):
    with pytest.raises(InvalidMaskError):
        compute_filter(data, values)


def test_delay_too_large():
    signal = rng.standard_normal((2, 11))
    marks = np.zeros(11)
    marks[3:6] = 1
    with pytest.raises(InvalidEmbeddingError):
        compute_filter(signal, marks, FilterParams(delay=5))


@pytest.mark.parametrize("bad", [np.zeros(10), np.zeros((2, 0)), np.zeros((1, 2, 3)), "eeg"])
def test_invalid_signal(bad):
    with pytest.raises(InvalidSignalError):
        compute_filter(bad, mask)


def test_deterministic():
    first = compute_filter(data, mask, FilterParams(delay=1))
    second = compute_filter(data, mask, FilterParams(delay=1))
    np.testing.assert_array_equal(first.weights, second.weights)


def test_not_fitted():
    mwf = MWF()
    assert "not fitted" in repr(mwf)
    with pytest.raises(RuntimeError, match="not been fitted"):
        mwf.transform(data)


def test_fit_then_transform():
    mwf = MWF(delay=1).fit(data, mask)
    assert "rank" in repr(mwf)
    assert mwf.sfreq_ is None
    result = mwf.transform(data)
    expected = apply_filter(data, compute_filter(data, mask, FilterParams(delay=1)))
    np.testing.assert_array_equal(result.cleaned, expected.cleaned)


def test_fit_sampling_frequency():
    assert "sfreq : float | None" in MWF.fit.__doc__
    mwf = MWF().fit(data, mask, 250)
    assert mwf.sfreq_ == sfreq
    assert isinstance(mwf.sfreq_, float)
    result = mwf.fit_transform(data, mask, sfreq=sfreq)
    assert mwf.sfreq_ == sfreq
    np.testing.assert_allclose(result.cleaned + result.artifact, data)


@pytest.mark.parametrize("bad", [0, -250.0, np.inf, "250"])
def test_fit_invalid_sampling_frequency(bad):
    with pytest.raises((InvalidSignalError, TypeError)):
        MWF().fit(data, mask, bad)


def _make_raw():
    info = mne.create_info([f"EEG {k:03}" for k in range(n_channels)], sfreq, "eeg")
    raw = mne.io.RawArray(data * 1e-6, info, verbose=False)
    onsets = [start / sfreq for start, _ in segments]
    durations = [(stop - start) / sfreq for start, stop in segments]
    raw.set_annotations(mne.Annotations(onsets, durations, ["bad_blink"] * len(segments)))
    return raw


def test_fit_raw_from_annotations():
    raw = _make_raw()
    mwf = MWF().fit_raw(raw)
    assert mwf.ch_names_ == raw.ch_names
    assert mwf.sfreq_ == sfreq
    raw_cleaned, raw_artifact = mwf.transform_raw(raw)
    assert isinstance(raw_cleaned, mne.io.BaseRaw)
    assert raw_cleaned.info["sfreq"] == sfreq
    np.testing.assert_allclose(
        raw_cleaned.get_data() + raw_artifact.get_data(), raw.get_data(), atol=1e-18
    )
    assert len(raw_cleaned.annotations) == len(segments)
    reference = MWF().fit_transform(data * 1e-6, mask)
    np.testing.assert_allclose(raw_cleaned.get_data(), reference.cleaned, atol=1e-15)


def test_fit_raw_with_mask_and_picks():
    raw = _make_raw()
    picks = raw.ch_names[:4]
    mwf = MWF().fit_raw(raw, mask=mask, picks=picks)
    raw_cleaned, _ = mwf.transform_raw(raw)
    assert raw_cleaned.ch_names == picks


def test_fit_raw_type_check():
    with pytest.raises(TypeError, match="raw"):
        MWF().fit_raw(data)
