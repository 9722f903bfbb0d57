"""
MWF
===

This tutorial demonstrates how to use the multichannel Wiener filter (MWF) to
remove marked artifacts from EEG data. A blink-like artifact is added to a
simulated recording, a few occurrences are annotated, and the filter learned
from those annotations removes every occurrence.
"""

# %%
import mne
import numpy as np

from mwf import MWF, set_log_level

set_log_level("INFO")

# %% Simulate a recording
# Background activity is white noise, the artifact has a fixed topography
# and a smooth waveform repeating every 4 seconds.
rng = np.random.default_rng(0)
sfreq = 200.0
n_channels, n_times = 16, 60 * int(sfreq)

background = rng.standard_normal((n_channels, n_times)) * 10e-6
waveform = np.zeros(n_times)
onsets = np.arange(2, 58, 4) * int(sfreq)
for onset in onsets:
    waveform[onset:onset + 80] = np.hanning(80) * 100e-6
topography = np.linspace(1.0, 0.1, n_channels)
data = background + topography[:, np.newaxis] * waveform

info = mne.create_info([f"EEG {k + 1:03}" for k in range(n_channels)], sfreq, "eeg")
raw = mne.io.RawArray(data, info)

# %%
# Marking
# -------
# Only the first five blinks are annotated. Annotations whose description
# starts with ``bad`` mark the artifact segments used to fit the filter.

annotations = mne.Annotations(
    onset=onsets[:5] / sfreq, duration=[80 / sfreq] * 5, description=["bad_blink"] * 5
)
raw.set_annotations(annotations)

# %%
# Filtering
# ---------
# ``delay`` embeds each channel with time-shifted copies so the filter also
# captures the temporal structure of the artifact. ``rank='poseig'`` keeps the
# directions where the artifact energy exceeds the background energy.

mwf = MWF(delay=3, rank="poseig")
mwf.fit_raw(raw)
raw_cleaned, raw_artifact = mwf.transform_raw(raw)
print(mwf)

# %%
# Every blink is removed, the annotated ones as well as the others.

residual = raw_cleaned.get_data() - background
print(f"Artifact RMS before: {np.sqrt(np.mean((data - background) ** 2)):.2e} V")
print(f"Artifact RMS after:  {np.sqrt(np.mean(residual ** 2)):.2e} V")
