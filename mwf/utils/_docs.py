"""Fill docstrings to avoid redundant docstrings in multiple files.

Inspired from mne: https://mne.tools/stable/index.html
Inspired from mne.utils.docs.py by Eric Larson <larson.eric.d@gmail.com>
"""

import sys
from typing import Callable, Dict, List

# ------------------------- Documentation dictionary -------------------------
docdict: Dict[str, str] = dict()

# ---------------------------------- verbose ---------------------------------
docdict['verbose'] = """
verbose : int | str | bool | None
    Sets the verbosity level. The verbosity increases gradually between
    ``'CRITICAL'``, ``'ERROR'``, ``'WARNING'``, ``'INFO'`` and ``'DEBUG'``.
    If None is provided, the verbosity is left untouched."""

docdict['n_jobs'] = """
n_jobs : int | None
    Number of jobs used to accumulate the covariance partial sums. ``None``
    means 1 job, ``-1`` means all available CPUs. Partial sums are always
    reduced in the same order, so the result does not depend on ``n_jobs``
    beyond floating point summation order."""

# ---------------------------------- signal ----------------------------------
docdict['data'] = """
data : array of shape (n_channels, n_times)
    Multichannel recording. Every value must be finite."""

docdict['mask'] = """
mask : array-like of shape (n_times,) | Mask
    Artifact marking, any non-zero value marks an artifact sample. Both the
    artifact and the background class must be non-empty."""

docdict['sfreq'] = """
sfreq : float | None
    Sampling frequency of the recording in Hz. If None, it is not recorded."""

# --------------------------------- filter -----------------------------------
docdict['delay'] = """
delay : int
    Number of lags on each side of the zero lag used to embed every channel.
    The embedded space has ``n_channels * (2 * delay + 1)`` dimensions and
    the first and last ``delay * delay_spacing`` samples are excluded from
    the covariance estimates. The default is 0 (spatial filter only)."""

docdict['delay_spacing'] = """
delay_spacing : int
    Spacing in samples between two consecutive lags. The default is 1."""

docdict['rank'] = """
rank : str | int | RankPolicy
    Policy deciding how many generalized eigenvectors span the artifact
    subspace. ``'poseig'`` (default) keeps the leading eigenvalues above 1,
    ``'full'`` keeps every eigenvector, ``'first'`` keeps ``rank_option``
    eigenvectors, ``'pct'`` keeps the leading eigenvalues summing to
    ``rank_option`` percent of the total. An integer is a fixed rank."""

docdict['rank_option'] = """
rank_option : int | float | None
    Argument of the ``'first'`` and ``'pct'`` rank policies."""

docdict['mu'] = """
mu : float
    Trade-off between artifact suppression and signal distortion. Each
    retained direction is weighted by ``(lambda - 1) / (lambda - 1 + mu)``,
    ``mu=1`` (default) gives the minimum mean square error filter."""

docdict['regularization'] = """
regularization : float
    Diagonal loading added to the background covariance before solving the
    generalized eigenvalue problem, relative to its average diagonal power.
    The default is ``1e-8``."""

docdict['max_condition'] = """
max_condition : float
    Largest condition number accepted for the generalized eigenvector
    basis. The default is ``1e12``."""

docdict['reject_prefix'] = """
reject_prefix : str
    Annotations whose description starts with this prefix mark artifact
    segments. The default is ``'bad'``."""

# ------------------------- Documentation functions --------------------------
docdict_indented: Dict[int, Dict[str, str]] = dict()


def fill_doc(f: Callable) -> Callable:
    """Fill a docstring with docdict entries.

    Parameters
    ----------
    f : callable
        The function to fill the docstring of (modified in place).

    Returns
    -------
    f : callable
        The function, potentially with an updated __doc__.
    """
    docstring = f.__doc__
    if not docstring:
        return f

    lines = docstring.splitlines()
    indent_count = _indentcount_lines(lines)

    try:
        indented = docdict_indented[indent_count]
    except KeyError:
        indent = ' ' * indent_count
        docdict_indented[indent_count] = indented = dict()

        for name, docstr in docdict.items():
            lines = [
                indent + line if k != 0 else line
                for k, line in enumerate(docstr.strip().splitlines())
            ]
            indented[name] = "\n".join(lines)

    try:
        f.__doc__ = docstring % indented
    except (TypeError, ValueError, KeyError) as exp:
        funcname = f.__name__
        funcname = docstring.split("\n")[0] if funcname is None else funcname
        raise RuntimeError(f"Error documenting {funcname}:\n{str(exp)}")

    return f


def _indentcount_lines(lines: List[str]) -> int:
    """Minimum indent for all lines in line list, the first line excluded."""
    indent = sys.maxsize
    for k, line in enumerate(lines):
        if k == 0:
            continue
        line_stripped = line.lstrip()
        if line_stripped:
            indent = min(indent, len(line) - len(line_stripped))
    if indent == sys.maxsize:
        return 0
    return indent

