"""Test _checks.py"""

import os

import numpy as np
import pytest

from mwf.utils._checks import _check_n_jobs, _ensure_int, check_type


def test_ensure_int():
    assert _ensure_int(101) == 101
    assert _ensure_int(np.int32(3)) == 3
    with pytest.raises(TypeError, match="Item must be an int"):
        _ensure_int(101.0)
    with pytest.raises(TypeError, match="'delay' must be an int"):
        _ensure_int(True, "delay")


def test_check_type():
    check_type(5, ("int-like",))
    check_type(5.0, ("numeric",))
    check_type(None, (None, str))
    check_type(print, ("callable",))
    check_type("file.log", ("path-like",))
    with pytest.raises(TypeError, match="'n' must be an instance of int-like"):
        check_type(5.0, ("int-like",), "n")
    with pytest.raises(TypeError, match="str or None"):
        check_type(5, (str, None))
    with pytest.raises(TypeError, match="int, float, or str"):
        check_type([], (int, float, str))


def test_check_n_jobs():
    assert _check_n_jobs(None) == 1
    assert _check_n_jobs(3) == 3
    assert _check_n_jobs(-1) == (os.cpu_count() or 1)
    with pytest.raises(ValueError):
        _check_n_jobs(0)
    with pytest.raises(TypeError):
        _check_n_jobs(1.5)
