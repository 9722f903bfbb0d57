"""Utility functions for checking types and values."""

import operator
import os
from typing import Any


def _ensure_int(item: Any, item_name: str = None) -> int:
    """Ensure a variable is an integer."""
    # This is preferred over numbers.Integral, see:
    # https://github.com/scipy/scipy/pull/7351#issuecomment-299713159
    try:
        # someone passing True/False is much more likely to be an error than
        # intentional usage
        if isinstance(item, bool):
            raise TypeError
        item = int(operator.index(item))
    except TypeError:
        item_name = "Item" if item_name is None else f"'{item_name}'"
        raise TypeError(f"{item_name} must be an int, got {type(item)} instead.")
    return item


class _IntLike:
    @classmethod
    def __instancecheck__(cls, other: Any) -> bool:
        try:
            _ensure_int(other)
        except TypeError:
            return False
        else:
            return True


class _Callable:
    @classmethod
    def __instancecheck__(cls, other: Any) -> bool:
        return callable(other)


_types = {
    'numeric': (float, _IntLike()),
    'int-like': (_IntLike(),),
    'callable': (_Callable(),),
    'path-like': (str, os.PathLike),
}


def check_type(item: Any, types: tuple, item_name: str = None) -> Any:
    """Check that item is an instance of types.

    Parameters
    ----------
    item : object
        Item to check.
    types : tuple of types | tuple of str
        Types to be checked against.
        If str, must be one of ``'numeric'``, ``'int-like'``, ``'callable'``
        or ``'path-like'``.
    item_name : str | None
        Name of the item to show inside the error message.

    Returns
    -------
    item : object
        The checked item.

    Raises
    ------
    TypeError
        When the type of the item is not one of the valid options.
    """
    check_types = sum(
        (
            (type(None),) if type_ is None
            else (type_,) if not isinstance(type_, str)
            else _types[type_]
            for type_ in types
        ),
        (),
    )

    if not isinstance(item, check_types):
        type_name = [
            'None' if cls_ is None
            else cls_.__name__ if not isinstance(cls_, str)
            else cls_
            for cls_ in types
        ]
        if len(type_name) == 1:
            type_name = type_name[0]
        elif len(type_name) == 2:
            type_name = ' or '.join(type_name)
        else:
            type_name[-1] = 'or ' + type_name[-1]
            type_name = ", ".join(type_name)
        item_name = "Item" if item_name is None else f"'{item_name}'"
        raise TypeError(
            f"{item_name} must be an instance of {type_name}, "
            f"got {type(item)} instead."
        )

    return item


def _check_n_jobs(n_jobs) -> int:
    """Check n_jobs parameter.

    None is interpreted as 1 job and negative values count back from the
    number of available CPUs, ``-1`` meaning all of them.
    """
    if n_jobs is None:
        return 1
    n_jobs = _ensure_int(n_jobs, 'n_jobs')
    if n_jobs == 0:
        raise ValueError("n_jobs must be a non-zero integer, got 0 instead.")
    if n_jobs < 0:
        n_cores = os.cpu_count() or 1
        n_jobs = max(n_cores + 1 + n_jobs, 1)
    return n_jobs
