"""Logging utilities."""

import logging
from contextlib import contextmanager
from functools import wraps
from typing import Callable, Optional, Union

logger = logging.getLogger(__package__.split('.utils', maxsplit=1)[0])
logger.propagate = False

_LEVELS = {
    'DEBUG': logging.DEBUG,
    'INFO': logging.INFO,
    'WARNING': logging.WARNING,
    'ERROR': logging.ERROR,
    'CRITICAL': logging.CRITICAL,
}


def _init_logger():
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter('%(message)s'))
    logger.addHandler(handler)
    logger.setLevel(logging.WARNING)


_init_logger()


def _parse_level(verbose: Union[bool, str, int, None]) -> int:
    if verbose is None or verbose is False:
        return logging.WARNING
    if verbose is True:
        return logging.INFO
    if isinstance(verbose, str):
        key = verbose.upper()
        if key not in _LEVELS:
            raise ValueError(
                f"Invalid verbose level '{verbose}'. Allowed are {list(_LEVELS)}."
            )
        return _LEVELS[key]
    if isinstance(verbose, int):
        return verbose
    raise TypeError(
        f"verbose must be a bool, str, int or None, got {type(verbose)} instead."
    )


def set_log_level(verbose: Union[bool, str, int, None] = None, return_old_level: bool = False):
    """Set the log level for the package logger.

    Parameters
    ----------
    verbose : bool | str | int | None
        The verbosity of messages to print. If a str, it can be either
        ``'DEBUG'``, ``'INFO'``, ``'WARNING'``, ``'ERROR'``, or ``'CRITICAL'``.
        ``True`` is the same as ``'INFO'``, ``False`` and ``None`` are the same
        as ``'WARNING'``.
    return_old_level : bool
        If True, return the old verbosity level.

    Returns
    -------
    old_level : int | None
        The previous level, only if ``return_old_level`` is True.
    """
    old_level = logger.level
    logger.setLevel(_parse_level(verbose))
    return old_level if return_old_level else None


def add_file_handler(
    fname,
    mode: str = 'a',
    encoding: Optional[str] = None,
    verbose: Union[bool, str, int, None] = None,
):
    """Add a file handler to the package logger.

    Parameters
    ----------
    fname : str | Path
        Path to the log file.
    mode : str
        Mode in which the file is opened, ``'a'`` to append, ``'w'`` to
        overwrite.
    encoding : str | None
        Encoding used to write the file.
    verbose : bool | str | int | None
        Level of the handler. If None, the handler logs every message the
        logger lets through.
    """
    handler = logging.FileHandler(fname, mode=mode, encoding=encoding)
    handler.setFormatter(logging.Formatter('%(asctime)s - %(levelname)s - %(message)s'))
    if verbose is not None:
        handler.setLevel(_parse_level(verbose))
    logger.addHandler(handler)
    return handler


@contextmanager
def _use_log_level(verbose: Union[bool, str, int, None] = None):
    """Temporarily change the log level of the package logger."""
    if verbose is None:
        yield
        return
    old_level = set_log_level(verbose, return_old_level=True)
    try:
        yield
    finally:
        logger.setLevel(old_level)


def verbose(function: Callable) -> Callable:
    """Honour a ``verbose`` keyword argument for the duration of a call."""

    @wraps(function)
    def wrapper(*args, **kwargs):
        with _use_log_level(kwargs.get('verbose')):
            return function(*args, **kwargs)

    return wrapper
