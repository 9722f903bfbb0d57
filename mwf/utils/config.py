import os
import platform
import sys
from functools import partial
from importlib.metadata import PackageNotFoundError, version
from typing import IO, Callable, Optional

from ._checks import check_type


def sys_info(fid: Optional[IO] = None, developer: bool = False):
    """Print the system information for debugging.

    Parameters
    ----------
    fid : file-like | None
        The file to write to, passed to :func:`print`.
        Can be None to use :data:`sys.stdout`.
    developer : bool
        If True, display information about optional dependencies.
    """
    check_type(developer, (bool,), 'developer')

    ljust = 26
    out = partial(print, end='', file=fid)

    out('Platform:'.ljust(ljust) + platform.platform() + '\n')
    out('Python:'.ljust(ljust) + sys.version.replace('\n', ' ') + '\n')
    out('Executable:'.ljust(ljust) + sys.executable + '\n')
    out('CPU:'.ljust(ljust) + (platform.processor() or 'unknown') + '\n')
    out('Logical cores:'.ljust(ljust) + str(os.cpu_count()) + '\n')

    out('\nCore dependencies\n')
    for dep in ('pymwf', 'numpy', 'scipy', 'mne', 'scikit-learn'):
        _list_dependency(out, dep, ljust)

    if developer:
        out('\nDeveloper dependencies\n')
        for dep in ('pytest',):
            _list_dependency(out, dep, ljust)


def _list_dependency(out: Callable, dep: str, ljust: int):
    try:
        out(f'{dep}:'.ljust(ljust) + version(dep) + '\n')
    except PackageNotFoundError:
        out(f'{dep}:'.ljust(ljust) + 'Not found.\n')
