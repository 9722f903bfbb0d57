from . import utils
from ._version import __version__
from .errors import (
    InsufficientDataError,
    InvalidEmbeddingError,
    InvalidMaskError,
    InvalidRankError,
    InvalidSignalError,
    MWFError,
    NumericalInstabilityError,
)
from .mask import ABORTED, Mask
from .methods import ArtifactSeparationMethod, ICAMethod, MWFMethod
from .mwf import (
    MWF,
    FilterParams,
    FilterResult,
    FixedRank,
    FullRank,
    PercentRank,
    PositiveEigenvalueCount,
    SignalBuffer,
    apply_filter,
    compute_filter,
)
from .utils.config import sys_info
from .utils.logs import add_file_handler, logger, set_log_level
