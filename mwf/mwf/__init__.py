from .covariances import CovariancePair, compute_covariances
from .decompose import Eigendecomposition, build_filter, select_rank, solve_gevd
from .embedding import DelayEmbedding
from .mwf import MWF, FilterMatrix, FilterResult, apply_filter, compute_filter
from .params import (
    FilterParams,
    FixedRank,
    FullRank,
    PercentRank,
    PositiveEigenvalueCount,
    RankPolicy,
)
from .signal import SignalBuffer
