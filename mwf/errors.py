"""Exceptions raised while computing or applying an artifact filter."""


class MWFError(Exception):
    """Base class of every error raised by the filter engine."""


class InvalidSignalError(MWFError, ValueError):
    """The signal is empty, not 2-D, or holds non-finite values."""


class InvalidMaskError(MWFError, ValueError):
    """The mask length does not match the signal or a class is empty."""


class InvalidEmbeddingError(MWFError, ValueError):
    """The delay leaves no valid sample in the signal."""


class InsufficientDataError(MWFError, ValueError):
    """A segment holds fewer valid samples than embedded channels."""


class InvalidRankError(MWFError, ValueError):
    """The rank policy argument is out of range."""


class NumericalInstabilityError(MWFError, ArithmeticError):
    """A matrix stayed singular or ill-conditioned after regularization."""
