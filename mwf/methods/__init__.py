from .base import ArtifactSeparationMethod
from .ica import ICAMethod
from .mwf import MWFMethod
