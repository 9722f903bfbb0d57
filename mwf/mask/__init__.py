from .mask import Mask
from .sources import (
    ABORTED,
    AnnotationMaskSource,
    CallableMaskSource,
    MaskSource,
    StaticMaskSource,
)
