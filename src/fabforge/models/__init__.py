"""FabForge data models - no I/O."""

from fabforge.models.data import FabData, SkeleData
from fabforge.models.document import FabDocument

__all__ = [
    "FabData",
    "FabDocument",
    "SkeleData",
]
