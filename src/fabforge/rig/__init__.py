"""Sprite rig engine - node trees, posing and edit history."""

from fabforge.rig.history import HistoryEntry, HistoryManager, TabHistory
from fabforge.rig.node import Pose, RenderInfo, SkeleNode, StructureError

__all__ = [
    "HistoryEntry",
    "HistoryManager",
    "Pose",
    "RenderInfo",
    "SkeleNode",
    "StructureError",
    "TabHistory",
]
