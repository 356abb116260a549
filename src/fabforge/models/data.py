"""Plain-data shapes exchanged with fab files."""

from __future__ import annotations

from typing import Any, TypedDict


class SkeleData(TypedDict, total=False):
    """One node of a persisted skeleton. Angles are in degrees."""

    angle: float
    mag: float
    id: str
    uri: str
    props: Any
    sort: float
    hidden: bool
    children: list[SkeleData]


class FabData(TypedDict, total=False):
    """A whole fab document as stored on disk."""

    name: str
    description: str
    skele: SkeleData
