"""Pointer hit-testing against a posed skeleton."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fabforge.rig.geometry import distance

if TYPE_CHECKING:
    from collections.abc import Sequence

    from fabforge.rig.node import SkeleNode


def find_closest_node(
    world_pos: tuple[float, float],
    nodes: Sequence[SkeleNode],
    threshold: float,
) -> SkeleNode | None:
    """Return the node under *world_pos*, or ``None``.

    *nodes* is in draw order, so later nodes win ties by being checked
    first.  A sprite is hit around its parent joint within its own length
    plus half the *threshold*; a bare joint within *threshold*.  Hidden
    nodes are skipped.
    """
    closest: SkeleNode | None = None
    min_dist = float("inf")

    for node in reversed(nodes):
        if node.hidden:
            continue
        target = node.parent if node.uri else node
        if target is None:
            continue

        dist = distance(world_pos, target.state.transform)
        hit_size = node.transform.length() + threshold * 0.5 if node.uri else threshold
        if dist <= hit_size and dist < min_dist:
            min_dist = dist
            closest = node

    return closest
