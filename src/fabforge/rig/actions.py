"""Structural edits offered on a node (context-menu actions).

Every action works on a clone of the node's whole tree and returns the new
root, leaving the original snapshot untouched.  ``None`` means the action
does not apply to that node.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fabforge.rig.geometry import to_radians
from fabforge.rig.node import SkeleNode

if TYPE_CHECKING:
    from collections.abc import Callable


def _edit(node: SkeleNode, mutate: Callable[[SkeleNode], bool]) -> SkeleNode | None:
    if node.id is None:
        return None
    clone = node.root.clone()
    target = clone.find_id(node.id)
    if target is None or not mutate(target):
        return None
    return clone


def toggle_hidden(node: SkeleNode) -> SkeleNode | None:
    def mutate(target: SkeleNode) -> bool:
        target.hidden = not target.hidden
        return True

    return _edit(node, mutate)


def create_parent(node: SkeleNode) -> SkeleNode | None:
    """Insert a new anonymous joint between *node* and its parent.

    The new joint takes the node's place at the end of the parent's children.
    """

    def mutate(target: SkeleNode) -> bool:
        parent = target.parent
        if parent is None:
            return False
        joint = parent.add(SkeleNode())
        joint.add(target)
        return True

    return _edit(node, mutate)


def move_to_top(node: SkeleNode) -> SkeleNode | None:
    """Move *node* to the front of its siblings."""

    def mutate(target: SkeleNode) -> bool:
        parent = target.parent
        if parent is None:
            return False
        siblings = parent.children
        idx = siblings.index(target)
        if idx == 0:
            return False
        siblings.insert(0, siblings.pop(idx))
        return True

    return _edit(node, mutate)


def move_to_bottom(node: SkeleNode) -> SkeleNode | None:
    """Move *node* to the back of its siblings."""

    def mutate(target: SkeleNode) -> bool:
        parent = target.parent
        if parent is None:
            return False
        siblings = parent.children
        idx = siblings.index(target)
        if idx == len(siblings) - 1:
            return False
        siblings.append(siblings.pop(idx))
        return True

    return _edit(node, mutate)


def delete_node(node: SkeleNode) -> SkeleNode | None:
    def mutate(target: SkeleNode) -> bool:
        if target.parent is None:
            return False
        target.remove()
        return True

    return _edit(node, mutate)


def set_pose(
    node: SkeleNode,
    *,
    angle: float | None = None,
    mag: float | None = None,
) -> SkeleNode | None:
    """Change a node's offset; *angle* is in degrees."""

    def mutate(target: SkeleNode) -> bool:
        if angle is not None:
            target.rotation = to_radians(angle)
        if mag is not None:
            target.mag = mag
        return angle is not None or mag is not None

    return _edit(node, mutate)
