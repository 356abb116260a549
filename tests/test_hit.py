"""Tests for rig.hit pointer hit-testing."""

from __future__ import annotations

import pytest

from fabforge.rig.hit import find_closest_node
from fabforge.rig.node import SkeleNode


@pytest.fixture
def posed() -> SkeleNode:
    root = SkeleNode.from_data(
        {
            "angle": 0,
            "mag": 1,
            "children": [
                {
                    "angle": 0,
                    "mag": 1,
                    "id": "joint",
                    "children": [{"angle": 0, "mag": 0.5, "id": "sprite", "uri": "sprite:s"}],
                },
            ],
        }
    )
    root.tick()
    return root


def _nodes(root: SkeleNode) -> list[SkeleNode]:
    return list(root.walk())[1:]


def test_sprite_hit_around_parent_joint(posed: SkeleNode):
    hit = find_closest_node((2.2, 0), _nodes(posed), threshold=0.1)
    assert hit is posed.find_id("sprite")


def test_joint_hit_within_threshold(posed: SkeleNode):
    sprite = posed.find_id("sprite")
    assert sprite is not None
    sprite.hidden = True
    hit = find_closest_node((2.05, 0), _nodes(posed), threshold=0.1)
    assert hit is posed.find_id("joint")


def test_miss(posed: SkeleNode):
    assert find_closest_node((50, 50), _nodes(posed), threshold=0.1) is None
    assert find_closest_node((0, 0), [], threshold=0.1) is None


def test_hidden_nodes_are_skipped(posed: SkeleNode):
    for node in posed.walk():
        node.hidden = True
    assert find_closest_node((2, 0), _nodes(posed), threshold=0.1) is None
