"""Hierarchical sprite rig nodes: structure, posing, lookup and cloning.

A skeleton is a tree of :class:`SkeleNode` objects.  Each node stores a
static offset (``rotation`` + ``mag``) relative to its parent and an animated
:class:`Pose` that :meth:`SkeleNode.tick` recomputes top-down.  Trees are
treated as immutable snapshots by editing code: clone, mutate the clone,
then swap it in.
"""

from __future__ import annotations

import copy
import logging
import math
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from operator import attrgetter
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from fabforge.rig.geometry import (
    Vec2,
    from_polar,
    lerp,
    lerp_angle_rad,
    lerp_vec,
    to_degrees,
    to_radians,
)

if TYPE_CHECKING:
    from fabforge.models.data import SkeleData

logger = logging.getLogger(__name__)

PropsDeduper = Callable[[Any], Any]

_ID_LENGTH = 8


class StructureError(ValueError):
    """Raised when an edit would break the tree structure."""


@dataclass(frozen=True)
class Pose:
    """Placement of a node in world space."""

    rotation: float = 0.0  # radians
    scale: float = 0.0
    transform: Vec2 = Vec2()


@dataclass
class RenderInfo:
    """One visible sprite, flattened out of a ticked tree."""

    uri: str
    props: Any
    center: Vec2
    transform: Vec2
    direction: float  # degrees
    sort: float
    node: SkeleNode = field(repr=False, compare=False)


def _identity(props: Any) -> Any:
    return props


def _number(value: object, default: float) -> float:
    """Return *value* if it is a finite number, else *default*."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return value if math.isfinite(value) else default


def _fresh_id(taken: set[str]) -> str:
    while True:
        candidate = uuid4().hex[:_ID_LENGTH]
        if candidate not in taken:
            return candidate


class SkeleNode:
    """A node in a sprite rig.

    ``parent`` and ``root`` are plain back-references; ``root`` always points
    at the top of whichever tree currently owns the node.
    """

    def __init__(
        self,
        *,
        id: str | None = None,
        rotation: float = 0.0,
        mag: float = 1.0,
        uri: str | None = None,
        props: Any = None,
        sort: float = 0,
        hidden: bool = False,
    ) -> None:
        self._id = id
        self.parent: SkeleNode | None = None
        self.root: SkeleNode = self
        self.children: list[SkeleNode] = []
        self.uri = uri
        self.props = props
        self.sort = sort
        self.hidden = hidden
        self._rotation = rotation
        self._mag = mag
        self.transform: Vec2 = from_polar(mag, rotation)

        self.state = Pose()
        self.last_state = Pose()
        self.is_posed = False

        self._lookup_cache: dict[str, SkeleNode] = {}
        self._lookup_complete = False

    def __repr__(self) -> str:
        return (
            f"SkeleNode(id={self._id!r}, uri={self.uri!r}, "
            f"children={len(self.children)})"
        )

    # ------------------------------------------------------------------
    # Static configuration
    # ------------------------------------------------------------------

    @property
    def id(self) -> str | None:
        return self._id

    @id.setter
    def id(self, value: str | None) -> None:
        if value != self._id:
            self._id = value
            self.root._invalidate_lookup()

    @property
    def rotation(self) -> float:
        """Offset angle relative to the parent, in radians."""
        return self._rotation

    @rotation.setter
    def rotation(self, value: float) -> None:
        self._rotation = value
        self.update_transform()

    # ``angle`` is the same quantity; files store it in degrees.
    angle = rotation

    @property
    def mag(self) -> float:
        return self._mag

    @mag.setter
    def mag(self, value: float) -> None:
        self._mag = value
        self.update_transform()

    def update_transform(self) -> None:
        self.transform = from_polar(self._mag, self._rotation)

    # ------------------------------------------------------------------
    # Plain data conversion
    # ------------------------------------------------------------------

    @classmethod
    def from_data(cls, data: Mapping[str, Any]) -> SkeleNode:
        """Build a tree from a nested description (angles in degrees).

        Malformed fields fall back to defaults instead of raising: a
        non-numeric ``angle`` or ``sort`` becomes ``0``, a non-numeric ``mag``
        becomes ``1`` and a non-list ``children`` is treated as empty.
        """
        if not isinstance(data, Mapping):
            logger.debug("Skeleton entry is not a mapping: %r", data)
            data = {}

        node_id = data.get("id")
        uri = data.get("uri")
        node = cls(
            id=node_id if isinstance(node_id, str) else None,
            rotation=to_radians(_number(data.get("angle"), 0)),
            mag=_number(data.get("mag"), 1),
            uri=uri if isinstance(uri, str) else None,
            props=data.get("props"),
            sort=_number(data.get("sort"), 0),
            hidden=data.get("hidden") is True,
        )

        children = data.get("children")
        if not isinstance(children, list):
            children = []
        for child_data in children:
            node.add(cls.from_data(child_data))
        return node

    def to_data(self) -> SkeleData:
        """Inverse of :meth:`from_data`; unset optional fields are omitted."""
        data: SkeleData = {
            "angle": round(to_degrees(self._rotation), 9),
            "mag": self._mag,
        }
        if self._id is not None:
            data["id"] = self._id
        if self.uri is not None:
            data["uri"] = self.uri
        if self.props is not None:
            data["props"] = copy.deepcopy(self.props)
        if self.sort:
            data["sort"] = self.sort
        if self.hidden:
            data["hidden"] = True
        if self.children:
            data["children"] = [child.to_data() for child in self.children]
        return data

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    def ancestors(self) -> Iterator[SkeleNode]:
        """Yield the parent chain, nearest first."""
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    @property
    def depth(self) -> int:
        return sum(1 for _ in self.ancestors())

    def add(self, child: SkeleNode) -> SkeleNode:
        """Reparent *child* under this node, as its last child.

        Anonymous nodes in the incoming subtree, and nodes whose id is already
        taken in this tree, receive a fresh id so ids stay unique per tree.
        """
        if child is self:
            msg = "cannot add a node to itself"
            raise StructureError(msg)
        if any(ancestor is child for ancestor in self.ancestors()):
            msg = f"cannot add ancestor {child!r} beneath its descendant {self!r}"
            raise StructureError(msg)

        child.remove()
        root = self.root
        taken = {node._id for node in root.walk() if node._id is not None}
        for node in child.walk():
            if node._id is None or node._id in taken:
                node._id = _fresh_id(taken)
            taken.add(node._id)

        self.children.append(child)
        child.parent = self
        for node in child.walk():
            node.root = root
        child._invalidate_lookup()
        root._invalidate_lookup()
        return child

    def remove(self) -> None:
        """Detach this node from its parent; it becomes the root of its subtree."""
        parent = self.parent
        if parent is None:
            return

        old_root = self.root
        parent.children.remove(self)
        self.parent = None
        for node in self.walk():
            node.root = self
        old_root._invalidate_lookup()
        self._invalidate_lookup()

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def _invalidate_lookup(self) -> None:
        self._lookup_cache.clear()
        self._lookup_complete = False

    def find_id(self, node_id: str | None) -> SkeleNode | None:
        """Find a node by id within this node's subtree.

        On a root the lookup is cached; the cache is filled by one full walk
        on the first miss and dropped on any structural change.
        """
        if node_id is None:
            return None
        if self.root is not self:
            return next((node for node in self.walk() if node._id == node_id), None)

        found = self._lookup_cache.get(node_id)
        if found is not None or self._lookup_complete:
            return found

        for node in self.walk():
            if node._id is not None:
                self._lookup_cache.setdefault(node._id, node)
        self._lookup_complete = True
        return self._lookup_cache.get(node_id)

    def find_id_from_root(self, node_id: str | None) -> SkeleNode | None:
        return self.root.find_id(node_id)

    def walk(self) -> Iterator[SkeleNode]:
        """Yield this node and its descendants, parents before children."""
        yield self
        for child in self.children:
            yield from child.walk()

    # ------------------------------------------------------------------
    # Posing
    # ------------------------------------------------------------------

    def tick(self) -> None:
        """Recompute the animated pose of this subtree, parents first.

        The previous pose is kept in ``last_state`` so :meth:`state_at` can
        blend between the two.
        """
        self.last_state = self.state
        parent = self.parent
        if parent is None:
            self.state = Pose(self._rotation, self._mag, self.transform)
        else:
            rotation = parent.state.rotation + self._rotation
            scale = parent.state.scale
            offset = from_polar(self._mag * scale, rotation)
            self.state = Pose(rotation, scale, parent.state.transform + offset)
        self.is_posed = True

        for child in self.children:
            child.tick()

    def tick_move(self, x: float, y: float, size: float, direction: float) -> SkeleNode:
        """Place a root in world space and re-pose the whole tree.

        *direction* is in degrees; the root's scale becomes ``size * 2``.
        """
        self._rotation = to_radians(direction)
        self._mag = size * 2
        self.transform = Vec2(x, y)
        self.tick()
        return self

    def state_at(self, t: float) -> Pose:
        """Pose blended between the last (``t=0``) and current (``t=1``) tick."""
        if t <= 0:
            return self.last_state
        if t >= 1:
            return self.state
        last, current = self.last_state, self.state
        return Pose(
            rotation=lerp_angle_rad(t, last.rotation, current.rotation),
            scale=lerp(last.scale, current.scale, t),
            transform=lerp_vec(last.transform, current.transform, t),
        )

    def render(self, t: float = 1.0, dedupe: PropsDeduper | None = None) -> list[RenderInfo]:
        """Flatten the subtree into sprite records sorted by ``sort``.

        A sprite is centred on its parent's joint, so parentless nodes are
        never emitted.  Ties keep walk order.
        """
        dedupe = dedupe or _identity
        views: list[RenderInfo] = []
        for node in self.walk():
            parent = node.parent
            if parent is None or not node.uri:
                continue
            state = node.state_at(t)
            size = node._mag * state.scale
            views.append(
                RenderInfo(
                    uri=node.uri,
                    props=dedupe(node.props),
                    center=parent.state_at(t).transform,
                    transform=Vec2(size, size),
                    direction=to_degrees(state.rotation),
                    sort=node.sort,
                    node=node,
                )
            )
        views.sort(key=attrgetter("sort"))
        return views

    # ------------------------------------------------------------------
    # Cloning
    # ------------------------------------------------------------------

    def clone(self, parent: SkeleNode | None = None) -> SkeleNode:
        """Deep-copy this subtree, keeping ids.

        With *parent* the copy is appended to its children; otherwise the
        copy is a new root.  *parent* may not lie inside this subtree.
        """
        if parent is not None and (parent is self or any(a is self for a in parent.ancestors())):
            msg = f"cannot clone {self!r} beneath itself"
            raise StructureError(msg)

        node = type(self)(
            id=self._id,
            rotation=self._rotation,
            mag=self._mag,
            uri=self.uri,
            props=copy.deepcopy(self.props),
            sort=self.sort,
            hidden=self.hidden,
        )
        node.transform = self.transform
        node.state = self.state
        node.last_state = self.last_state
        node.is_posed = self.is_posed

        if parent is not None:
            parent.children.append(node)
            node.parent = parent
            node.root = parent.root
            parent.root._invalidate_lookup()

        for child in self.children:
            child.clone(node)
        return node
