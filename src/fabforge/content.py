"""Turn files on disk into skeleton nodes."""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from fabforge.config import ContentSettings
from fabforge.files import FileEntry, load_fab_file, to_sprite_uri
from fabforge.rig.geometry import to_radians
from fabforge.rig.node import SkeleNode

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

_load_counter = itertools.count(1)


@dataclass
class LoadedFab:
    """A fab file's skeleton together with the raw data it came from."""

    skele: SkeleNode
    fab_data: dict[str, Any]


def load_fab_content(source: FileEntry | Path, initial_rotation: float) -> LoadedFab | None:
    """Load a fab file as a fresh root.

    The root is pointed along *initial_rotation* (degrees), given unit
    magnitude and a process-unique ``#FAB_ROOT_<n>`` id.
    """
    path = source.path if isinstance(source, FileEntry) else source
    fab_data = load_fab_file(path)
    if not fab_data or "skele" not in fab_data:
        logger.warning("No skeleton in %s", path)
        return None

    skele = SkeleNode.from_data(fab_data["skele"])
    skele.rotation = to_radians(initial_rotation)
    skele.mag = 1
    skele.id = f"#FAB_ROOT_{next(_load_counter)}"
    logger.debug("Loaded %s as %s", path, skele.id)
    return LoadedFab(skele=skele, fab_data=fab_data)


def create_image_node(entry: FileEntry, size: float | None = None) -> SkeleNode | None:
    """Build a sprite node for an image under a ``gfx`` directory."""
    sprite_uri = to_sprite_uri(entry.path)
    if sprite_uri is None:
        return None
    if size is None:
        size = ContentSettings().image_node_size
    return SkeleNode.from_data({"angle": 0, "mag": size, "uri": sprite_uri})
