"""Debug preview images of a posed skeleton, drawn with Pillow."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from PIL import Image, ImageDraw

from fabforge.rig.geometry import Vec2, rotate, to_radians

if TYPE_CHECKING:
    from pathlib import Path

    from fabforge.rig.node import RenderInfo, SkeleNode

logger = logging.getLogger(__name__)

# Bone colours cycle by depth.
BONE_COLOURS: list[tuple[int, int, int]] = [
    (255, 85, 0),
    (255, 170, 0),
    (170, 255, 0),
    (0, 255, 85),
    (0, 170, 255),
    (170, 0, 255),
]
JOINT_COLOUR = (255, 255, 255)
SPRITE_COLOUR = (0, 255, 255)
HIDDEN_COLOUR = (96, 96, 96)


def sprite_outline(info: RenderInfo) -> list[tuple[float, float]]:
    """Corners of the square a sprite record covers, rotated to its direction."""
    half_w, half_h = info.transform[0] / 2, info.transform[1] / 2
    angle = to_radians(info.direction)
    corners = [Vec2(-half_w, -half_h), Vec2(half_w, -half_h), Vec2(half_w, half_h), Vec2(-half_w, half_h)]
    return [tuple(info.center + rotate(corner, angle)) for corner in corners]


def render_preview(
    root: SkeleNode,
    output_path: Path,
    *,
    t: float = 1.0,
    width: int = 512,
    height: int = 512,
    bg_colour: tuple[int, int, int] = (24, 24, 32),
    line_width: int = 2,
    joint_radius: int = 4,
) -> Path:
    """Draw bones, joints and sprite footprints of an already ticked tree.

    World coordinates map 1:1 to pixels.  Sprites are drawn as outlines in
    ``sort`` order; image data is never loaded.
    """
    img = Image.new("RGB", (width, height), bg_colour)
    draw = ImageDraw.Draw(img)

    for node in root.walk():
        parent = node.parent
        if parent is None:
            continue
        start = tuple(parent.state_at(t).transform)
        end = tuple(node.state_at(t).transform)
        colour = HIDDEN_COLOUR if node.hidden else BONE_COLOURS[node.depth % len(BONE_COLOURS)]
        draw.line([start, end], fill=colour, width=line_width)

    sprites = root.render(t)
    for info in sprites:
        colour = HIDDEN_COLOUR if info.node.hidden else SPRITE_COLOUR
        draw.polygon(sprite_outline(info), outline=colour)

    for node in root.walk():
        x, y = node.state_at(t).transform
        r = joint_radius
        draw.ellipse([x - r, y - r, x + r, y + r], fill=JOINT_COLOUR)

    img.save(output_path, "PNG")
    logger.info("Rendered preview with %d sprites -> %s", len(sprites), output_path)
    return output_path
