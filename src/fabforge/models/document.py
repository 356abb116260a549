"""Open fab document model - a skeleton snapshot plus its metadata."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict

from fabforge.models.data import FabData
from fabforge.rig.node import PropsDeduper, RenderInfo, SkeleNode


class FabDocument(BaseModel):
    """A fab being edited in one tab.

    ``skele`` is replaced, never mutated, as edits are made; ``rotation`` is
    the view direction in degrees applied to the root at runtime.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: str
    name: str = "Untitled"
    description: str = ""
    skele: SkeleNode
    file_path: Path | None = None
    is_modified: bool = False
    rotation: float = 270.0

    def to_fab_data(self) -> FabData:
        """Serialise for saving, with the root reset to its rest pose."""
        skele = self.skele.to_data()
        skele["angle"] = 0
        skele["mag"] = 1
        return {"name": self.name, "description": self.description, "skele": skele}

    def render_info(self, t: float = 1.0, dedupe: PropsDeduper | None = None) -> list[RenderInfo]:
        return [info for info in self.skele.render(t, dedupe) if info.node is not self.skele]

    def rendered_nodes(self) -> list[SkeleNode]:
        """Every node except the root, in walk order."""
        return [node for node in self.skele.walk() if node is not self.skele]
