"""Open documents, each with its own undo/redo history."""

from __future__ import annotations

import itertools
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from fabforge.config import AppConfig, load_config
from fabforge.content import create_image_node, load_fab_content
from fabforge.files import FileEntry, FileType, SaveResult, save_fab_file
from fabforge.models.document import FabDocument
from fabforge.rig.history import HistoryEntry, TabHistory
from fabforge.rig.node import SkeleNode

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

_root_counter = itertools.count(1)


def _empty_skele() -> SkeleNode:
    return SkeleNode.from_data(
        {
            "angle": 0,
            "mag": 1,
            "children": [{"angle": 0, "mag": 0}],
            "id": f"#ROOT_{next(_root_counter)}",
        }
    )


class Workspace:
    """The set of documents open in the editor.

    Edits follow clone -> mutate -> :meth:`update`; the workspace poses the
    new snapshot at the current view and records it in that document's
    history.
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        view_position: tuple[float, float] = (0.0, 0.0),
        view_size: float = 0.5,
    ) -> None:
        self.config = config or load_config()
        self.documents: dict[str, FabDocument] = {}
        self.histories: TabHistory[SkeleNode] = TabHistory(self.config.history.max_entries)
        self.active_id: str | None = None
        self._saved: dict[str, SkeleNode] = {}
        self.view_position = view_position
        self.view_size = view_size

    @property
    def active(self) -> FabDocument | None:
        return self.documents.get(self.active_id) if self.active_id else None

    def get(self, doc_id: str) -> FabDocument:
        try:
            return self.documents[doc_id]
        except KeyError:
            msg = f"no open document with id {doc_id!r}"
            raise KeyError(msg) from None

    def _pose(self, document: FabDocument) -> None:
        # Touches only the root's static rotation, mag and transform of the
        # snapshot; to_fab_data() writes the root as angle 0, mag 1.
        x, y = self.view_position
        document.skele.tick_move(x, y, self.view_size, document.rotation)

    # ------------------------------------------------------------------
    # Opening and closing
    # ------------------------------------------------------------------

    def new_document(
        self,
        skele: SkeleNode | None = None,
        *,
        name: str = "Untitled",
        description: str = "",
        file_path: Path | None = None,
    ) -> FabDocument:
        """Open a document (an empty rig by default) and make it active."""
        if skele is None:
            skele = _empty_skele()
        while skele.id is None or skele.id in self.documents:
            skele.id = f"#ROOT_{next(_root_counter)}"

        document = FabDocument(
            id=skele.id,
            name=name,
            description=description,
            skele=skele,
            file_path=file_path,
            rotation=self.config.content.default_rotation,
        )
        self.documents[document.id] = document
        self._pose(document)
        self.histories.get_history(document.id).push(skele, "Initial state")
        self._saved[document.id] = skele
        self.active_id = document.id
        return document

    def open_file(self, source: FileEntry | Path) -> FabDocument | None:
        """Open a fab file, or switch to the document already showing it."""
        path = source.path if isinstance(source, FileEntry) else Path(source)
        for document in self.documents.values():
            if document.file_path == path:
                self.active_id = document.id
                return document

        loaded = load_fab_content(path, self.config.content.default_rotation)
        if loaded is None:
            return None
        name = loaded.fab_data.get("name")
        description = loaded.fab_data.get("description")
        return self.new_document(
            loaded.skele,
            name=name if isinstance(name, str) else path.name.removesuffix(".fab.json"),
            description=description if isinstance(description, str) else "",
            file_path=path,
        )

    def close(self, doc_id: str) -> None:
        self.documents.pop(doc_id, None)
        self._saved.pop(doc_id, None)
        self.histories.remove_history(doc_id)
        if self.active_id == doc_id:
            self.active_id = next(iter(self.documents), None)

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def update(
        self,
        doc_id: str,
        skele: SkeleNode,
        description: str,
        continuity_key: str | None = None,
    ) -> FabDocument:
        """Install a new snapshot and record it in history."""
        document = self.get(doc_id)
        document.skele = skele
        document.is_modified = True
        self._pose(document)
        self.histories.get_history(doc_id).push(skele, description, continuity_key)
        return document

    def insert_files(
        self,
        doc_id: str,
        entries: Iterable[FileEntry],
        parent_id: str | None = None,
    ) -> FabDocument:
        """Add images and fabs as new layers under *parent_id* (default: root)."""
        document = self.get(doc_id)
        skele = document.skele.clone()
        target = skele.find_id(parent_id) if parent_id is not None else skele
        if target is None:
            target = skele

        added = 0
        for entry in entries:
            if entry.type is FileType.IMAGE:
                node = create_image_node(entry, self.config.content.image_node_size)
            else:
                loaded = load_fab_content(entry, 0)
                node = loaded.skele if loaded else None
            if node is None:
                logger.warning("Skipping %s: cannot be used as a layer", entry.path)
                continue
            target.add(node)
            added += 1

        if not added:
            return document
        noun = "layer" if added == 1 else "layers"
        return self.update(doc_id, skele, f"Add {added} {noun}")

    def _restore(self, doc_id: str, entry: HistoryEntry[SkeleNode] | None) -> FabDocument:
        document = self.get(doc_id)
        if entry is not None and entry.state is not document.skele:
            document.skele = entry.state
            document.is_modified = entry.state is not self._saved.get(doc_id)
            self._pose(document)
        return document

    def undo(self, doc_id: str) -> FabDocument:
        return self._restore(doc_id, self.histories.get_history(doc_id).undo())

    def redo(self, doc_id: str) -> FabDocument:
        return self._restore(doc_id, self.histories.get_history(doc_id).redo())

    def jump_to_state(self, doc_id: str, index: int) -> FabDocument:
        return self._restore(doc_id, self.histories.get_history(doc_id).jump_to_state(index))

    # ------------------------------------------------------------------
    # View
    # ------------------------------------------------------------------

    def set_rotation(self, doc_id: str, degrees: float) -> FabDocument:
        """Point a document's root along *degrees* and re-pose it.

        The previous pose stays available as ``state_at(0)``.  View changes
        are not edits: nothing is recorded in history.
        """
        document = self.get(doc_id)
        document.rotation = degrees
        self._pose(document)
        return document

    def set_view(self, position: tuple[float, float], size: float) -> None:
        """Move the camera and re-pose every open document."""
        self.view_position = position
        self.view_size = size
        for document in self.documents.values():
            self._pose(document)

    # ------------------------------------------------------------------
    # Saving
    # ------------------------------------------------------------------

    def save(self, doc_id: str, path: Path | None = None) -> SaveResult:
        """Write a document; on failure it stays open and modified."""
        document = self.get(doc_id)
        save_path = path or document.file_path
        if save_path is None:
            msg = "No save path specified and document has no file_path"
            raise ValueError(msg)

        result = save_fab_file(save_path, document.to_fab_data())
        if result.ok:
            document.file_path = save_path
            document.is_modified = False
            self._saved[doc_id] = document.skele
        return result
