"""Reading, writing and discovering fab and sprite files on disk.

Everything here sits at the I/O boundary: failures are logged and turned
into empty results rather than raised, so a bad directory or file never
takes the editor down.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING, Any

from fabforge.config import ContentSettings
from fabforge.validation import ValidationProblem, fab_problems

if TYPE_CHECKING:
    from fabforge.models.data import FabData

logger = logging.getLogger(__name__)

SPRITE_PREFIX = "sprite:"

_GFX_PATH_RE = re.compile(r"[/\\]gfx[/\\]([^/\\]+)\.[^.]+$", re.IGNORECASE)


class FileType(StrEnum):
    FAB = "fab"
    IMAGE = "image"


@dataclass(frozen=True)
class FileEntry:
    """A loadable file found under a game directory."""

    path: Path
    relative_path: Path
    type: FileType


@dataclass
class SaveResult:
    """Outcome of :func:`save_fab_file`."""

    ok: bool
    problems: list[ValidationProblem] = field(default_factory=list)
    error: str = ""


def _classify(name: str, settings: ContentSettings) -> FileType | None:
    lowered = name.lower()
    if any(lowered.endswith(ext) for ext in settings.fab_extensions):
        return FileType.FAB
    if Path(lowered).suffix in settings.image_extensions:
        return FileType.IMAGE
    return None


def scan_directory(
    base_dir: Path,
    sub_dir: Path | str,
    *,
    settings: ContentSettings | None = None,
) -> list[FileEntry]:
    """Recursively list fab and image files under ``base_dir / sub_dir``.

    Unreadable directories are logged and contribute nothing.
    """
    if settings is None:
        settings = ContentSettings()

    full_path = Path(base_dir) / sub_dir
    entries: list[FileEntry] = []
    try:
        children = sorted(full_path.iterdir())
    except OSError as exc:
        logger.error("Failed to scan directory %s: %s", full_path, exc)
        return entries

    for child in children:
        relative_path = Path(sub_dir) / child.name
        if child.is_dir():
            entries.extend(scan_directory(base_dir, relative_path, settings=settings))
            continue
        file_type = _classify(child.name, settings)
        if file_type is not None:
            entries.append(FileEntry(path=child, relative_path=relative_path, type=file_type))
    return entries


def load_directory_files(
    directory: Path,
    *,
    settings: ContentSettings | None = None,
) -> list[FileEntry]:
    """Scan every configured search directory of a game directory."""
    if settings is None:
        settings = ContentSettings()
    entries: list[FileEntry] = []
    for search_dir in settings.search_dirs:
        entries.extend(scan_directory(directory, search_dir, settings=settings))
    logger.info("Found %d files under %s", len(entries), directory)
    return entries


def load_fab_file(path: Path) -> dict[str, Any] | None:
    """Read a fab file; ``None`` if it is missing or not a JSON object."""
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.error("Failed to load fab file %s: %s", path, exc)
        return None
    if not isinstance(data, dict):
        logger.error("Fab file %s does not contain a JSON object", path)
        return None
    return data


def save_fab_file(path: Path, fab_data: FabData | dict[str, Any]) -> SaveResult:
    """Validate and write a fab file.

    Invalid data is never written; the schema problems are returned instead.
    """
    problems = fab_problems(fab_data)
    if problems:
        logger.error(
            "Refusing to save invalid fab data to %s: %s",
            path,
            "; ".join(str(p) for p in problems),
        )
        return SaveResult(ok=False, problems=problems)

    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(fab_data, indent=2), encoding="utf-8")
    except OSError as exc:
        logger.error("Failed to save fab file %s: %s", path, exc)
        return SaveResult(ok=False, error=str(exc))

    logger.info("Wrote %s", path)
    return SaveResult(ok=True)


def to_sprite_uri(full_path: Path | str) -> str | None:
    """Map ``.../gfx/<name>.<ext>`` to ``sprite:<name>``; ``None`` otherwise."""
    match = _GFX_PATH_RE.search(str(full_path))
    return f"{SPRITE_PREFIX}{match.group(1)}" if match else None


def from_sprite_uri(uri: str, sprite_root: str | None = None) -> str:
    """Resolve a ``sprite:`` uri to an image path; other uris pass through."""
    if not uri.startswith(SPRITE_PREFIX):
        return uri
    if sprite_root is None:
        sprite_root = ContentSettings().sprite_root
    sprite_name = uri[len(SPRITE_PREFIX) :]
    return f"./{sprite_root}/{sprite_name}.png"
