"""FabForge - hierarchical 2D sprite rig editing toolkit."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("fabforge")
except PackageNotFoundError:
    __version__ = "unknown"
