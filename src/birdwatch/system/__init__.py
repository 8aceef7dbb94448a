"""System-level helpers (filesystem layout)."""

from birdwatch.system.path_resolver import PathResolver

__all__ = ["PathResolver"]
