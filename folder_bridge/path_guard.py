"""Path containment for every path that crosses the bridge."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .errors import PathEscapeError


@dataclass(frozen=True)
class GuardedPath:
    """An absolute path already verified to live inside ``root``.

    Only ``PathGuard.resolve`` creates these; file operations accept them
    without re-validating.
    """
    root: Path
    absolute: Path

    @property
    def relative(self) -> Path:
        """Path relative to the shared root ('.' for the root itself)."""
        return self.absolute.relative_to(self.root)

    @property
    def is_root(self) -> bool:
        return self.absolute == self.root

    def __fspath__(self) -> str:
        return str(self.absolute)


class PathGuard:
    """Resolve user-supplied paths against a fixed root."""

    def __init__(self, root: Path | str):
        self.root = Path(root).resolve()

    def resolve(self, path: Path | str | None) -> GuardedPath:
        """Validate that a path is within the root.

        This is the security boundary of the bridge: all file operations
        must use it before accessing the filesystem.

        Args:
            path: Path to validate (relative to root, or absolute)

        Returns:
            GuardedPath with the canonical absolute location

        Raises:
            PathEscapeError: If the path escapes the root or is malformed
        """
        if path is None or path == '':
            path = '.'
        if isinstance(path, str):
            path = Path(path)

        try:
            # Resolve to absolute, handling .. and symlinks
            resolved = (self.root / path).resolve()
        except (ValueError, OSError) as e:
            raise PathEscapeError(f'Invalid path: {path!s}', path=str(path)) from e

        # Component-wise containment, not a string prefix check
        if not resolved.is_relative_to(self.root):
            raise PathEscapeError(f'Path traversal detected: {path}', path=str(path))

        return GuardedPath(root=self.root, absolute=resolved)

    def accepts(self, guarded: GuardedPath) -> bool:
        """Return True when ``guarded`` was produced for this guard's root."""
        return guarded.root == self.root
