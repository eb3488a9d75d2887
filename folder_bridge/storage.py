"""File operations against the shared folder."""
from __future__ import annotations

import os
import shutil
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .errors import (
    BridgeError,
    EntryNotFoundError,
    FileIOError,
    IsADirectoryPathError,
    NotADirectoryPathError,
    PathEscapeError,
)
from .observability.logging import get_logger
from .observability.metrics import FILE_OPERATIONS_TOTAL
from .path_guard import GuardedPath, PathGuard

logger = get_logger(__name__)


@dataclass(frozen=True)
class FileEntry:
    """One direct child of a listed directory."""
    name: str
    path: Path
    is_directory: bool
    size: int | None = None
    modified: datetime | None = None

    def to_dict(self, root: Path | None = None) -> dict[str, Any]:
        """Serialize the entry.

        When ``root`` is given, ``path`` is rendered relative to it so
        remote peers never see the desktop's directory layout.
        """
        path = self.path.relative_to(root) if root is not None else self.path
        return {
            'name': self.name,
            'path': path.as_posix(),
            'is_directory': self.is_directory,
            'size': self.size,
            'modified': self.modified.isoformat() if self.modified else None,
        }


def _display(target: GuardedPath) -> str:
    return target.relative.as_posix()


class FileOps:
    """Local filesystem operations confined to one root directory.

    Every operation resolves its path through a PathGuard before touching
    the filesystem and reports failures as typed BridgeErrors.
    """

    def __init__(self, root: Path | str):
        """Initialize with the shared root directory.

        Args:
            root: The root directory for all file operations
        """
        self.guard = PathGuard(root)

    @property
    def root(self) -> Path:
        return self.guard.root

    def _target(self, path: Path | str | GuardedPath, operation: str) -> GuardedPath:
        if isinstance(path, GuardedPath):
            if not self.guard.accepts(path):
                raise PathEscapeError(
                    'Path belongs to a different share root',
                    path=str(path.absolute),
                    operation=operation,
                )
            return path
        try:
            return self.guard.resolve(path)
        except PathEscapeError as e:
            e.operation = operation
            raise

    def _io_error(self, e: OSError, target: GuardedPath, operation: str) -> FileIOError:
        return FileIOError(
            f'{operation} failed for {_display(target)}: {e.strerror or e}',
            path=_display(target),
            operation=operation,
        )

    def _record(self, operation: str, error: BridgeError | None = None) -> None:
        outcome = error.code.value if error is not None else 'ok'
        FILE_OPERATIONS_TOTAL.labels(operation=operation, outcome=outcome).inc()
        if error is not None:
            logger.warning(
                'file_operation_failed',
                operation=operation,
                path=error.path,
                error_code=outcome,
            )

    def _run(self, operation: str, func, path):
        try:
            result = func(self._target(path, operation))
        except BridgeError as e:
            self._record(operation, e)
            raise
        self._record(operation)
        return result

    def list_dir(self, path: Path | str | GuardedPath = '.') -> list[FileEntry]:
        """List direct children of a directory.

        Order is unspecified; callers must treat the result as a set.

        Raises:
            EntryNotFoundError, NotADirectoryPathError, FileIOError, PathEscapeError
        """
        return self._run('list', self._list_dir, path)

    def _list_dir(self, target: GuardedPath) -> list[FileEntry]:
        base = target.absolute
        if not base.exists():
            raise EntryNotFoundError(f'Directory not found: {_display(target)}', path=_display(target), operation='list')
        if not base.is_dir():
            raise NotADirectoryPathError(f'Path is not a directory: {_display(target)}', path=_display(target), operation='list')

        entries = []
        try:
            with os.scandir(base) as it:
                for child in it:
                    entries.append(self._entry(base / child.name, child))
        except OSError as e:
            raise self._io_error(e, target, 'list') from e
        return entries

    def _entry(self, path: Path, dirent: os.DirEntry) -> FileEntry:
        bare = FileEntry(name=dirent.name, path=path, is_directory=False)
        try:
            if dirent.is_symlink() and not self._link_inside_root(path):
                # Dangling or leads outside the share: keep the name, drop metadata
                return bare
            is_dir = dirent.is_dir()
            st = dirent.stat()
        except OSError:
            return bare
        return FileEntry(
            name=dirent.name,
            path=path,
            is_directory=is_dir,
            size=None if is_dir else st.st_size,
            modified=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
        )

    def _link_inside_root(self, path: Path) -> bool:
        try:
            return path.resolve(strict=True).is_relative_to(self.root)
        except (OSError, RuntimeError):
            return False

    def read_file(self, path: Path | str | GuardedPath) -> bytes:
        """Read full file contents.

        Raises:
            EntryNotFoundError, IsADirectoryPathError, FileIOError, PathEscapeError
        """
        return self._run('read', self._read_file, path)

    def _read_file(self, target: GuardedPath) -> bytes:
        p = target.absolute
        if p.is_dir():
            raise IsADirectoryPathError(f'Path is a directory: {_display(target)}', path=_display(target), operation='read')
        try:
            return p.read_bytes()
        except FileNotFoundError as e:
            raise EntryNotFoundError(f'File not found: {_display(target)}', path=_display(target), operation='read') from e
        except OSError as e:
            raise self._io_error(e, target, 'read') from e

    def write_file(self, path: Path | str | GuardedPath, data: bytes) -> None:
        """Create or truncate-and-overwrite a file.

        Parent directories are not created; call make_dir first.

        Raises:
            FileIOError, IsADirectoryPathError, PathEscapeError
        """
        self._run('write', lambda target: self._write_file(target, data), path)

    def _write_file(self, target: GuardedPath, data: bytes) -> None:
        p = target.absolute
        if p.is_dir():
            raise IsADirectoryPathError(f'Path is a directory: {_display(target)}', path=_display(target), operation='write')
        if not p.parent.is_dir():
            raise FileIOError(
                f'Parent directory does not exist: {_display(target)}',
                path=_display(target),
                operation='write',
            )
        try:
            with open(p, 'wb') as f:
                f.write(data)
        except OSError as e:
            raise self._io_error(e, target, 'write') from e

    def make_dir(self, path: Path | str | GuardedPath) -> None:
        """Create a directory and any missing ancestors. Idempotent.

        Raises:
            FileIOError, PathEscapeError
        """
        self._run('mkdir', self._make_dir, path)

    def _make_dir(self, target: GuardedPath) -> None:
        try:
            target.absolute.mkdir(parents=True, exist_ok=True)
        except FileExistsError as e:
            raise FileIOError(
                f'A file already exists at {_display(target)}',
                path=_display(target),
                operation='mkdir',
            ) from e
        except OSError as e:
            raise self._io_error(e, target, 'mkdir') from e

    def delete(self, path: Path | str | GuardedPath) -> None:
        """Delete a file, or a directory and everything under it.

        Irreversible: there is no trash.

        Raises:
            EntryNotFoundError, FileIOError, PathEscapeError
        """
        self._run('delete', self._delete, path)

    def _delete(self, target: GuardedPath) -> None:
        p = target.absolute
        if target.is_root:
            raise FileIOError('Refusing to delete the shared root', path='.', operation='delete')
        if not p.exists():
            raise EntryNotFoundError(f'Path not found: {_display(target)}', path=_display(target), operation='delete')
        try:
            if p.is_dir():
                shutil.rmtree(p)
            else:
                p.unlink()
        except FileNotFoundError as e:
            raise EntryNotFoundError(f'Path not found: {_display(target)}', path=_display(target), operation='delete') from e
        except OSError as e:
            raise self._io_error(e, target, 'delete') from e

    def exists(self, path: Path | str | GuardedPath) -> bool:
        """Check if path exists inside the root."""
        return self._target(path, 'exists').absolute.exists()
