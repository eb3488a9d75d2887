"""Command surface for the desktop UI layer.

Each method maps one UI command onto the session controller. Failures are
raised as the typed errors from ``folder_bridge.errors`` so the UI can
show them without parsing messages.
"""
from __future__ import annotations

from typing import Any

from .session import SessionController


class BridgeCommands:
    """UI-facing commands over a SessionController."""

    def __init__(self, controller: SessionController | None = None):
        self.controller = controller or SessionController()

    def generate_pin(self) -> str:
        return self.controller.generate_pin()

    def start_sharing(self, folder_path: str) -> str:
        """Start sharing and echo the folder path back."""
        self.controller.start_sharing(folder_path)
        return folder_path

    def stop_sharing(self) -> None:
        self.controller.stop_sharing()

    def session_info(self) -> dict[str, Any] | None:
        session = self.controller.session
        return session.to_dict() if session is not None else None

    def list_files(self, path: str = '.') -> list[dict[str, Any]]:
        ops = self.controller.file_ops()
        return [entry.to_dict() for entry in ops.list_dir(path)]

    def read_file(self, path: str) -> bytes:
        return self.controller.file_ops().read_file(path)

    def write_file(self, path: str, content: bytes) -> None:
        self.controller.file_ops().write_file(path, content)

    def create_directory(self, path: str) -> None:
        self.controller.file_ops().make_dir(path)

    def delete_file(self, path: str) -> None:
        """Delete a file or directory tree. The UI must confirm first."""
        self.controller.file_ops().delete(path)
