"""File operations service for the bridge API."""
from ...storage import FileOps
from .schemas import FileEntryModel, ListResponse, OperationResult


class FileService:
    """Adapts FileOps results to API response models.

    Errors propagate as BridgeErrors; the app's exception handler maps
    them to HTTP responses.
    """

    def __init__(self, file_ops: FileOps):
        """Initialize the file service.

        Args:
            file_ops: Operations bound to the shared root
        """
        self.file_ops = file_ops

    def list_directory(self, path: str = '.') -> ListResponse:
        entries = self.file_ops.list_dir(path)
        root = self.file_ops.root
        return ListResponse(
            entries=[FileEntryModel(**entry.to_dict(root)) for entry in entries],
            path=path,
        )

    def read_file(self, path: str) -> bytes:
        return self.file_ops.read_file(path)

    def write_file(self, path: str, data: bytes) -> OperationResult:
        self.file_ops.write_file(path, data)
        return OperationResult(success=True, path=path)

    def make_directory(self, path: str) -> OperationResult:
        self.file_ops.make_dir(path)
        return OperationResult(success=True, path=path)

    def delete(self, path: str) -> OperationResult:
        self.file_ops.delete(path)
        return OperationResult(success=True, path=path)
