"""File operation routes for the bridge API."""
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import Response
from starlette.concurrency import run_in_threadpool

from ...storage import FileOps
from ..pairing.dependencies import require_pairing
from .schemas import ListResponse, OperationResult
from .service import FileService


def create_file_router(file_ops: FileOps) -> APIRouter:
    """Create file operations router.

    Plain ``def`` endpoints run in the worker thread pool, so blocking
    filesystem calls never stall the event loop.

    Args:
        file_ops: Operations bound to the shared root

    Returns:
        Configured APIRouter with file endpoints
    """
    router = APIRouter(tags=['files'], dependencies=[Depends(require_pairing)])
    service = FileService(file_ops)

    @router.get('/list', response_model=ListResponse)
    def list_files(path: str = Query('.', description='Directory relative to the shared root')):
        """List direct children of a directory (unordered)."""
        return service.list_directory(path)

    @router.get('/read')
    def read_file(path: str):
        """Return raw file bytes."""
        data = service.read_file(path)
        return Response(content=data, media_type='application/octet-stream')

    @router.put('/write', response_model=OperationResult)
    async def write_file(request: Request, path: str):
        """Create or overwrite a file with the raw request body.

        Parent directories must already exist.
        """
        data = await request.body()
        return await run_in_threadpool(service.write_file, path, data)

    @router.post('/mkdir', response_model=OperationResult)
    def make_directory(path: str):
        """Create a directory and missing ancestors."""
        return service.make_directory(path)

    @router.delete('/delete', response_model=OperationResult)
    def delete_path(path: str):
        """Delete a file or a directory tree. Irreversible."""
        return service.delete(path)

    return router
