"""Static serving of the shared folder."""
from fastapi import APIRouter, Depends
from starlette.responses import FileResponse, JSONResponse

from ...errors import EntryNotFoundError
from ...storage import FileOps
from ..pairing.dependencies import require_pairing


def create_static_router(file_ops: FileOps) -> APIRouter:
    """Create the catch-all static router.

    Must be included after every other router since it matches any path.
    Files are returned as-is; directories serve their ``index.html`` when
    present and a JSON listing otherwise.
    """
    router = APIRouter(tags=['static'], dependencies=[Depends(require_pairing)])

    @router.api_route('/{full_path:path}', methods=['GET', 'HEAD'])
    def serve(full_path: str):
        target = file_ops.guard.resolve(full_path)
        p = target.absolute
        if p.is_file():
            return FileResponse(p)
        if p.is_dir():
            index = p / 'index.html'
            if index.is_file():
                return FileResponse(index)
            entries = file_ops.list_dir(target)
            return JSONResponse({
                'path': target.relative.as_posix(),
                'entries': [entry.to_dict(file_ops.root) for entry in entries],
            })
        raise EntryNotFoundError(f'Not found: {full_path}', path=full_path, operation='serve')

    return router
