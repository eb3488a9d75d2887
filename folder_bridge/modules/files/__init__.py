"""Files module for the bridge API.

Provides list, read, write, mkdir and delete over HTTP.
"""
from .router import create_file_router
from .schemas import FileEntryModel, ListResponse, OperationResult
from .service import FileService

__all__ = [
    'create_file_router',
    'FileEntryModel',
    'ListResponse',
    'OperationResult',
    'FileService',
]
