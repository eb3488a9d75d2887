"""Pydantic schemas for file operations."""
from datetime import datetime

from pydantic import BaseModel


class FileEntryModel(BaseModel):
    """A listed entry, with its path relative to the shared root."""
    name: str
    path: str
    is_directory: bool
    size: int | None = None
    modified: datetime | None = None


class ListResponse(BaseModel):
    entries: list[FileEntryModel]
    path: str


class OperationResult(BaseModel):
    success: bool
    path: str
