"""Uploaded file schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from .base import CamelModel


class FolderSummary(CamelModel):
    id: int
    name: str


class FileResponse(CamelModel):
    id: int
    filename: str
    original_name: str
    mime_type: str
    file_size: int
    file_path: str
    description: Optional[str] = None
    category: str
    folder_id: Optional[int] = None
    order: int
    uploaded_by: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class FileListItem(FileResponse):
    folder: Optional[FolderSummary] = None


class FileUpdate(CamelModel):
    """Partial update. An explicit ``folderId: null`` moves the file to the root."""
    description: Optional[str] = None
    category: Optional[str] = None
    folder_id: Optional[int] = None


class FileMoveRequest(CamelModel):
    folder_id: Optional[int] = None
    order: int = Field(..., ge=0)


class CategoryCount(CamelModel):
    category: str
    count: int


class FileStats(CamelModel):
    total_files: int
    total_size: int
    categories: List[CategoryCount]
