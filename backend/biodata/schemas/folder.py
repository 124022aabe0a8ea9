"""Folder and tree schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from .base import CamelModel
from .file import FileResponse


class FolderCreate(CamelModel):
    name: str
    parent_id: Optional[int] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Folder name cannot be empty")
        return v


class FolderUpdate(CamelModel):
    """Rename and/or re-parent. An explicit ``parentId: null`` moves to the root."""
    name: Optional[str] = None
    parent_id: Optional[int] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Folder name cannot be empty")
        return v


class FolderMoveRequest(CamelModel):
    parent_id: Optional[int] = None  # None = root level
    order: int = Field(..., ge=0)


class FolderResponse(CamelModel):
    id: int
    name: str
    parent_id: Optional[int] = None
    order: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class FolderCounts(CamelModel):
    files: int = 0
    children: int = 0


class FolderFileSummary(CamelModel):
    """Slim file entry attached to tree nodes."""
    id: int
    filename: str
    original_name: str
    mime_type: str
    file_size: int
    created_at: Optional[datetime] = None


class FolderTreeNode(FolderResponse):
    counts: FolderCounts = Field(default_factory=FolderCounts)
    files: Optional[List[FolderFileSummary]] = None
    children: List["FolderTreeNode"] = Field(default_factory=list)


class FolderChild(FolderResponse):
    counts: FolderCounts = Field(default_factory=FolderCounts)


class FolderDetail(FolderResponse):
    """One folder with its immediate children, its files and its parent."""
    parent: Optional[FolderResponse] = None
    children: List[FolderChild] = Field(default_factory=list)
    files: List[FileResponse] = Field(default_factory=list)


class BreadcrumbEntry(CamelModel):
    id: int
    name: str
