"""Pydantic schemas for API validation."""

from .folder import (
    FolderCreate,
    FolderUpdate,
    FolderMoveRequest,
    FolderResponse,
    FolderTreeNode,
    FolderDetail,
    BreadcrumbEntry,
)
from .file import (
    FileResponse,
    FileListItem,
    FileUpdate,
    FileMoveRequest,
    FileStats,
)
from .material import MaterialCreate, MaterialUpdate, MaterialResponse
from .table import (
    ColumnResponse,
    ColumnDefinition,
    RowInsertRequest,
    RowUpdateRequest,
    RowMutationResponse,
    TableCreateRequest,
    TableCreateResponse,
)

__all__ = [
    "FolderCreate",
    "FolderUpdate",
    "FolderMoveRequest",
    "FolderResponse",
    "FolderTreeNode",
    "FolderDetail",
    "BreadcrumbEntry",
    "FileResponse",
    "FileListItem",
    "FileUpdate",
    "FileMoveRequest",
    "FileStats",
    "MaterialCreate",
    "MaterialUpdate",
    "MaterialResponse",
    "ColumnResponse",
    "ColumnDefinition",
    "RowInsertRequest",
    "RowUpdateRequest",
    "RowMutationResponse",
    "TableCreateRequest",
    "TableCreateResponse",
]
