"""Data access repositories."""

from .base import BaseRepository
from .folder_repository import FolderRepository
from .file_repository import FileRepository
from .material_repository import MaterialRepository

__all__ = [
    "BaseRepository",
    "FolderRepository",
    "FileRepository",
    "MaterialRepository",
]
