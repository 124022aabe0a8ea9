"""Business logic services."""

from .table_service import TableService
from .folder_service import FolderService
from .file_service import FileService
from .material_service import MaterialService

__all__ = ["TableService", "FolderService", "FileService", "MaterialService"]
