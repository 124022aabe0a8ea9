"""Database models."""

from .user import User
from .material import Material
from .folder import Folder
from .stored_file import StoredFile

__all__ = ["User", "Material", "Folder", "StoredFile"]
