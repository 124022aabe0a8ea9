"""API routes."""

from .tables import router as tables_router
from .folders import router as folders_router
from .files import router as files_router
from .materials import router as materials_router
from .auth_routes import router as auth_router

__all__ = [
    "tables_router",
    "folders_router",
    "files_router",
    "materials_router",
    "auth_router",
]
