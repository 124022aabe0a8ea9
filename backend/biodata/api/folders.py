"""Folder tree API. Delegates to FolderService (deep module)."""

from typing import List

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from ..core.auth import require_auth
from ..database import get_db
from ..schemas.folder import (
    BreadcrumbEntry,
    FolderCreate,
    FolderDetail,
    FolderMoveRequest,
    FolderResponse,
    FolderTreeNode,
    FolderUpdate,
)
from ..services.folder_service import FolderService

router = APIRouter(prefix="/folders", tags=["folders"], dependencies=[Depends(require_auth)])


# -- Tree -----------------------------------------------------------------

@router.get("/tree", response_model=List[FolderTreeNode])
def get_tree(
    include_files: bool = Query(False, alias="includeFiles"),
    db: Session = Depends(get_db),
):
    """Every folder as a nested tree, children in sibling order."""
    return FolderService(db).get_tree(include_files=include_files)


# -- CRUD -----------------------------------------------------------------

@router.post("", response_model=FolderResponse, status_code=201)
def create_folder(data: FolderCreate, db: Session = Depends(get_db)):
    return FolderService(db).create_folder(data)


@router.get("/{folder_id}", response_model=FolderDetail)
def get_folder(folder_id: int, db: Session = Depends(get_db)):
    return FolderService(db).get_folder(folder_id)


@router.get("/{folder_id}/path", response_model=List[BreadcrumbEntry])
def get_folder_path(folder_id: int, db: Session = Depends(get_db)):
    """Breadcrumbs, root first."""
    return FolderService(db).get_path(folder_id)


@router.put("/{folder_id}", response_model=FolderResponse)
def update_folder(folder_id: int, data: FolderUpdate, db: Session = Depends(get_db)):
    return FolderService(db).update_folder(folder_id, data)


@router.put("/{folder_id}/move", response_model=FolderResponse)
def move_folder(folder_id: int, data: FolderMoveRequest, db: Session = Depends(get_db)):
    """Re-parent and insert at ``order`` among the target's children."""
    return FolderService(db).move_folder(folder_id, data.parent_id, data.order)


@router.delete("/{folder_id}", status_code=204)
def delete_folder(folder_id: int, db: Session = Depends(get_db)):
    """Delete a folder and its subfolders. Its files move to the root."""
    FolderService(db).delete_folder(folder_id)
    return Response(status_code=204)
