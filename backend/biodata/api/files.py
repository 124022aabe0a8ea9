"""Uploaded file API: upload, browse, download and placement in the folder tree."""

import logging
from typing import List, Optional, Union

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile
from fastapi.responses import FileResponse as DownloadResponse
from sqlalchemy.orm import Session

from ..core.auth import AuthContext, require_auth
from ..database import get_db
from ..exceptions import ValidationError
from ..repositories.file_repository import ROOT
from ..schemas.file import (
    FileListItem,
    FileMoveRequest,
    FileResponse,
    FileStats,
    FileUpdate,
)
from ..services.file_service import FileService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/files", tags=["files"], dependencies=[Depends(require_auth)])

_ROOT_TOKENS = frozenset({"", "null", "root"})


def _parse_folder_id(raw: Optional[str], field: str = "folderId") -> Optional[int]:
    """Form/query folder ids arrive as text; blank, ``null`` and ``root`` mean the root."""
    if raw is None or raw.strip().lower() in _ROOT_TOKENS:
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"Invalid folder id: {raw!r}", field=field) from None


@router.post("/upload", response_model=FileResponse, status_code=201)
def upload_file(
    file: UploadFile = File(...),
    description: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    folder_id: Optional[str] = Form(None, alias="folderId"),
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    """Store an upload and append it to a folder (or the root)."""
    return FileService(db).upload_file(
        file.file,
        original_name=file.filename or "",
        mime_type=file.content_type,
        description=description,
        category=category,
        folder_id=_parse_folder_id(folder_id),
        uploaded_by=auth.user_id,
    )


@router.get("", response_model=List[FileListItem])
def list_files(
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    folder_id: Optional[str] = Query(None, alias="folderId"),
    db: Session = Depends(get_db),
):
    """Newest first. Without ``folderId`` every file is listed."""
    folder_filter: Union[None, str, int] = None
    if folder_id is not None:
        parsed = _parse_folder_id(folder_id)
        folder_filter = ROOT if parsed is None else parsed
    return FileService(db).list_files(folder_id=folder_filter, category=category, search=search)


@router.get("/stats", response_model=FileStats)
def get_stats(db: Session = Depends(get_db)):
    return FileService(db).get_stats()


@router.get("/{file_id}", response_model=FileListItem)
def get_file(file_id: int, db: Session = Depends(get_db)):
    return FileService(db).get_file(file_id)


@router.get("/{file_id}/download")
def download_file(file_id: int, db: Session = Depends(get_db)):
    """Stored content under its original name and MIME type."""
    record, path = FileService(db).get_download(file_id)
    return DownloadResponse(
        path=str(path),
        filename=record.original_name,
        media_type=record.mime_type or "application/octet-stream",
    )


@router.put("/{file_id}", response_model=FileResponse)
def update_file(file_id: int, data: FileUpdate, db: Session = Depends(get_db)):
    return FileService(db).update_file(file_id, data)


@router.put("/{file_id}/move", response_model=FileResponse)
def move_file(file_id: int, data: FileMoveRequest, db: Session = Depends(get_db)):
    """Place in ``folderId`` (null = root) at position ``order``."""
    return FileService(db).move_file(file_id, data.folder_id, data.order)


@router.delete("/{file_id}", status_code=204)
def delete_file(file_id: int, db: Session = Depends(get_db)):
    """Delete the record and, best effort, its stored content."""
    FileService(db).delete_file(file_id)
    return Response(status_code=204)
