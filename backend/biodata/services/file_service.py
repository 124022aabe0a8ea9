"""Uploaded files: placement in the folder tree, metadata and content lifecycle."""

import logging
from pathlib import Path
from typing import BinaryIO, List, Optional, Tuple, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..exceptions import StoredFileNotFoundError
from ..models.stored_file import StoredFile
from ..repositories.file_repository import FileRepository
from ..repositories.folder_repository import FolderRepository
from ..schemas.file import CategoryCount, FileStats, FileUpdate
from .file_storage import FileStorage
from .sibling_order import next_order, reindex_siblings

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "general"
ALL_CATEGORIES = "all"

FolderFilter = Union[None, str, int]


class FileService:
    """File records and their stored content.

    Public methods:
        upload_file  -- store content and append a record to a folder (or the root)
        list_files   -- filter by folder, category and free-text search
        get_file     -- lookup by id
        get_download -- record plus on-disk path of its content
        update_file  -- description / category / folder
        move_file    -- re-place at a sibling position; same algorithm as folders
        delete_file  -- remove record, then content (best effort)
        get_stats    -- totals and per-category counts
    """

    def __init__(self, db: Session, storage: Optional[FileStorage] = None):
        self.db = db
        self.file_repo = FileRepository(db)
        self.folder_repo = FolderRepository(db)
        self.storage = storage or FileStorage()

    def upload_file(
        self,
        stream: BinaryIO,
        original_name: str,
        mime_type: Optional[str],
        description: Optional[str] = None,
        category: Optional[str] = None,
        folder_id: Optional[int] = None,
        uploaded_by: Optional[int] = None,
    ) -> StoredFile:
        if folder_id is not None:
            self.folder_repo.get_by_id(folder_id)

        content = self.storage.save(stream, original_name)
        record = StoredFile(
            filename=content.filename,
            original_name=original_name,
            mime_type=mime_type or "application/octet-stream",
            file_size=content.size,
            file_path=content.file_path,
            description=description or None,
            category=category or DEFAULT_CATEGORY,
            folder_id=folder_id,
            order=next_order(self.file_repo.max_sibling_order(folder_id)),
            uploaded_by=uploaded_by,
        )
        try:
            self.db.add(record)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            self.storage.remove(content.file_path)
            raise

        self.db.refresh(record)
        logger.info(
            "Uploaded file",
            extra={
                "file_id": record.id,
                "folder_id": folder_id,
                "size": content.size,
                "mime_type": record.mime_type,
            },
        )
        return record

    def list_files(
        self,
        folder_id: FolderFilter = None,
        category: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[StoredFile]:
        """*folder_id*: None for all files, ``ROOT`` for root-level files, or an id."""
        if category == ALL_CATEGORIES:
            category = None
        return self.file_repo.search(
            folder_id=folder_id,
            category=category or None,
            search=(search or "").strip() or None,
        )

    def get_file(self, file_id: int) -> StoredFile:
        return self.file_repo.get_by_id(file_id)

    def get_download(self, file_id: int) -> Tuple[StoredFile, Path]:
        record = self.file_repo.get_by_id(file_id)
        path = self.storage.resolve(record.file_path)
        if path is None:
            logger.warning(
                "Stored content missing for file",
                extra={"file_id": file_id, "file_path": record.file_path},
            )
            raise StoredFileNotFoundError(file_id, message="File content not found on disk")
        return record, path

    def update_file(self, file_id: int, data: FileUpdate) -> StoredFile:
        record = self.file_repo.get_by_id(file_id)
        fields = data.model_fields_set

        if "description" in fields:
            record.description = data.description
        if "category" in fields and data.category:
            record.category = data.category
        if "folder_id" in fields and data.folder_id != record.folder_id:
            if data.folder_id is not None:
                self.folder_repo.get_by_id(data.folder_id)
            record.folder_id = data.folder_id

        self.db.commit()
        self.db.refresh(record)
        logger.info("Updated file", extra={"file_id": file_id, "fields": sorted(fields)})
        return record

    def move_file(self, file_id: int, folder_id: Optional[int], order: int) -> StoredFile:
        """Place *file_id* in *folder_id* at sibling position *order*."""
        record = self.file_repo.get_by_id(file_id)
        if folder_id is not None:
            self.folder_repo.get_by_id(folder_id)

        try:
            record.folder_id = folder_id
            record.order = order
            siblings = self.file_repo.get_siblings_excluding(folder_id, file_id)
            changes = reindex_siblings(siblings, order)
            for sibling, new_order in changes:
                sibling.order = new_order
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

        self.db.refresh(record)
        logger.info(
            "Moved file",
            extra={
                "file_id": file_id,
                "folder_id": folder_id,
                "order": order,
                "reindexed": len(changes),
            },
        )
        return record

    def delete_file(self, file_id: int) -> None:
        record = self.file_repo.get_by_id(file_id)
        file_path = record.file_path

        self.db.delete(record)
        self.db.commit()

        self.storage.remove(file_path)
        logger.info("Deleted file", extra={"file_id": file_id})

    def get_stats(self) -> FileStats:
        total_files, total_size = self.file_repo.totals()
        return FileStats(
            total_files=total_files,
            total_size=total_size,
            categories=[
                CategoryCount(category=category, count=count)
                for category, count in self.file_repo.category_counts()
            ],
        )
