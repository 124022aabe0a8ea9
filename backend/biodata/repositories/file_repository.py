"""Query helpers for uploaded file records."""

from typing import List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import joinedload

from ..exceptions import StoredFileNotFoundError
from ..models.stored_file import StoredFile
from .base import BaseRepository

# Sentinel for "filter on root-level files" as opposed to "no folder filter".
ROOT = "root"


class FileRepository(BaseRepository[StoredFile]):
    model_class = StoredFile
    not_found_error = StoredFileNotFoundError

    def search(
        self,
        folder_id=None,
        category: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[StoredFile]:
        """Files newest first, with their folder eagerly loaded.

        *folder_id* is None for every file, ``ROOT`` for root-level files, or
        a folder id.
        """
        query = self.db.query(StoredFile).options(joinedload(StoredFile.folder))
        if folder_id == ROOT:
            query = query.filter(StoredFile.folder_id.is_(None))
        elif folder_id is not None:
            query = query.filter(StoredFile.folder_id == folder_id)
        if category:
            query = query.filter(StoredFile.category == category)
        if search:
            pattern = f"%{search.lower()}%"
            query = query.filter(
                or_(
                    func.lower(StoredFile.original_name).like(pattern),
                    func.lower(StoredFile.description).like(pattern),
                )
            )
        return query.order_by(StoredFile.created_at.desc(), StoredFile.id.desc()).all()

    def get_in_folder(self, folder_id: Optional[int]) -> List[StoredFile]:
        return (
            self.db.query(StoredFile)
            .filter(self._folder_filter(folder_id))
            .order_by(StoredFile.order, StoredFile.id)
            .all()
        )

    def get_in_folders(self, folder_ids: List[int]) -> List[StoredFile]:
        if not folder_ids:
            return []
        return (
            self.db.query(StoredFile)
            .filter(StoredFile.folder_id.in_(folder_ids))
            .order_by(StoredFile.order, StoredFile.id)
            .all()
        )

    def get_siblings_excluding(self, folder_id: Optional[int], file_id: int) -> List[StoredFile]:
        return (
            self.db.query(StoredFile)
            .filter(self._folder_filter(folder_id), StoredFile.id != file_id)
            .order_by(StoredFile.order, StoredFile.id)
            .all()
        )

    def max_sibling_order(self, folder_id: Optional[int]) -> Optional[int]:
        return (
            self.db.query(func.max(StoredFile.order))
            .filter(self._folder_filter(folder_id))
            .scalar()
        )

    def totals(self) -> Tuple[int, int]:
        """(file count, summed size in bytes)."""
        count, size = self.db.query(
            func.count(StoredFile.id), func.coalesce(func.sum(StoredFile.file_size), 0)
        ).one()
        return count or 0, int(size or 0)

    def category_counts(self) -> List[Tuple[str, int]]:
        return (
            self.db.query(StoredFile.category, func.count(StoredFile.id))
            .group_by(StoredFile.category)
            .order_by(StoredFile.category)
            .all()
        )

    @staticmethod
    def _folder_filter(folder_id: Optional[int]):
        if folder_id is None:
            return StoredFile.folder_id.is_(None)
        return StoredFile.folder_id == folder_id
