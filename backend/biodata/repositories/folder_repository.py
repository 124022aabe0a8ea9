"""Query helpers for the folder tree."""

from typing import Dict, List, Optional

from sqlalchemy import func

from ..exceptions import FolderNotFoundError
from ..models.folder import Folder
from ..models.stored_file import StoredFile
from .base import BaseRepository


class FolderRepository(BaseRepository[Folder]):
    model_class = Folder
    not_found_error = FolderNotFoundError

    def get_all(self) -> List[Folder]:
        """Every folder, flat, in sibling order."""
        return self.db.query(Folder).order_by(Folder.order, Folder.id).all()

    def get_children(self, parent_id: Optional[int]) -> List[Folder]:
        return (
            self.db.query(Folder)
            .filter(self._parent_filter(parent_id))
            .order_by(Folder.order, Folder.id)
            .all()
        )

    def get_siblings_excluding(self, parent_id: Optional[int], folder_id: int) -> List[Folder]:
        """Folders under *parent_id* other than *folder_id*, in current order."""
        return (
            self.db.query(Folder)
            .filter(self._parent_filter(parent_id), Folder.id != folder_id)
            .order_by(Folder.order, Folder.id)
            .all()
        )

    def max_sibling_order(self, parent_id: Optional[int]) -> Optional[int]:
        return (
            self.db.query(func.max(Folder.order))
            .filter(self._parent_filter(parent_id))
            .scalar()
        )

    def child_counts(self, folder_ids: List[int]) -> Dict[int, int]:
        if not folder_ids:
            return {}
        rows = (
            self.db.query(Folder.parent_id, func.count(Folder.id))
            .filter(Folder.parent_id.in_(folder_ids))
            .group_by(Folder.parent_id)
            .all()
        )
        return {parent_id: count for parent_id, count in rows}

    def file_counts(self, folder_ids: List[int]) -> Dict[int, int]:
        if not folder_ids:
            return {}
        rows = (
            self.db.query(StoredFile.folder_id, func.count(StoredFile.id))
            .filter(StoredFile.folder_id.in_(folder_ids))
            .group_by(StoredFile.folder_id)
            .all()
        )
        return {folder_id: count for folder_id, count in rows}

    def count(self) -> int:
        return self.db.query(func.count(Folder.id)).scalar() or 0

    def delete(self, folder_id: int) -> int:
        """Delete with a bulk statement so the database applies ON DELETE rules."""
        return (
            self.db.query(Folder)
            .filter(Folder.id == folder_id)
            .delete(synchronize_session=False)
        )

    @staticmethod
    def _parent_filter(parent_id: Optional[int]):
        if parent_id is None:
            return Folder.parent_id.is_(None)
        return Folder.parent_id == parent_id
