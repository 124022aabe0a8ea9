"""Deep module for the folder tree: CRUD, move, delete, breadcrumbs and tree building.

Every call re-reads current rows; nothing is cached between requests. The
tree is assembled in memory from one flat, order-sorted fetch.
"""

import logging
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..exceptions import CircularReferenceError
from ..models.folder import Folder
from ..models.stored_file import StoredFile
from ..repositories.file_repository import FileRepository
from ..repositories.folder_repository import FolderRepository
from ..schemas.file import FileResponse
from ..schemas.folder import (
    BreadcrumbEntry,
    FolderChild,
    FolderCounts,
    FolderCreate,
    FolderDetail,
    FolderFileSummary,
    FolderResponse,
    FolderTreeNode,
    FolderUpdate,
)
from .sibling_order import next_order, reindex_siblings

logger = logging.getLogger(__name__)


class FolderService:
    """All folder and tree operations behind a simple interface.

    Public methods:
        get_tree        -- nested tree of every folder, optionally with files
        get_folder      -- one folder with parent, children (with counts) and files
        get_path        -- breadcrumb list root -> folder
        create_folder   -- append under a parent (or at the root)
        update_folder   -- rename and/or re-parent, keeping the folder's order
        move_folder     -- re-parent and insert at a sibling position
        delete_folder   -- remove; the database cascades to the subtree
        would_create_circular_reference
    """

    def __init__(self, db: Session):
        self.db = db
        self.folder_repo = FolderRepository(db)
        self.file_repo = FileRepository(db)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_tree(self, include_files: bool = False) -> List[FolderTreeNode]:
        folders = self.folder_repo.get_all()
        folder_ids = [f.id for f in folders]

        children_by_parent: Dict[Optional[int], List[Folder]] = {}
        for folder in folders:
            children_by_parent.setdefault(folder.parent_id, []).append(folder)

        files_by_folder: Dict[int, List[StoredFile]] = {}
        if include_files:
            for stored in self.file_repo.get_in_folders(folder_ids):
                files_by_folder.setdefault(stored.folder_id, []).append(stored)
            file_counts = {fid: len(items) for fid, items in files_by_folder.items()}
        else:
            file_counts = self.folder_repo.file_counts(folder_ids)

        def build_children(parent_id: Optional[int]) -> List[FolderTreeNode]:
            nodes: List[FolderTreeNode] = []
            for folder in children_by_parent.get(parent_id, []):
                files = None
                if include_files:
                    files = [
                        FolderFileSummary.model_validate(f)
                        for f in files_by_folder.get(folder.id, [])
                    ]
                nodes.append(FolderTreeNode(
                    **_folder_fields(folder),
                    counts=FolderCounts(
                        files=file_counts.get(folder.id, 0),
                        children=len(children_by_parent.get(folder.id, [])),
                    ),
                    files=files,
                    children=build_children(folder.id),
                ))
            return nodes

        return build_children(None)

    def get_folder(self, folder_id: int) -> FolderDetail:
        folder = self.folder_repo.get_by_id(folder_id)

        children = self.folder_repo.get_children(folder.id)
        child_ids = [c.id for c in children]
        child_counts = self.folder_repo.child_counts(child_ids)
        file_counts = self.folder_repo.file_counts(child_ids)

        parent = None
        if folder.parent_id is not None:
            parent_row = self.folder_repo.get_by_id_optional(folder.parent_id)
            if parent_row is not None:
                parent = FolderResponse.model_validate(parent_row)

        return FolderDetail(
            **_folder_fields(folder),
            parent=parent,
            children=[
                FolderChild(
                    **_folder_fields(child),
                    counts=FolderCounts(
                        files=file_counts.get(child.id, 0),
                        children=child_counts.get(child.id, 0),
                    ),
                )
                for child in children
            ],
            files=[
                FileResponse.model_validate(f)
                for f in self.file_repo.get_in_folder(folder.id)
            ],
        )

    def get_path(self, folder_id: int) -> List[BreadcrumbEntry]:
        """Breadcrumbs from the root down to *folder_id*.

        The walk stops quietly at a dangling parent reference.
        """
        folder = self.folder_repo.get_by_id(folder_id)
        path: List[BreadcrumbEntry] = []
        seen = set()
        current: Optional[Folder] = folder
        while current is not None and current.id not in seen:
            seen.add(current.id)
            path.append(BreadcrumbEntry(id=current.id, name=current.name))
            if current.parent_id is None:
                break
            current = self.folder_repo.get_by_id_optional(current.parent_id)
        path.reverse()
        return path

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_folder(self, data: FolderCreate) -> Folder:
        if data.parent_id is not None:
            self.folder_repo.get_by_id(data.parent_id)

        folder = Folder(
            name=data.name,
            parent_id=data.parent_id,
            order=next_order(self.folder_repo.max_sibling_order(data.parent_id)),
        )
        self.db.add(folder)
        self.db.commit()
        self.db.refresh(folder)
        logger.info(
            "Created folder",
            extra={"folder_id": folder.id, "parent_id": folder.parent_id, "order": folder.order},
        )
        return folder

    def update_folder(self, folder_id: int, data: FolderUpdate) -> Folder:
        """Rename and/or re-parent. ``parentId`` is applied only when sent."""
        folder = self.folder_repo.get_by_id(folder_id)

        if data.name is not None:
            folder.name = data.name

        if "parent_id" in data.model_fields_set and data.parent_id != folder.parent_id:
            self._check_new_parent(folder_id, data.parent_id)
            folder.parent_id = data.parent_id

        self.db.commit()
        self.db.refresh(folder)
        logger.info("Updated folder", extra={"folder_id": folder_id})
        return folder

    def move_folder(self, folder_id: int, parent_id: Optional[int], order: int) -> Folder:
        """Place *folder_id* under *parent_id* at sibling position *order*.

        The folder, then every other sibling at the target, is re-ranked in
        one transaction. Siblings at or past *order* shift down by one and
        only rows whose rank changes are written.
        """
        folder = self.folder_repo.get_by_id(folder_id)
        self._check_new_parent(folder_id, parent_id)

        try:
            folder.parent_id = parent_id
            folder.order = order
            siblings = self.folder_repo.get_siblings_excluding(parent_id, folder_id)
            changes = reindex_siblings(siblings, order)
            for sibling, new_order in changes:
                sibling.order = new_order
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

        self.db.refresh(folder)
        logger.info(
            "Moved folder",
            extra={
                "folder_id": folder_id,
                "parent_id": parent_id,
                "order": order,
                "reindexed": len(changes),
            },
        )
        return folder

    def delete_folder(self, folder_id: int) -> None:
        """Delete a folder. Child folders go with it; its files move to the root."""
        self.folder_repo.get_by_id(folder_id)
        try:
            self.folder_repo.delete(folder_id)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.expire_all()
        logger.info("Deleted folder", extra={"folder_id": folder_id})

    def would_create_circular_reference(
        self, folder_id: int, new_parent_id: Optional[int]
    ) -> bool:
        """True when *new_parent_id* is *folder_id* or one of its descendants."""
        if new_parent_id is None:
            return False
        if new_parent_id == folder_id:
            return True

        seen = set()
        current_id: Optional[int] = new_parent_id
        while current_id is not None and current_id not in seen:
            if current_id == folder_id:
                return True
            seen.add(current_id)
            current = self.folder_repo.get_by_id_optional(current_id)
            if current is None:
                return False
            current_id = current.parent_id
        return False

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _check_new_parent(self, folder_id: int, parent_id: Optional[int]) -> None:
        if parent_id is None:
            return
        if parent_id != folder_id:
            self.folder_repo.get_by_id(parent_id)
        if self.would_create_circular_reference(folder_id, parent_id):
            raise CircularReferenceError(folder_id, parent_id)


def _folder_fields(folder: Folder) -> dict:
    """Scalar columns only; keeps relationship attributes from lazy-loading."""
    return FolderResponse.model_validate(folder).model_dump()
