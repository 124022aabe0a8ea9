"""Self-referential folder tree."""

from sqlalchemy import Column, Index, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..database import Base


class Folder(Base):
    """A node in the folder tree.

    ``order`` ranks a folder among the folders sharing its ``parent_id``.
    Deleting a folder removes its subtree through ON DELETE CASCADE and
    detaches its files through ON DELETE SET NULL on ``files.folder_id``.
    """

    __tablename__ = "folders"
    __table_args__ = (
        Index("ix_folders_parent_id", "parent_id"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    parent_id = Column(Integer, ForeignKey("folders.id", ondelete="CASCADE"), nullable=True)
    order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    parent = relationship("Folder", remote_side=[id], back_populates="children")
    children = relationship(
        "Folder",
        back_populates="parent",
        passive_deletes=True,
        order_by="Folder.order",
    )
    files = relationship(
        "StoredFile",
        back_populates="folder",
        passive_deletes=True,
        order_by="StoredFile.order",
    )
