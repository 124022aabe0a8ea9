"""Uploaded file metadata. Content lives on disk under the upload directory."""

from sqlalchemy import Column, Index, Integer, BigInteger, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..database import Base


class StoredFile(Base):
    __tablename__ = "files"
    __table_args__ = (
        Index("ix_files_folder_id", "folder_id"),
        Index("ix_files_category", "category"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    filename = Column(String(255), nullable=False)  # name on disk
    original_name = Column(String(255), nullable=False)
    mime_type = Column(String(255), nullable=False)
    file_size = Column(BigInteger, nullable=False)
    file_path = Column(Text, nullable=False)  # POSIX path relative to the working directory
    description = Column(Text, nullable=True)
    category = Column(String(100), nullable=False, default="general")
    folder_id = Column(Integer, ForeignKey("folders.id", ondelete="SET NULL"), nullable=True)
    order = Column(Integer, nullable=False, default=0)
    uploaded_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    folder = relationship("Folder", back_populates="files")
