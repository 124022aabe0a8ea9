"""Material inventory records."""

from sqlalchemy import Column, Integer, String, Numeric, DateTime, Index
from sqlalchemy.sql import func
from ..database import Base


class Material(Base):
    __tablename__ = "materials"
    __table_args__ = (
        Index("ix_materials_department", "department"),
        Index("ix_materials_category", "category"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    code = Column(String(50), unique=True, nullable=False)
    name = Column(String(255), nullable=False)
    category = Column(String(100), nullable=True)
    department = Column(String(100), nullable=True)
    quantity = Column(Integer, nullable=False, default=0)
    unit = Column(String(20), nullable=True)
    price = Column(Numeric(12, 2), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
