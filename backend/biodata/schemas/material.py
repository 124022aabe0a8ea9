"""Material schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import field_validator

from .base import CamelModel


class MaterialBase(CamelModel):
    code: str
    name: str
    category: Optional[str] = None
    department: Optional[str] = None
    quantity: int = 0
    unit: Optional[str] = None
    price: Optional[Decimal] = None

    @field_validator("code", "name")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Value cannot be empty")
        return v


class MaterialCreate(MaterialBase):
    pass


class MaterialUpdate(CamelModel):
    code: Optional[str] = None
    name: Optional[str] = None
    category: Optional[str] = None
    department: Optional[str] = None
    quantity: Optional[int] = None
    unit: Optional[str] = None
    price: Optional[Decimal] = None


class MaterialResponse(MaterialBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
