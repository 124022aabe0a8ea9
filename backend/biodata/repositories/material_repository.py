"""Query helpers for materials."""

from typing import List, Optional

from sqlalchemy import func

from ..exceptions import MaterialNotFoundError
from ..models.material import Material
from .base import BaseRepository


class MaterialRepository(BaseRepository[Material]):
    model_class = Material
    not_found_error = MaterialNotFoundError

    def search(
        self,
        limit: int,
        department: Optional[str] = None,
        category: Optional[str] = None,
        name: Optional[str] = None,
    ) -> List[Material]:
        query = self.db.query(Material)
        if department:
            query = query.filter(Material.department == department)
        if category:
            query = query.filter(Material.category == category)
        if name:
            query = query.filter(func.lower(Material.name).like(f"%{name.lower()}%"))
        return (
            query.order_by(Material.updated_at.desc(), Material.id.desc())
            .limit(limit)
            .all()
        )

    def get_by_code(self, code: str) -> Optional[Material]:
        return self.db.query(Material).filter(Material.code == code).first()

    def count(self) -> int:
        return self.db.query(func.count(Material.id)).scalar() or 0
