"""Material inventory: search, create and partial update."""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..exceptions import ValidationError
from ..models.material import Material
from ..repositories.material_repository import MaterialRepository
from ..schemas.material import MaterialCreate, MaterialUpdate

logger = logging.getLogger(__name__)


class MaterialService:

    def __init__(self, db: Session):
        self.db = db
        self.repo = MaterialRepository(db)

    def search(
        self,
        department: Optional[str] = None,
        category: Optional[str] = None,
        name: Optional[str] = None,
    ) -> List[Material]:
        """Newest first, capped at ``material_list_limit``."""
        return self.repo.search(
            limit=settings.material_list_limit,
            department=department or None,
            category=category or None,
            name=(name or "").strip() or None,
        )

    def get_material(self, material_id: int) -> Material:
        return self.repo.get_by_id(material_id)

    def create_material(self, data: MaterialCreate) -> Material:
        self._check_code_free(data.code)
        material = Material(**data.model_dump())
        self.db.add(material)
        self.db.commit()
        self.db.refresh(material)
        logger.info("Created material", extra={"material_id": material.id, "code": material.code})
        return material

    def update_material(self, material_id: int, data: MaterialUpdate) -> Material:
        material = self.repo.get_by_id(material_id)
        changes = data.model_dump(exclude_unset=True)

        for required in ("code", "name"):
            if required in changes and not (changes[required] or "").strip():
                raise ValidationError(f"{required} cannot be empty", field=required)
        if "quantity" in changes and changes["quantity"] is None:
            raise ValidationError("quantity cannot be null", field="quantity")
        if "code" in changes and changes["code"] != material.code:
            self._check_code_free(changes["code"])

        for field, value in changes.items():
            setattr(material, field, value)

        self.db.commit()
        self.db.refresh(material)
        logger.info(
            "Updated material",
            extra={"material_id": material_id, "fields": sorted(changes)},
        )
        return material

    def _check_code_free(self, code: str) -> None:
        if self.repo.get_by_code(code) is not None:
            raise ValidationError(f"Material code already exists: {code}", field="code")
