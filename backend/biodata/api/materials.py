"""Material inventory API."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..core.auth import require_auth
from ..database import get_db
from ..schemas.material import MaterialCreate, MaterialResponse, MaterialUpdate
from ..services.material_service import MaterialService

router = APIRouter(prefix="/materials", tags=["materials"], dependencies=[Depends(require_auth)])


@router.get("", response_model=List[MaterialResponse])
def search_materials(
    department: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    name: Optional[str] = Query(None, description="Case-insensitive substring"),
    db: Session = Depends(get_db),
):
    return MaterialService(db).search(department=department, category=category, name=name)


@router.get("/{material_id}", response_model=MaterialResponse)
def get_material(material_id: int, db: Session = Depends(get_db)):
    return MaterialService(db).get_material(material_id)


@router.post("", response_model=MaterialResponse, status_code=201)
def create_material(data: MaterialCreate, db: Session = Depends(get_db)):
    return MaterialService(db).create_material(data)


@router.put("/{material_id}", response_model=MaterialResponse)
def update_material(material_id: int, data: MaterialUpdate, db: Session = Depends(get_db)):
    return MaterialService(db).update_material(material_id, data)
