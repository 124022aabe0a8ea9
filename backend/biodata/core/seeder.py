"""Seed demo users and materials on first startup.

Loads a JSON fixture into an empty database so a fresh install has
accounts to log in with and rows to browse. Idempotent: each table is
skipped if it already has rows.
"""

import json
import logging
from pathlib import Path
from typing import Dict

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

_FIXTURE_PATH = Path(__file__).parent.parent.parent / "fixtures" / "seed_data.json"


def seed_demo_data(db: Session, fixture_path: Path = _FIXTURE_PATH) -> Dict[str, int]:
    """Load demo users and materials into empty tables.

    Args:
        db: An open SQLAlchemy session.
        fixture_path: JSON file with ``users`` and ``materials`` lists.

    Returns:
        Rows seeded per table (0 where skipped).
    """
    from ..models import Material, User
    from ..schemas.material import MaterialCreate
    from ..services.auth_service import hash_password

    seeded = {"users": 0, "materials": 0}

    if not fixture_path.exists():
        logger.debug("No seed fixture at %s", fixture_path)
        return seeded

    try:
        with open(fixture_path) as f:
            fixture = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Failed to read seed fixture: %s", e)
        return seeded

    if db.query(User).count() == 0:
        for user_data in fixture.get("users", []):
            db.add(User(
                email=user_data["email"].lower(),
                name=user_data.get("name"),
                password_hash=hash_password(user_data["password"]),
            ))
            seeded["users"] += 1

    if db.query(Material).count() == 0:
        for material_data in fixture.get("materials", []):
            try:
                material = MaterialCreate(**material_data)
            except PydanticValidationError as e:
                logger.warning("Skipping seed material '%s': %s", material_data.get("code", "?"), e)
                continue
            db.add(Material(**material.model_dump()))
            seeded["materials"] += 1

    if any(seeded.values()):
        db.commit()
        logger.info("Seeded demo data", extra=seeded)
    return seeded
