"""Tests for demo data seeding."""

import json

from biodata.core.seeder import seed_demo_data
from biodata.models import Material, User
from biodata.services import auth_service


class TestSeeder:

    def test_seeds_empty_database(self, db):
        seeded = seed_demo_data(db)

        assert seeded == {"users": 3, "materials": 3}
        assert db.query(User).count() == 3
        assert {m.code for m in db.query(Material).all()} == {"MAT-001", "MAT-002", "MAT-003"}

    def test_seeded_user_can_log_in(self, db):
        seed_demo_data(db)
        user = auth_service.authenticate(db, "admin@example.com", "admin123")
        assert user.name == "Admin"

    def test_idempotent(self, db):
        seed_demo_data(db)
        assert seed_demo_data(db) == {"users": 0, "materials": 0}
        assert db.query(User).count() == 3

    def test_skips_populated_table(self, db, user):
        seeded = seed_demo_data(db)
        assert seeded["users"] == 0
        assert seeded["materials"] == 3

    def test_missing_fixture(self, db, tmp_path):
        assert seed_demo_data(db, tmp_path / "absent.json") == {"users": 0, "materials": 0}

    def test_invalid_material_skipped(self, db, tmp_path):
        fixture = tmp_path / "seed.json"
        fixture.write_text(json.dumps({
            "users": [],
            "materials": [
                {"code": "", "name": "Nameless"},
                {"code": "OK-1", "name": "Valid"},
            ],
        }))

        seeded = seed_demo_data(db, fixture)

        assert seeded == {"users": 0, "materials": 1}
        assert db.query(Material).one().code == "OK-1"
