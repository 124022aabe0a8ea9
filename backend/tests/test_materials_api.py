"""Tests for the material inventory endpoints."""

import pytest


def _material(code="MAT-100", name="Steel Rod", **extra):
    body = {
        "code": code,
        "name": name,
        "category": "Metal",
        "department": "Fabrication",
        "quantity": 10,
        "unit": "pcs",
        "price": "12.50",
    }
    body.update(extra)
    return body


@pytest.fixture()
def material(client) -> dict:
    resp = client.post("/materials", json=_material())
    assert resp.status_code == 201, resp.text
    return resp.json()


class TestCreate:

    def test_create(self, material):
        assert material["code"] == "MAT-100"
        assert material["quantity"] == 10
        assert float(material["price"]) == 12.5

    def test_duplicate_code(self, client, material):
        resp = client.post("/materials", json=_material(name="Other"))
        assert resp.status_code == 400
        assert resp.json()["details"]["field"] == "code"

    def test_blank_name(self, client):
        assert client.post("/materials", json=_material(name="  ")).status_code == 422


class TestSearch:

    def test_filters(self, client):
        client.post("/materials", json=_material("MAT-1", "Copper Wire", department="Electrical"))
        client.post("/materials", json=_material("MAT-2", "Steel Plate", category="Sheet"))
        client.post("/materials", json=_material("MAT-3", "Paint", category="Chemical"))

        assert len(client.get("/materials").json()) == 3
        electrical = client.get("/materials", params={"department": "Electrical"}).json()
        assert [m["code"] for m in electrical] == ["MAT-1"]
        sheet = client.get("/materials", params={"category": "Sheet"}).json()
        assert [m["code"] for m in sheet] == ["MAT-2"]
        steel = client.get("/materials", params={"name": "STEEL"}).json()
        assert [m["code"] for m in steel] == ["MAT-2"]

    def test_get_one(self, client, material):
        resp = client.get(f"/materials/{material['id']}")
        assert resp.status_code == 200
        assert resp.json()["name"] == "Steel Rod"

    def test_get_missing(self, client):
        resp = client.get("/materials/999")
        assert resp.status_code == 404
        assert resp.json()["error"] == "MATERIAL_NOT_FOUND"


class TestUpdate:

    def test_partial_update(self, client, material):
        resp = client.put(f"/materials/{material['id']}", json={"quantity": 3})
        assert resp.status_code == 200
        body = resp.json()
        assert body["quantity"] == 3
        assert body["name"] == "Steel Rod"

    def test_blank_code_rejected(self, client, material):
        resp = client.put(f"/materials/{material['id']}", json={"code": ""})
        assert resp.status_code == 400

    def test_code_collision(self, client, material):
        other = client.post("/materials", json=_material("MAT-200", "Bolt")).json()
        resp = client.put(f"/materials/{other['id']}", json={"code": "MAT-100"})
        assert resp.status_code == 400

    def test_null_quantity_rejected(self, client, material):
        resp = client.put(f"/materials/{material['id']}", json={"quantity": None})
        assert resp.status_code == 400
