"""HTTP tests for the generic table editor."""


def _create_inventory(client):
    resp = client.post("/tables", json={
        "tableName": "inventory",
        "columns": [
            {"name": "id", "type": "integer", "nullable": False, "primaryKey": True},
            {"name": "label", "type": "text", "nullable": False},
            {"name": "count", "type": "integer"},
        ],
    })
    assert resp.status_code == 201, resp.text
    return resp.json()


class TestTablesAPI:

    def test_list_includes_service_tables(self, client):
        resp = client.get("/tables")
        assert resp.status_code == 200
        assert {"folders", "files", "materials", "users"} <= set(resp.json())

    def test_create_table_returns_columns(self, client):
        body = _create_inventory(client)
        assert body["tableName"] == "inventory"
        assert [c["name"] for c in body["columns"]] == ["id", "label", "count"]
        assert body["columns"][2]["sqlType"] == "integer"
        assert "inventory" in client.get("/tables").json()

    def test_create_table_bad_type(self, client):
        resp = client.post("/tables", json={
            "tableName": "broken",
            "columns": [{"name": "x", "type": "money"}],
        })
        assert resp.status_code == 400
        assert resp.json()["error"] == "VALIDATION_ERROR"
        assert "broken" not in client.get("/tables").json()

    def test_columns_of_unknown_table(self, client):
        resp = client.get("/tables/nope/columns")
        assert resp.status_code == 404
        assert resp.json()["error"] == "TABLE_NOT_FOUND"

    def test_insert_then_browse(self, client):
        _create_inventory(client)

        resp = client.post("/tables/inventory/rows", json={
            "values": {"id": 7, "label": "Gloves", "count": "40", "unknown": 1},
        })
        assert resp.status_code == 201
        assert resp.json() == {"affectedRows": 1}

        rows = client.get("/tables/inventory/rows").json()
        assert len(rows) == 1
        assert rows[0]["label"] == "Gloves"
        assert rows[0]["count"] == 40

    def test_insert_nothing_usable(self, client):
        _create_inventory(client)
        resp = client.post("/tables/inventory/rows", json={"values": {"bogus": 1}})
        assert resp.status_code == 400

    def test_update_row(self, client):
        _create_inventory(client)
        client.post("/tables/inventory/rows", json={"values": {"label": "Gloves"}})
        row = client.get("/tables/inventory/rows").json()[0]

        resp = client.put("/tables/inventory/rows", json={
            "original": row,
            "values": {"label": "Masks", "count": 5},
        })
        assert resp.status_code == 200
        assert resp.json()["affectedRows"] == 1

        updated = client.get("/tables/inventory/rows").json()[0]
        assert updated["id"] == row["id"]
        assert updated["label"] == "Masks"
        assert updated["count"] == 5

    def test_update_without_primary_key_value(self, client):
        _create_inventory(client)
        resp = client.put("/tables/inventory/rows", json={
            "original": {"label": "Gloves"},
            "values": {"label": "Masks"},
        })
        assert resp.status_code == 400
        assert resp.json()["message"] == "Primary key missing"

    def test_rows_of_unknown_table(self, client):
        assert client.get("/tables/nope/rows").status_code == 404
        assert client.post("/tables/nope/rows", json={"values": {"a": 1}}).status_code == 404
