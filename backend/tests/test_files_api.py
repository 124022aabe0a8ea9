"""Tests for the file upload and placement endpoints."""

from tests.conftest import make_folder, make_upload


class TestUpload:

    def test_upload_to_root(self, client):
        body = make_upload(client, "notes.txt", b"hello world")
        assert body["originalName"] == "notes.txt"
        assert body["fileSize"] == 11
        assert body["mimeType"] == "text/plain"
        assert body["category"] == "general"
        assert body["folderId"] is None
        assert body["order"] == 0

    def test_upload_into_folder_with_metadata(self, client):
        folder = make_folder(client, "Lab")
        body = make_upload(
            client, "results.csv", b"a,b\n1,2\n",
            folderId=folder["id"], category="lab", description="Run 4",
        )
        assert body["folderId"] == folder["id"]
        assert body["category"] == "lab"
        assert body["description"] == "Run 4"

    def test_null_folder_id_means_root(self, client):
        body = make_upload(client, folderId="null")
        assert body["folderId"] is None

    def test_invalid_folder_id(self, client):
        resp = client.post(
            "/files/upload",
            files={"file": ("a.txt", b"x", "text/plain")},
            data={"folderId": "abc"},
        )
        assert resp.status_code == 400

    def test_unknown_folder(self, client):
        resp = client.post(
            "/files/upload",
            files={"file": ("a.txt", b"x", "text/plain")},
            data={"folderId": "8888"},
        )
        assert resp.status_code == 404

    def test_disallowed_extension(self, client):
        resp = client.post(
            "/files/upload",
            files={"file": ("run.exe", b"MZ", "application/octet-stream")},
        )
        assert resp.status_code == 400
        assert resp.json()["details"]["field"] == "file"


class TestBrowse:

    def test_list_and_filters(self, client):
        folder = make_folder(client, "Docs")
        make_upload(client, "inside.txt", folderId=folder["id"], category="lab")
        make_upload(client, "outside.txt")

        assert len(client.get("/files").json()) == 2

        inside = client.get("/files", params={"folderId": folder["id"]}).json()
        assert [f["originalName"] for f in inside] == ["inside.txt"]
        assert inside[0]["folder"] == {"id": folder["id"], "name": "Docs"}

        root = client.get("/files", params={"folderId": "root"}).json()
        assert [f["originalName"] for f in root] == ["outside.txt"]

        lab = client.get("/files", params={"category": "lab"}).json()
        assert [f["originalName"] for f in lab] == ["inside.txt"]

        found = client.get("/files", params={"search": "OUTSIDE"}).json()
        assert [f["originalName"] for f in found] == ["outside.txt"]

    def test_stats(self, client):
        make_upload(client, "a.txt", b"1234")
        make_upload(client, "b.txt", b"12", category="lab")

        stats = client.get("/files/stats").json()
        assert stats["totalFiles"] == 2
        assert stats["totalSize"] == 6
        assert {c["category"]: c["count"] for c in stats["categories"]} == {"general": 1, "lab": 1}

    def test_get_missing(self, client):
        resp = client.get("/files/5150")
        assert resp.status_code == 404
        assert resp.json()["error"] == "FILE_NOT_FOUND"

    def test_download(self, client):
        body = make_upload(client, "report.txt", b"contents")
        resp = client.get(f"/files/{body['id']}/download")
        assert resp.status_code == 200
        assert resp.content == b"contents"
        assert "report.txt" in resp.headers["content-disposition"]


class TestModify:

    def test_update(self, client):
        body = make_upload(client)
        resp = client.put(f"/files/{body['id']}", json={"description": "Edited", "category": "misc"})
        assert resp.status_code == 200
        assert resp.json()["description"] == "Edited"
        assert resp.json()["category"] == "misc"

    def test_move(self, client):
        folder = make_folder(client, "Target")
        first = make_upload(client, "first.txt", folderId=folder["id"])
        mover = make_upload(client, "mover.txt")

        resp = client.put(f"/files/{mover['id']}/move", json={"folderId": folder["id"], "order": 0})
        assert resp.status_code == 200
        assert resp.json()["folderId"] == folder["id"]
        assert resp.json()["order"] == 0

        files = client.get(f"/folders/{folder['id']}").json()["files"]
        assert [(f["id"], f["order"]) for f in files] == [(mover["id"], 0), (first["id"], 1)]

    def test_delete(self, client):
        body = make_upload(client)
        assert client.delete(f"/files/{body['id']}").status_code == 204
        assert client.get(f"/files/{body['id']}").status_code == 404
        assert client.delete(f"/files/{body['id']}").status_code == 404
