"""
Category API tests.
"""

from backoffice.extensions import db
from backoffice.models import Category


class TestCategories:

    def test_create_and_list(self, client, staff_headers):
        resp = client.post("/api/categories", json={"name": "Shoes"}, headers=staff_headers)
        assert resp.status_code == 201
        assert resp.get_json()["category"]["name"] == "Shoes"

        rows = client.get("/api/categories", headers=staff_headers).get_json()
        assert rows == [{"id": resp.get_json()["category"]["id"], "name": "Shoes"}]

    def test_duplicate_rejected(self, client, staff_headers):
        client.post("/api/categories", json={"name": "Shoes"}, headers=staff_headers)
        resp = client.post("/api/categories", json={"name": "Shoes"}, headers=staff_headers)

        assert resp.status_code == 400
        assert resp.get_json() == {"success": False, "error": "Category already exists"}
        assert db.session.query(Category).count() == 1

    def test_names_are_case_sensitive(self, client, staff_headers):
        client.post("/api/categories", json={"name": "Shoes"}, headers=staff_headers)
        resp = client.post("/api/categories", json={"name": "shoes"}, headers=staff_headers)
        assert resp.status_code == 201
        assert db.session.query(Category).count() == 2

    def test_blank_name_rejected(self, client, staff_headers):
        resp = client.post("/api/categories", json={"name": "  "}, headers=staff_headers)
        assert resp.status_code == 400
        assert db.session.query(Category).count() == 0

    def test_delete_by_query_and_body(self, client, staff_headers):
        a = client.post("/api/categories", json={"name": "A"}, headers=staff_headers).get_json()["category"]
        b = client.post("/api/categories", json={"name": "B"}, headers=staff_headers).get_json()["category"]

        assert client.delete(f"/api/categories?id={a['id']}", headers=staff_headers).status_code == 200
        assert client.delete("/api/categories", json={"id": b["id"]}, headers=staff_headers).status_code == 200
        assert db.session.query(Category).count() == 0

    def test_delete_unknown(self, client, staff_headers):
        resp = client.delete("/api/categories?id=5", headers=staff_headers)
        assert resp.status_code == 404
        assert resp.get_json()["error"] == "Category not found"

    def test_delete_without_id(self, client, staff_headers):
        resp = client.delete("/api/categories", headers=staff_headers)
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Category id is required"

    def test_put_not_allowed(self, client, staff_headers):
        resp = client.put("/api/categories", json={"id": 1, "name": "X"}, headers=staff_headers)
        assert resp.status_code == 405
