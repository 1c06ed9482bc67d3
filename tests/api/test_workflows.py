# Back-office API Tests - End-to-end Workflows
#
# Tests for:
# - Product lifecycle (create, merge update, delete twice)
# - Category uniqueness
# - Invoice status filter
# - Audit trail entries written by each mutation

import uuid

import pytest

from tests.conftest import APIClient, STAFF, assert_response


def _unique(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


class TestProductLifecycle:

    @pytest.mark.smoke
    @pytest.mark.catalog
    def test_create_update_delete(self, staff_client: APIClient):
        name = _unique("Widget")
        response = staff_client.post("/api/products", json={
            "name": name, "description": "Blue", "price": "9.5", "stock": "3", "category": "Tools",
        })
        assert_response(
            response, 201,
            scenario="Create product with string-typed numbers",
            code_location="backend/backoffice/routes/products.py:create_product_route"
        )
        product = response.json()["product"]
        assert product["price"] == 9.5
        assert product["stock"] == 3

        response = staff_client.put("/api/products", json={"id": product["id"], "stock": 7})
        assert_response(
            response, 200,
            scenario="Update only stock",
            code_location="backend/backoffice/routes/products.py:update_product_route"
        )
        updated = response.json()["product"]
        assert (updated["stock"], updated["description"], updated["price"]) == (7, "Blue", 9.5)

        assert_response(
            staff_client.delete("/api/products", params={"id": product["id"]}), 200,
            scenario="Delete product",
            code_location="backend/backoffice/services/products_service.py:delete_product"
        )
        assert_response(
            staff_client.delete("/api/products", params={"id": product["id"]}), 404,
            scenario="Delete same product again",
            code_location="backend/backoffice/services/products_service.py:delete_product"
        )

    @pytest.mark.catalog
    def test_missing_required_field(self, staff_client: APIClient):
        name = _unique("NoStock")
        response = staff_client.post("/api/products", json={"name": name, "description": "x", "price": 1})
        assert_response(
            response, 400,
            scenario="Create product without stock",
            code_location="backend/backoffice/validation.py:validate_payload",
            expected_body_contains="stock"
        )
        names = [p["name"] for p in staff_client.get("/api/products").json()]
        assert name not in names


class TestCategories:

    @pytest.mark.catalog
    def test_duplicate_name_rejected(self, staff_client: APIClient):
        name = _unique("Shoes")
        assert_response(
            staff_client.post("/api/categories", json={"name": name}), 201,
            scenario="Create category",
            code_location="backend/backoffice/routes/categories.py:create_category_route"
        )
        assert_response(
            staff_client.post("/api/categories", json={"name": name}), 400,
            scenario="Create the same category again",
            code_location="backend/backoffice/services/categories_service.py:create_category",
            expected_body_contains="Category already exists"
        )
        names = [c["name"] for c in staff_client.get("/api/categories").json()]
        assert names.count(name) == 1


class TestAccounting:

    @pytest.mark.accounting
    def test_invoice_status_filter(self, staff_client: APIClient):
        customer = _unique("Customer")
        for status in ("paid", "pending"):
            assert_response(
                staff_client.post("/api/invoices", json={
                    "customerName": customer,
                    "totalAmount": 10,
                    "status": status,
                    "items": [{"description": "Widget", "quantity": 1, "unitPrice": 10, "total": 10}],
                }), 201,
                scenario=f"Create {status} invoice",
                code_location="backend/backoffice/routes/invoices.py:create_invoice_route"
            )

        paid = staff_client.get("/api/invoices", params={"status": "paid"}).json()
        assert all(inv["status"] == "paid" for inv in paid)
        assert [inv["customerName"] for inv in paid].count(customer) == 1

    @pytest.mark.accounting
    def test_mutation_is_audited(self, client: APIClient):
        client.login(*STAFF)
        name = _unique("Audited")
        client.post("/api/categories", json={"name": name})

        client.login("supervisor@store.com", "super123")
        response = client.get("/api/transactions")
        assert_response(
            response, 200,
            scenario="Supervisor reads the audit trail",
            code_location="backend/backoffice/routes/transactions.py:list_transactions"
        )
        newest = response.json()[0]
        assert newest["action"] == "Category Added"
        assert name in newest["description"]
        assert newest["username"] == "Staff Member"
