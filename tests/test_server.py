"""HTTP-level tests for the FastAPI server, each against a fresh in-memory store."""

from __future__ import annotations

import unittest

from fastapi.testclient import TestClient

from inventory.db.database import Database, use_db
from server.app import app


class ServerTestBase(unittest.TestCase):
    def setUp(self):
        use_db(Database(":memory:"))
        self._client_cm = TestClient(app)
        self.client = self._client_cm.__enter__()

    def tearDown(self):
        # Lifespan shutdown closes and discards the database.
        self._client_cm.__exit__(None, None, None)


class TestStatusAndSeed(ServerTestBase):
    def test_status(self):
        resp = self.client.get("/api/status")
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["status"], "ok")
        self.assertTrue(data["database"]["initialized"])
        self.assertEqual(data["database"]["target"], "memory")

    def test_seed_is_idempotent(self):
        for _ in range(2):
            resp = self.client.get("/api/seed")
            self.assertEqual(resp.status_code, 200)
            self.assertEqual(resp.json()["message"], "Database seeded successfully")
        users = self.client.get("/api/users").json()
        self.assertEqual(users["count"], 1)


class TestProductEndpoints(ServerTestBase):
    def test_list_seeded_products(self):
        data = self.client.get("/api/products").json()
        self.assertEqual(data["count"], 3)
        self.assertEqual(data["products"][0]["sku"], "SKU001")

    def test_get_missing_product_404(self):
        self.assertEqual(self.client.get("/api/products/nope").status_code, 404)

    def test_create_then_conflict(self):
        payload = {
            "name": "Stapler", "sku": "SKU200", "quantity": 3, "reorder_level": 5,
            "price": 8.0, "cost": 3.0, "category": "Office",
        }
        resp = self.client.post("/api/products", json=payload)
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(self.client.post("/api/products", json=payload).status_code, 409)
        low = self.client.get("/api/products/low-stock").json()
        self.assertEqual([p["sku"] for p in low["products"]], ["SKU200"])

    def test_update_product(self):
        resp = self.client.patch("/api/products/prod2", json={"price": 27.5})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["price"], 27.5)


class TestSaleEndpoints(ServerTestBase):
    def test_record_sale_uses_product_price(self):
        resp = self.client.post(
            "/api/sales",
            json={"product_id": "prod1", "quantity": 2, "sales_person_id": "admin1",
                  "payment_mode": "POS"},
        )
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["total"], 100.0)
        product = self.client.get("/api/products/prod1").json()
        self.assertEqual(product["quantity"], 98)

    def test_insufficient_stock_409(self):
        resp = self.client.post(
            "/api/sales",
            json={"product_id": "prod1", "quantity": 1000, "sales_person_id": "admin1"},
        )
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(self.client.get("/api/sales").json()["count"], 0)

    def test_invalid_payment_mode_422(self):
        resp = self.client.post(
            "/api/sales",
            json={"product_id": "prod1", "quantity": 1, "sales_person_id": "admin1",
                  "payment_mode": "bitcoin"},
        )
        self.assertEqual(resp.status_code, 422)


class TestUserEndpoints(ServerTestBase):
    def test_login(self):
        ok = self.client.post("/api/login", json={"email": "admin@inventory.com", "password": "admin123"})
        self.assertEqual(ok.status_code, 200)
        self.assertNotIn("password", ok.json())
        bad = self.client.post("/api/login", json={"email": "admin@inventory.com", "password": "nope"})
        self.assertEqual(bad.status_code, 401)

    def test_create_user_and_expense(self):
        resp = self.client.post(
            "/api/users",
            json={"email": "mia@inventory.com", "name": "Mia", "password": "pw12345", "role": "manager"},
        )
        self.assertEqual(resp.status_code, 201)
        user_id = resp.json()["id"]
        resp = self.client.post(
            "/api/expenses",
            json={"description": "Shelving", "amount": 120.0, "category": "Facilities",
                  "created_by": user_id},
        )
        self.assertEqual(resp.status_code, 201)
        data = self.client.get("/api/expenses").json()
        self.assertEqual(data["count"], 1)
        self.assertEqual(data["total"], 120.0)


if __name__ == "__main__":
    unittest.main()
