# tests/test_api.py
import json
from fastapi.testclient import TestClient

from cafe_stock.database import MemorySlot
from cafe_stock.main import create_app
from cafe_stock.store import ProductStore

def fresh_client(slot=None):
    store = ProductStore(slot if slot is not None else MemorySlot())
    return TestClient(create_app(store))

def test_add_product_and_dashboard():
    client = fresh_client()
    r = client.post("/products", json={"name": "Cappuccino", "description": "Classic Italian coffee drink",
                                       "category": "Beverages", "price": "3.50", "quantity": "25"})
    assert r.status_code == 201
    body = r.json()
    assert body["product"]["lowStockThreshold"] == 10
    assert body["dashboard"] == {"totalProducts": 1, "lowStockCount": 0, "totalValue": 87.5}

    assert client.get("/dashboard").json() == body["dashboard"]
    listed = client.get("/products").json()
    assert [p["name"] for p in listed] == ["Cappuccino"]

def test_invalid_form_is_rejected_with_field_errors():
    client = fresh_client()
    r = client.post("/products", json={"name": "Espresso", "price": "abc", "quantity": "10"})
    assert r.status_code == 422
    body = r.json()
    assert body["code"] == "INVALID_PRODUCT_DATA"
    assert [e["field"] for e in body["errors"]] == ["price"]
    assert client.get("/products").json() == []

def test_edit_keeps_position():
    client = fresh_client()
    ids = [
        client.post("/products", json={"name": n, "price": 1, "quantity": 1}).json()["product"]["id"]
        for n in ("A", "B", "C")
    ]
    r = client.put(f"/products/{ids[1]}", json={"name": "B2", "price": "2.00", "quantity": "4"})
    assert r.status_code == 200
    assert r.json()["product"]["id"] == ids[1]
    assert [p["name"] for p in client.get("/products").json()] == ["A", "B2", "C"]

def test_put_unknown_id_appends():
    client = fresh_client()
    r = client.put("/products/ghost", json={"name": "Tea", "price": 2, "quantity": 40})
    assert r.status_code == 200
    assert r.json()["product"]["id"] != "ghost"
    assert len(client.get("/products").json()) == 1

def test_get_unknown_product_is_404():
    client = fresh_client()
    r = client.get("/products/nope")
    assert r.status_code == 404
    assert r.json()["code"] == "PRODUCT_NOT_FOUND"

def test_delete_is_idempotent():
    client = fresh_client()
    pid = client.post("/products", json={"name": "Chocolate Cake", "price": 4.75, "quantity": 8}).json()["product"]["id"]
    assert client.get("/dashboard").json()["lowStockCount"] == 1

    first = client.delete(f"/products/{pid}")
    second = client.delete(f"/products/{pid}")
    assert first.json()["removed"] is True
    assert second.status_code == 200
    assert second.json() == {"removed": False,
                             "dashboard": {"totalProducts": 0, "lowStockCount": 0, "totalValue": 0.0}}

def test_export_download():
    client = fresh_client()
    client.post("/sample-data")
    r = client.get("/export")
    assert r.status_code == 200
    assert "wings-cafe-data.json" in r.headers["content-disposition"]
    exported = json.loads(r.text)
    assert [p["name"] for p in exported] == ["Cappuccino", "Chocolate Cake", "Turkey Sandwich"]

def test_sample_data_only_seeds_empty_catalog():
    client = fresh_client()
    first = client.post("/sample-data").json()
    assert first["seeded"] is True
    assert len(first["products"]) == 3
    again = client.post("/sample-data").json()
    assert again["seeded"] is False

def test_state_survives_new_app_on_same_slot():
    slot = MemorySlot()
    client = fresh_client(slot)
    client.post("/products", json={"name": "Cappuccino", "price": 3.5, "quantity": 25})
    assert fresh_client(slot).get("/products").json() == client.get("/products").json()

class FullSlot(MemorySlot):
    def set(self, key, value):
        raise OSError("No space left on device")

def test_write_failure_is_503():
    client = fresh_client(FullSlot())
    r = client.post("/products", json={"name": "Cappuccino", "price": 3.5, "quantity": 25})
    assert r.status_code == 503
    assert r.json()["code"] == "PERSISTENCE_FAILED"
    assert client.get("/products").json() == []

def test_oversized_values_are_422_and_dashboard_keeps_working():
    client = fresh_client()
    r = client.post("/products", json={"name": "Beans", "price": "1e308", "quantity": "10"})
    assert r.status_code == 422
    r = client.post("/products", json={"name": "Beans", "price": "3.50", "quantity": "1" + "0" * 400})
    assert r.status_code == 422
    assert client.get("/products").json() == []
    assert client.get("/dashboard").status_code == 200

def test_module_level_app_is_built_from_settings(monkeypatch, tmp_path):
    import cafe_stock.main as main_module

    data_file = tmp_path / "storage.json"
    monkeypatch.setenv("CAFE_STOCK_DATA_FILE", str(data_file))
    main_module.__dict__.pop("app", None)
    try:
        from cafe_stock.main import app
        client = TestClient(app)
        assert client.post("/products", json={"name": "Tea", "price": 2, "quantity": 40}).status_code == 201
        assert main_module.app is app
        assert data_file.exists()
    finally:
        main_module.__dict__.pop("app", None)
