"""
API tests for the purchase order HTTP endpoints.
"""
import pytest
from fastapi.testclient import TestClient

from api.app import create_app

BOLT = {"itemName": "Bolt", "category": "Hardware", "quantity": 100, "supplier": "Acme"}


@pytest.fixture
def client(service) -> TestClient:
    return TestClient(create_app(service))


def _create(client: TestClient, **overrides) -> dict:
    response = client.post("/purchase-orders", json={**BOLT, **overrides})
    assert response.status_code == 201
    return response.json()["purchaseOrder"]


@pytest.mark.api
class TestPurchaseOrderAPI:
    """Tests for the /purchase-orders routes."""

    def test_health(self, client, db_path):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "dbPath": str(db_path), "dbExists": False}

    def test_create_returns_201(self, client):
        response = client.post("/purchase-orders", json=BOLT)

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Purchase order created successfully"
        assert body["purchaseOrder"] == {**BOLT, "id": "po-1", "status": "Pending"}

    def test_create_missing_field_returns_400(self, client, db_path):
        response = client.post("/purchase-orders", json={"itemName": "Bolt", "quantity": 5})

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "message": "All fields (itemName, category, quantity, supplier) are required",
        }
        assert not db_path.exists()

    def test_create_without_body_returns_400(self, client):
        response = client.post("/purchase-orders")
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_create_non_object_body_returns_400(self, client):
        response = client.post("/purchase-orders", json=["Bolt"])
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_list(self, client):
        first = _create(client)
        second = _create(client, itemName="Nut")

        response = client.get("/purchase-orders")

        assert response.status_code == 200
        assert response.json() == {"success": True, "purchaseOrders": [first, second]}

    def test_list_empty(self, client):
        assert client.get("/purchase-orders").json() == {"success": True, "purchaseOrders": []}

    def test_get_by_id(self, client):
        order = _create(client)
        response = client.get(f"/purchase-orders/{order['id']}")
        assert response.status_code == 200
        assert response.json() == {"success": True, "purchaseOrder": order}

    def test_get_missing_returns_404(self, client):
        response = client.get("/purchase-orders/nope")
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Order not found"}

    def test_update(self, client):
        order = _create(client)

        response = client.put(f"/purchase-orders/{order['id']}", json={"status": "Approved"})

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Purchase order updated successfully"
        assert body["purchaseOrder"] == {**order, "status": "Approved"}

    def test_update_missing_returns_404(self, client):
        response = client.put("/purchase-orders/nope", json={"status": "Approved"})
        assert response.status_code == 404
        assert response.json()["success"] is False

    def test_update_invalid_status_returns_400(self, client):
        order = _create(client)
        response = client.put(f"/purchase-orders/{order['id']}", json={"status": "Lost"})
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_delete(self, client):
        keep = _create(client, itemName="Nut")
        order = _create(client)

        response = client.delete(f"/purchase-orders/{order['id']}")

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Purchase order deleted"}
        assert client.get(f"/purchase-orders/{order['id']}").status_code == 404
        assert client.get("/purchase-orders").json()["purchaseOrders"] == [keep]

    def test_delete_missing_returns_404_with_failure(self, client):
        """Test a missing id reports success=false alongside the 404."""
        response = client.delete("/purchase-orders/nope")
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Order not found"}

    def test_search(self, client):
        bolt = _create(client)
        _create(client, itemName="Paper", category="Stationery", supplier="OfficeWorks")

        response = client.get("/purchase-orders/search", params={"itemName": "bolt"})

        assert response.status_code == 200
        assert response.json() == {"success": True, "purchaseOrders": [bolt]}

    def test_search_multiple_filters_and_case(self, client):
        _create(client)
        paper = _create(client, itemName="Paper", category="Stationery", supplier="OfficeWorks")

        response = client.get(
            "/purchase-orders/search",
            params={"status": "pending", "supplier": "WORKS"},
        )
        assert response.json()["purchaseOrders"] == [paper]

    def test_search_without_filters_returns_all(self, client):
        orders = [_create(client), _create(client, itemName="Nut")]
        response = client.get("/purchase-orders/search")
        assert response.json()["purchaseOrders"] == orders

    def test_storage_failure_returns_500(self, client, service, monkeypatch):
        from orders.errors import StorageError

        def fail(db):
            raise StorageError("Could not write database file")

        monkeypatch.setattr(service.store, "save", fail)
        response = client.post("/purchase-orders", json=BOLT)

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Could not write database file"}

    def test_scenario(self, client):
        """Test create → search → update → delete → get end to end."""
        created = client.post("/purchase-orders", json=BOLT)
        assert created.status_code == 201
        order = created.json()["purchaseOrder"]
        assert order["status"] == "Pending"

        found = client.get("/purchase-orders/search", params={"itemName": "bolt"}).json()
        assert found["purchaseOrders"] == [order]

        updated = client.put(f"/purchase-orders/{order['id']}", json={"status": "Approved"}).json()
        assert updated["purchaseOrder"]["status"] == "Approved"
        assert updated["purchaseOrder"]["itemName"] == "Bolt"

        assert client.delete(f"/purchase-orders/{order['id']}").json()["success"] is True
        assert client.get(f"/purchase-orders/{order['id']}").status_code == 404
