# tests/test_routes.py

import pytest
from fastapi.testclient import TestClient

from procurement_api.main import app
from procurement_api.core.database import get_db


@pytest.fixture
def client(session_factory):
    """
    Test client whose requests use the in-memory test database
    """
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_root(client):
    """Test the root endpoint"""
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["app_name"] == "Procurement API"


def test_correlation_id_is_echoed(client):
    """Test that the correlation id header is reused or generated"""
    response = client.get("/", headers={"X-Correlation-Id": "abc-123"})
    assert response.headers["X-Correlation-Id"] == "abc-123"

    response = client.get("/")
    assert response.headers["X-Correlation-Id"]


def test_submit_adjudication_flow(client, seed):
    """Test submitting an adjudication and reading the resulting delivery"""
    # Setup
    data = seed(lines={"P1": 10})
    p1_id = data.products["P1"].id
    payload = {
        "licitation_id": data.licitation.id,
        "quotation_id": data.quotation.id,
        "items": [
            {"product_id": p1_id, "quantity": 10, "unit_price": 100},
            {"product_id": 9999, "quantity": 1, "unit_price": 5},
        ],
    }

    # Call the endpoint
    response = client.post("/api/adjudications/", json=payload)

    # Verify the result
    assert response.status_code == 201
    body = response.json()
    adjudication = body["adjudication"]
    assert adjudication["status"] == "total"
    assert adjudication["total_quantity"] == 11
    assert adjudication["total_price_without_iva"] == pytest.approx(1005)
    assert {(skipped["kind"], skipped["product_id"]) for skipped in body["skipped_items"]} == {("awarded", 9999)}

    response = client.get(f"/api/licitations/{data.licitation.id}")
    assert response.json()["status"] == "Total Adjudication"

    response = client.get(f"/api/deliveries/licitation/{data.licitation.id}")
    assert response.status_code == 200
    delivery = response.json()
    assert delivery["status"] == "pendiente"
    assert len(delivery["items"]) == 2

    # Deliver the P1 item
    item_id = next(item["id"] for item in delivery["items"] if item["product_id"] == p1_id)
    response = client.patch(f"/api/deliveries/{delivery['id']}/items/{item_id}", json={"status": "entregado"})
    assert response.status_code == 200
    assert response.json()["actual_date"] is not None

    response = client.get(f"/api/deliveries/{delivery['id']}")
    assert response.json()["status"] == "parcial"


def test_submit_adjudication_unknown_licitation(client, seed):
    """Test that an unknown licitation is a 404"""
    data = seed()
    response = client.post("/api/adjudications/", json={"licitation_id": 9999, "quotation_id": data.quotation.id})
    assert response.status_code == 404
    assert response.json()["detail"] == "Licitation with ID 9999 not found"


def test_submit_adjudication_rejects_invalid_quantity(client, seed):
    """Test that non-positive quantities are rejected by validation"""
    data = seed()
    payload = {
        "licitation_id": data.licitation.id,
        "quotation_id": data.quotation.id,
        "items": [{"product_id": data.products["P1"].id, "quantity": 0, "unit_price": 100}],
    }
    response = client.post("/api/adjudications/", json=payload)
    assert response.status_code == 422


def test_adjudication_item_endpoints(client, seed):
    """Test adding and removing adjudication items"""
    # Setup
    data = seed(lines={"P1": 10, "P2": 5})
    response = client.post("/api/adjudications/", json={
        "licitation_id": data.licitation.id,
        "quotation_id": data.quotation.id,
        "items": [{"product_id": data.products["P1"].id, "quantity": 10, "unit_price": 100}],
    })
    adjudication_id = response.json()["adjudication"]["id"]

    # Add an item
    response = client.patch(
        f"/api/adjudications/{adjudication_id}/items",
        json={"product_id": data.products["P2"].id, "quantity": 5, "unit_price": 20}
    )
    assert response.status_code == 200
    assert len(response.json()["items"]) == 2
    assert response.json()["total_price_without_iva"] == pytest.approx(1100)

    # Remove it again
    item_id = response.json()["items"][1]["id"]
    response = client.delete(f"/api/adjudications/{adjudication_id}/items/{item_id}")
    assert response.status_code == 200
    assert response.json()["total_quantity"] == 10

    # Filter by licitation
    response = client.get("/api/adjudications/", params={"licitation_id": data.licitation.id})
    assert [adjudication["id"] for adjudication in response.json()] == [adjudication_id]

    # Delete the adjudication
    response = client.delete(f"/api/adjudications/{adjudication_id}")
    assert response.status_code == 204
    response = client.get(f"/api/adjudications/{adjudication_id}")
    assert response.status_code == 404


def test_update_awarded_quantity_endpoint(client, seed):
    """Test overwriting the awarded quantity of a quotation item"""
    data = seed(quoted={"P1": 10})
    item_id = data.quotation_items["P1"].id

    response = client.patch(f"/api/adjudications/quotation-items/{item_id}/awarded-quantity", json={"awarded_quantity": 4})

    assert response.status_code == 200
    assert response.json()["awarded_quantity"] == 4
    assert response.json()["award_status"] == "adjudicado_parcial"

    response = client.patch("/api/adjudications/quotation-items/9999/awarded-quantity", json={"awarded_quantity": 4})
    assert response.status_code == 404


def test_create_licitation_endpoint(client, seed):
    """Test creating a licitation and recomputing its status"""
    data = seed()
    payload = {
        "start_date": "2024-06-01",
        "deadline_date": "2024-05-01",
        "client_id": data.client.id,
        "call_number": "2239-14-LP24",
        "internal_number": "LIC-2024-044",
        "products": [{"product_id": data.products["P1"].id, "quantity": 3}],
    }

    # Invalid date range
    response = client.post("/api/licitations/", json=payload)
    assert response.status_code == 400

    payload["deadline_date"] = "2024-07-01"
    response = client.post("/api/licitations/", json=payload)
    assert response.status_code == 201
    licitation_id = response.json()["id"]
    assert response.json()["status"] == "Pending"

    response = client.post(f"/api/licitations/{licitation_id}/recompute-status")
    assert response.json() == {"licitation_id": licitation_id, "status": "Pending"}


def test_quotation_endpoints(client, seed):
    """Test creating and reading a quotation"""
    data = seed()
    payload = {
        "quotation_identifier": "COT-2024-777",
        "licitation_id": data.licitation.id,
        "items": [{"product_name": "Guantes", "sku": "GN-L", "quantity": 2, "price_without_iva": 100}],
    }

    response = client.post("/api/quotations/", json=payload)
    assert response.status_code == 201
    quotation_id = response.json()["id"]

    response = client.post("/api/quotations/", json=payload)
    assert response.status_code == 409

    response = client.get(f"/api/quotations/{quotation_id}")
    assert response.json()["items"][0]["award_status"] == "en_espera"


def test_invoice_endpoints(client, seed):
    """Test adding and listing invoices of a delivery"""
    data = seed(lines={"P1": 10})
    client.post("/api/adjudications/", json={
        "licitation_id": data.licitation.id,
        "quotation_id": data.quotation.id,
        "items": [{"product_id": data.products["P1"].id, "quantity": 10, "unit_price": 100}],
    })
    delivery_id = client.get(f"/api/deliveries/licitation/{data.licitation.id}").json()["id"]

    response = client.post(f"/api/deliveries/{delivery_id}/invoices", json={"invoice_number": "F-1", "issue_date": "2024-06-10"})
    assert response.status_code == 201

    response = client.get(f"/api/deliveries/{delivery_id}/invoices")
    assert [invoice["invoice_number"] for invoice in response.json()] == ["F-1"]

    response = client.get(f"/api/deliveries/{delivery_id}/items")
    assert len(response.json()) == 1

    response = client.get("/api/deliveries/")
    assert [delivery["id"] for delivery in response.json()] == [delivery_id]
