# tests/test_delivery_services.py

import datetime
from types import SimpleNamespace
import pytest

from procurement_api.core.exceptions import NotFoundError
from procurement_api.modules.deliveries import models, schemas, services
from procurement_api.modules.deliveries.models import DeliveryItemStatus, DeliveryStatus, compute_delivery_status


def adjudication_for(data, *items, adjudication_id=1):
    """Adjudication-shaped object for the synchronizer"""
    return SimpleNamespace(
        id=adjudication_id,
        licitation_id=data.licitation.id,
        items=[
            SimpleNamespace(product_id=product_id, product_name=product_name, quantity=quantity)
            for product_id, product_name, quantity in items
        ],
    )


@pytest.fixture
def delivery(db, seed):
    data = seed()
    p1 = data.products["P1"]
    services.sync_from_adjudication(db, adjudication_for(data, (p1.id, None, 10)))
    db.commit()
    return services.get_delivery_by_licitation(db, data.licitation.id)


def test_compute_delivery_status():
    """Test the status of a delivery from its item statuses"""
    assert compute_delivery_status([]) == DeliveryStatus.PENDING
    assert compute_delivery_status(["pendiente_entrega", "en_camino"]) == DeliveryStatus.PENDING
    assert compute_delivery_status(["entregado", "en_camino"]) == DeliveryStatus.PARTIAL
    assert compute_delivery_status(["entregado", "entregado"]) == DeliveryStatus.COMPLETED
    assert compute_delivery_status(["entregado", "problema_entrega"]) == DeliveryStatus.ISSUE


def test_sync_creates_delivery_and_items(db, seed):
    """Test that the first sync creates the delivery with pending items"""
    # Setup
    data = seed()
    p1, p2 = data.products["P1"], data.products["P2"]

    # Call the service function
    delivery = services.sync_from_adjudication(
        db, adjudication_for(data, (p1.id, None, 10), (p2.id, "Mascarilla KN95", 5), adjudication_id=7)
    )

    # Verify the result
    assert delivery.licitation_id == data.licitation.id
    assert len(delivery.items) == 2
    first, second = delivery.items
    assert first.product_code == p1.code
    assert first.product_name == p1.name
    # P2 has no catalog code, the submitted name is used
    assert second.product_code == "Mascarilla KN95"
    assert second.product_name == "Mascarilla KN95"
    assert all(item.status == DeliveryItemStatus.PENDING.value for item in delivery.items)
    assert all(item.estimated_date == datetime.date.today() + datetime.timedelta(days=7) for item in delivery.items)
    assert delivery.status == DeliveryStatus.PENDING


def test_sync_merges_by_product(db, seed):
    """Test that syncing the same product twice keeps one item with the latest quantity"""
    # Setup
    data = seed()
    p1 = data.products["P1"]
    services.sync_from_adjudication(db, adjudication_for(data, (p1.id, None, 10)))

    # Call the service function again
    delivery = services.sync_from_adjudication(db, adjudication_for(data, (p1.id, None, 4)))
    db.commit()

    # Verify the result
    items = services.get_delivery_items(db, delivery.id)
    assert len(items) == 1
    assert items[0].quantity == 4
    assert db.query(models.Delivery).count() == 1


def test_sync_item_without_product(db, seed):
    """Test that items without a product always create a new delivery item"""
    # Setup
    data = seed()

    # Call the service function twice
    services.sync_from_adjudication(db, adjudication_for(data, (None, None, 1), adjudication_id=12))
    delivery = services.sync_from_adjudication(db, adjudication_for(data, (None, None, 1), adjudication_id=12))

    # Verify the result
    assert len(delivery.items) == 2
    assert delivery.items[0].product_code == "ADJ-12-1"
    assert delivery.items[0].product_name == "Unnamed product"


def test_mark_item_delivered_stamps_actual_date(db, delivery):
    """Test that delivering an item without a date uses today"""
    # Setup
    item = delivery.items[0]

    # Call the service function
    updated = services.update_item_status(
        db, delivery.id, item.id, schemas.DeliveryItemUpdate(status=DeliveryItemStatus.DELIVERED)
    )

    # Verify the result
    assert updated.status == DeliveryItemStatus.DELIVERED.value
    assert updated.actual_date == datetime.date.today()
    assert delivery.status == DeliveryStatus.COMPLETED


def test_mark_item_delivered_with_date(db, delivery):
    """Test that an explicit actual date is kept"""
    item = delivery.items[0]
    patch = schemas.DeliveryItemUpdate(status=DeliveryItemStatus.DELIVERED, actual_date=datetime.date(2024, 5, 2))

    updated = services.update_item_status(db, delivery.id, item.id, patch)

    assert updated.actual_date == datetime.date(2024, 5, 2)


def test_partial_update_only_touches_given_fields(db, delivery):
    """Test that fields absent from the patch are left unchanged"""
    # Setup
    item = delivery.items[0]
    estimated_date = item.estimated_date

    # Call the service function
    updated = services.update_item_status(
        db, delivery.id, item.id, schemas.DeliveryItemUpdate(observations="Bodega cerrada", status="problema_entrega")
    )

    # Verify the result
    assert updated.observations == "Bodega cerrada"
    assert updated.quantity == 10
    assert updated.actual_date is None
    assert updated.estimated_date == estimated_date
    assert delivery.status == DeliveryStatus.ISSUE


def test_update_item_of_other_delivery(db, delivery):
    """Test that an item must belong to the delivery"""
    with pytest.raises(NotFoundError) as exc_info:
        services.update_item_status(db, delivery.id + 1, delivery.items[0].id, schemas.DeliveryItemUpdate(quantity=1))
    assert str(exc_info.value) == f"Delivery item with ID {delivery.items[0].id} not found"


def test_add_invoice(db, delivery):
    """Test adding an invoice to a delivery"""
    # Setup
    invoice = schemas.InvoiceCreate(invoice_number="F-10293", file_name="f10293.pdf", issue_date=datetime.date(2024, 5, 3))

    # Call the service function
    created = services.add_invoice(db, delivery.id, invoice)

    # Verify the result
    assert created.id is not None
    assert [saved.invoice_number for saved in services.get_invoices(db, delivery.id)] == ["F-10293"]


def test_add_invoice_missing_delivery(db):
    """Test adding an invoice to a missing delivery"""
    invoice = schemas.InvoiceCreate(invoice_number="F-1", issue_date=datetime.date(2024, 5, 3))
    with pytest.raises(NotFoundError) as exc_info:
        services.add_invoice(db, 9999, invoice)
    assert str(exc_info.value) == "Delivery with ID 9999 not found"


def test_get_delivery_by_licitation_missing(db):
    """Test the delivery of a licitation that has none"""
    with pytest.raises(NotFoundError) as exc_info:
        services.get_delivery_by_licitation(db, 5)
    assert str(exc_info.value) == "Delivery with licitation ID 5 not found"


def test_list_deliveries(db, seed):
    """Test listing deliveries newest first"""
    first = seed()
    second = seed()
    services.sync_from_adjudication(db, adjudication_for(first, (first.products["P1"].id, None, 1)))
    services.sync_from_adjudication(db, adjudication_for(second, (second.products["P1"].id, None, 1)))
    db.commit()

    deliveries = services.list_deliveries(db)

    assert [delivery.licitation_id for delivery in deliveries] == [second.licitation.id, first.licitation.id]
