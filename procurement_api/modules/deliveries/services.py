# procurement_api/modules/deliveries/services.py

import datetime
import logging
from typing import Iterable, List, Optional
from sqlalchemy.orm import Session
from procurement_api.core.exceptions import NotFoundError
from procurement_api.modules.deliveries import models, schemas
from procurement_api.modules.deliveries.models import DeliveryItemStatus
from procurement_api.modules.catalog import services as catalog_services

# Configure logging
logger = logging.getLogger(__name__)

# Days between the adjudication and the estimated delivery of a new item
ESTIMATED_DELIVERY_DAYS = 7


def get_delivery(db: Session, delivery_id: int) -> models.Delivery:
    """
    Gets a delivery by its ID.

    Raises:
        NotFoundError: If the delivery does not exist
    """
    delivery = db.query(models.Delivery).filter(models.Delivery.id == delivery_id).first()
    if not delivery:
        logger.warning(f"Delivery with ID {delivery_id} not found")
        raise NotFoundError("Delivery", delivery_id)
    return delivery


def find_by_licitation(db: Session, licitation_id: int) -> Optional[models.Delivery]:
    return db.query(models.Delivery).filter(models.Delivery.licitation_id == licitation_id).first()


def get_delivery_by_licitation(db: Session, licitation_id: int) -> models.Delivery:
    """
    Gets the delivery of a licitation.

    Raises:
        NotFoundError: If the licitation has no delivery yet
    """
    delivery = find_by_licitation(db, licitation_id)
    if not delivery:
        raise NotFoundError("Delivery", licitation_id, field="licitation ID")
    return delivery


def list_deliveries(db: Session) -> List[models.Delivery]:
    """
    Gets all deliveries, newest first.
    """
    return db.query(models.Delivery).order_by(models.Delivery.id.desc()).all()


def find_item(db: Session, delivery_id: int, product_id: int) -> Optional[models.DeliveryItem]:
    """
    Gets the item of a delivery for the given product, or None.
    """
    return (
        db.query(models.DeliveryItem)
        .filter(
            models.DeliveryItem.delivery_id == delivery_id,
            models.DeliveryItem.product_id == product_id
        )
        .order_by(models.DeliveryItem.id)
        .first()
    )


def get_or_create_delivery(db: Session, licitation_id: int) -> models.Delivery:
    """
    Finds the delivery of a licitation, creating an empty one if there is none.
    """
    delivery = find_by_licitation(db, licitation_id)
    if delivery:
        return delivery

    delivery = models.Delivery(licitation_id=licitation_id)
    db.add(delivery)
    db.flush()
    logger.info(f"Delivery {delivery.id} created for licitation {licitation_id}")
    return delivery


def sync_from_adjudication(db: Session, adjudication, items: Optional[Iterable] = None) -> models.Delivery:
    """
    Creates or updates the delivery items of a licitation from adjudication items.

    Items are merged by product: an existing delivery item for the product gets
    its quantity replaced with the adjudicated quantity, otherwise a new pending
    item is created with an estimated date one week ahead.

    Args:
        db: Database session
        adjudication: Adjudication whose licitation owns the delivery
        items: Adjudication items to sync, defaults to all items of the adjudication

    Returns:
        The delivery with its current items
    """
    delivery = get_or_create_delivery(db, adjudication.licitation_id)
    items = list(adjudication.items if items is None else items)
    estimated_date = datetime.date.today() + datetime.timedelta(days=ESTIMATED_DELIVERY_DAYS)

    for position, item in enumerate(items, start=1):
        existing = find_item(db, delivery.id, item.product_id) if item.product_id is not None else None
        if existing:
            logger.info(f"Delivery item {existing.id} quantity replaced: {existing.quantity} -> {item.quantity}")
            existing.quantity = item.quantity
            continue

        product = catalog_services.get_product(db, item.product_id) if item.product_id is not None else None
        product_name = item.product_name or (product.name if product else None)
        product_code = (product.code if product and product.code else None) or product_name or f"ADJ-{adjudication.id}-{position}"

        delivery_item = models.DeliveryItem(
            delivery_id=delivery.id,
            product_id=item.product_id,
            product_code=product_code,
            product_name=product_name or "Unnamed product",
            quantity=item.quantity,
            status=DeliveryItemStatus.PENDING.value,
            estimated_date=estimated_date,
        )
        delivery.items.append(delivery_item)
        db.flush()
        logger.info(f"Delivery item created for product {item.product_id} with quantity {item.quantity}")

    db.flush()
    return delivery


def sync_item_quantity(db: Session, licitation_id: int, product_id: int, quantity: int) -> Optional[models.DeliveryItem]:
    """
    Replaces the quantity of the delivery item of a product in a licitation's delivery.

    Returns:
        The updated delivery item, or None when there is no delivery or item for the product
    """
    delivery = find_by_licitation(db, licitation_id)
    if not delivery:
        return None
    item = find_item(db, delivery.id, product_id)
    if not item:
        return None
    item.quantity = quantity
    db.flush()
    return item


def update_item_status(db: Session, delivery_id: int, item_id: int, patch: schemas.DeliveryItemUpdate) -> models.DeliveryItem:
    """
    Applies a partial update to a delivery item.

    When the item moves to delivered and no actual date is given, today is used.

    Raises:
        NotFoundError: If the item does not exist in the delivery
    """
    item = (
        db.query(models.DeliveryItem)
        .filter(models.DeliveryItem.id == item_id, models.DeliveryItem.delivery_id == delivery_id)
        .first()
    )
    if not item:
        logger.warning(f"Delivery item {item_id} not found in delivery {delivery_id}")
        raise NotFoundError("Delivery item", item_id)

    changes = patch.model_dump(exclude_unset=True)
    previous_status = item.status

    if changes.get("status") is not None:
        item.status = DeliveryItemStatus(changes["status"]).value
    if "actual_date" in changes:
        item.actual_date = changes["actual_date"]
    if "observations" in changes:
        item.observations = changes["observations"]
    if changes.get("quantity") is not None:
        item.quantity = changes["quantity"]

    if (
        item.status == DeliveryItemStatus.DELIVERED.value
        and previous_status != DeliveryItemStatus.DELIVERED.value
        and changes.get("actual_date") is None
    ):
        item.actual_date = datetime.date.today()

    db.commit()
    db.refresh(item)
    logger.info(f"Delivery item {item_id} updated: {changes}")
    return item


def add_invoice(db: Session, delivery_id: int, invoice: schemas.InvoiceCreate) -> models.Invoice:
    """
    Adds an invoice to a delivery.

    Raises:
        NotFoundError: If the delivery does not exist
    """
    delivery = get_delivery(db, delivery_id)
    db_invoice = models.Invoice(
        delivery_id=delivery.id,
        invoice_number=invoice.invoice_number,
        file_name=invoice.file_name,
        file_url=invoice.file_url,
        issue_date=invoice.issue_date,
    )
    delivery.invoices.append(db_invoice)
    db.commit()
    db.refresh(db_invoice)
    logger.info(f"Invoice {db_invoice.invoice_number} added to delivery {delivery_id}")
    return db_invoice


def get_delivery_items(db: Session, delivery_id: int) -> List[models.DeliveryItem]:
    return get_delivery(db, delivery_id).items


def get_invoices(db: Session, delivery_id: int) -> List[models.Invoice]:
    return get_delivery(db, delivery_id).invoices
