# procurement_api/modules/quotations/services.py

import logging
from typing import Optional
from sqlalchemy.orm import Session
from procurement_api.core.exceptions import ConflictError, NotFoundError
from procurement_api.modules.quotations import models, schemas
from procurement_api.modules.quotations.models import QuotationAwardStatus
from procurement_api.modules.catalog import services as catalog_services
from procurement_api.modules.licitations import services as licitation_services

logger = logging.getLogger(__name__)


def get_quotation(db: Session, quotation_id: int) -> models.Quotation:
    """
    Gets a quotation by its ID.

    Raises:
        NotFoundError: If the quotation does not exist
    """
    quotation = db.query(models.Quotation).filter(models.Quotation.id == quotation_id).first()
    if not quotation:
        logger.warning(f"Quotation with ID {quotation_id} not found")
        raise NotFoundError("Quotation", quotation_id)
    return quotation


def get_quotation_by_identifier(db: Session, identifier: str) -> Optional[models.Quotation]:
    return db.query(models.Quotation).filter(models.Quotation.quotation_identifier == identifier).first()


def get_quotation_item(db: Session, item_id: int) -> models.QuotationItem:
    """
    Gets a quotation item by its ID.

    Raises:
        NotFoundError: If the quotation item does not exist
    """
    item = db.query(models.QuotationItem).filter(models.QuotationItem.id == item_id).first()
    if not item:
        logger.warning(f"Quotation item with ID {item_id} not found")
        raise NotFoundError("Quotation item", item_id)
    return item


def find_item(db: Session, quotation_id: int, product_id: int) -> Optional[models.QuotationItem]:
    """
    Gets the item of a quotation quoting the given product, or None.
    """
    return (
        db.query(models.QuotationItem)
        .filter(
            models.QuotationItem.quotation_id == quotation_id,
            models.QuotationItem.product_id == product_id
        )
        .order_by(models.QuotationItem.id)
        .first()
    )


def create_quotation(db: Session, quotation: schemas.QuotationCreate) -> models.Quotation:
    """
    Creates a quotation with its items.

    Raises:
        ConflictError: If another quotation already uses the identifier
        NotFoundError: If the licitation or client does not exist
    """
    if get_quotation_by_identifier(db, quotation.quotation_identifier):
        raise ConflictError(f"A quotation with identifier {quotation.quotation_identifier} already exists")

    if quotation.licitation_id is not None:
        licitation_services.get_licitation(db, quotation.licitation_id)
    if quotation.client_id is not None and not catalog_services.get_client(db, quotation.client_id):
        raise NotFoundError("Client", quotation.client_id)

    db_quotation = models.Quotation(
        quotation_identifier=quotation.quotation_identifier,
        status=quotation.status.value,
        licitation_id=quotation.licitation_id,
        client_id=quotation.client_id,
        description=quotation.description,
        observations=quotation.observations,
    )
    for item in quotation.items:
        price_with_iva = item.price_with_iva
        if price_with_iva is None:
            price_with_iva = item.price_without_iva * (1 + item.iva_percentage / 100)
        db_quotation.items.append(models.QuotationItem(
            product_id=item.product_id,
            product_name=item.product_name,
            sku=item.sku,
            quantity=item.quantity,
            price_without_iva=item.price_without_iva,
            price_with_iva=price_with_iva,
            iva_percentage=item.iva_percentage,
            currency=item.currency.value,
            award_status=QuotationAwardStatus.PENDING.value,
            awarded_quantity=0,
            notes=item.notes,
        ))

    db.add(db_quotation)
    db.commit()
    db.refresh(db_quotation)
    logger.info(f"Quotation {db_quotation.quotation_identifier} created with {len(db_quotation.items)} items")
    return db_quotation


def classify_award_status(awarded_quantity: int, requested_quantity: int) -> QuotationAwardStatus:
    """
    Awarded once the requested quantity is reached, partially awarded below it,
    pending when nothing has been awarded.
    """
    if awarded_quantity >= requested_quantity:
        return QuotationAwardStatus.AWARDED
    if awarded_quantity > 0:
        return QuotationAwardStatus.PARTIALLY_AWARDED
    return QuotationAwardStatus.PENDING


def add_awarded_quantity(db: Session, item: models.QuotationItem, quantity: int) -> models.QuotationItem:
    """
    Adds quantity to the cumulative awarded quantity of an item and reclassifies it.

    The increment runs as a SQL expression; the attribute is reloaded after the flush.
    """
    item.awarded_quantity = models.QuotationItem.awarded_quantity + quantity
    db.flush()

    item.award_status = classify_award_status(item.awarded_quantity, item.quantity).value
    db.flush()
    logger.info(f"Quotation item {item.id} awarded {quantity} more, total {item.awarded_quantity} ({item.award_status})")
    return item


def set_awarded_quantity(db: Session, item: models.QuotationItem, quantity: int) -> models.QuotationItem:
    """
    Overwrites the awarded quantity of an item and reclassifies it.
    """
    item.awarded_quantity = quantity
    item.award_status = classify_award_status(quantity, item.quantity).value
    db.flush()
    logger.info(f"Quotation item {item.id} awarded quantity set to {quantity} ({item.award_status})")
    return item


def mark_not_awarded(db: Session, item: models.QuotationItem) -> models.QuotationItem:
    item.award_status = QuotationAwardStatus.NOT_AWARDED.value
    db.flush()
    return item
