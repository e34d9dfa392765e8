# procurement_api/modules/licitations/services.py

import logging
from collections import defaultdict
from typing import Iterable, List
from sqlalchemy.orm import Session
from procurement_api.core.exceptions import NotFoundError, ValidationError
from procurement_api.modules.licitations import models, schemas
from procurement_api.modules.licitations.models import LicitationStatus
from procurement_api.modules.catalog import services as catalog_services
from procurement_api.modules.adjudications.models import Adjudication

# Configure logging
logger = logging.getLogger(__name__)


def get_licitation(db: Session, licitation_id: int, for_update: bool = False) -> models.Licitation:
    """
    Gets a licitation by its ID.

    Args:
        db: Database session
        licitation_id: ID of the licitation
        for_update: Lock the row until the end of the transaction

    Raises:
        NotFoundError: If the licitation does not exist
    """
    query = db.query(models.Licitation).filter(models.Licitation.id == licitation_id)
    if for_update:
        query = query.with_for_update()
    licitation = query.first()
    if not licitation:
        logger.warning(f"Licitation with ID {licitation_id} not found")
        raise NotFoundError("Licitation", licitation_id)
    return licitation


def get_lines(db: Session, licitation_id: int) -> List[models.LicitationProduct]:
    """
    Gets the requested product lines of a licitation.
    """
    return (
        db.query(models.LicitationProduct)
        .filter(models.LicitationProduct.licitation_id == licitation_id)
        .order_by(models.LicitationProduct.id)
        .all()
    )


def create_licitation(db: Session, licitation: schemas.LicitationCreate) -> models.Licitation:
    """
    Creates a licitation with its requested product lines.

    Raises:
        ValidationError: If the date range is invalid or no product lines are given
        NotFoundError: If the client or any of the products does not exist
    """
    logger.info(f"Creating licitation with call number: {licitation.call_number}, internal number: {licitation.internal_number}")

    if licitation.deadline_date <= licitation.start_date:
        logger.warning(f"Invalid date range: deadline {licitation.deadline_date} must be after start {licitation.start_date}")
        raise ValidationError(
            f"Invalid date range: deadline date ({licitation.deadline_date}) must be after start date ({licitation.start_date})"
        )

    if not licitation.products:
        raise ValidationError("At least one product is required to create a licitation")

    if not catalog_services.get_client(db, licitation.client_id):
        raise NotFoundError("Client", licitation.client_id)

    product_ids = {line.product_id for line in licitation.products}
    found_ids = {product.id for product in catalog_services.get_products(db, product_ids)}
    missing_ids = sorted(product_ids - found_ids)
    if missing_ids:
        logger.warning(f"Products with IDs {missing_ids} not found")
        raise NotFoundError("Product", ", ".join(str(product_id) for product_id in missing_ids))

    db_licitation = models.Licitation(
        start_date=licitation.start_date,
        deadline_date=licitation.deadline_date,
        client_id=licitation.client_id,
        call_number=licitation.call_number,
        internal_number=licitation.internal_number,
        status=LicitationStatus.PENDING.value,
    )
    for line in licitation.products:
        db_licitation.products.append(
            models.LicitationProduct(product_id=line.product_id, quantity=line.quantity)
        )

    db.add(db_licitation)
    db.commit()
    db.refresh(db_licitation)
    logger.info(f"Licitation created successfully with ID: {db_licitation.id}")
    return db_licitation


def compute_status(lines: Iterable, adjudications: Iterable) -> LicitationStatus:
    """
    Classifies a licitation from its requested lines and all its adjudications.

    The awarded quantity of each product is summed over every adjudication item,
    and the requested quantity over every line of that product. A licitation is
    totally adjudicated when every requested product reaches its requested
    quantity, partially adjudicated when at least one received something,
    and pending otherwise. Without requested lines any adjudication makes it partial.

    Args:
        lines: Objects with product_id and quantity
        adjudications: Objects with an items collection of product_id/quantity objects

    Returns:
        The resulting LicitationStatus
    """
    adjudications = list(adjudications)
    if not adjudications:
        return LicitationStatus.PENDING

    awarded = defaultdict(int)
    for adjudication in adjudications:
        for item in adjudication.items:
            if item.product_id is not None:
                awarded[item.product_id] += item.quantity

    requested = defaultdict(int)
    for line in lines:
        requested[line.product_id] += line.quantity
    if not requested:
        return LicitationStatus.PARTIAL_ADJUDICATION

    if all(awarded.get(product_id, 0) >= quantity for product_id, quantity in requested.items()):
        return LicitationStatus.TOTAL_ADJUDICATION
    if any(awarded.get(product_id, 0) > 0 for product_id in requested):
        return LicitationStatus.PARTIAL_ADJUDICATION
    return LicitationStatus.PENDING


def recompute_status(db: Session, licitation_id: int) -> LicitationStatus:
    """
    Recomputes and stores the status of a licitation.

    Only flushes: the caller owns the transaction.
    """
    licitation = get_licitation(db, licitation_id)
    db.flush()

    adjudications = db.query(Adjudication).filter(Adjudication.licitation_id == licitation_id).all()
    status = compute_status(get_lines(db, licitation_id), adjudications)

    if licitation.status != status.value:
        logger.info(f"Licitation {licitation_id} status changed from {licitation.status} to {status.value}")
    licitation.status = status.value
    db.flush()
    return status
