# procurement_api/modules/adjudications/services.py

import datetime
import logging
from dataclasses import dataclass, field
from typing import List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from procurement_api.core.exceptions import NotFoundError
from procurement_api.modules.adjudications import models, schemas
from procurement_api.modules.adjudications.models import AdjudicationStatus
from procurement_api.modules.catalog import services as catalog_services
from procurement_api.modules.deliveries import services as delivery_services
from procurement_api.modules.licitations import services as licitation_services
from procurement_api.modules.quotations import services as quotation_services

# Configure logging
logger = logging.getLogger(__name__)

# Chilean IVA (19%) applied to the adjudicated totals
IVA_FACTOR = 1.19

# A submission that loses the race to create the adjudication is retried once
MAX_SUBMIT_ATTEMPTS = 2

AWARDED = "awarded"
NOT_AWARDED = "not_awarded"


@dataclass
class SkippedItem:
    """A side effect of a submission that could not be applied"""
    kind: str  # AWARDED or NOT_AWARDED
    product_id: Optional[int]
    reason: str


@dataclass
class AwardSubmission:
    """Result of submit_award"""
    adjudication: models.Adjudication
    skipped_items: List[SkippedItem] = field(default_factory=list)


def calculate_totals(adjudication: models.Adjudication) -> models.Adjudication:
    """
    Recomputes the totals of an adjudication from its full item set.
    """
    total_without_iva = sum(item.quantity * item.unit_price for item in adjudication.items)
    adjudication.total_price_without_iva = total_without_iva
    adjudication.total_price_with_iva = total_without_iva * IVA_FACTOR
    adjudication.total_quantity = sum(item.quantity for item in adjudication.items)
    return adjudication


def find_by_licitation_and_quotation(db: Session, licitation_id: int, quotation_id: int) -> Optional[models.Adjudication]:
    return (
        db.query(models.Adjudication)
        .filter(
            models.Adjudication.licitation_id == licitation_id,
            models.Adjudication.quotation_id == quotation_id
        )
        .first()
    )


def get_adjudication(db: Session, adjudication_id: int) -> models.Adjudication:
    """
    Gets an adjudication by its ID.

    Raises:
        NotFoundError: If the adjudication does not exist
    """
    adjudication = db.query(models.Adjudication).filter(models.Adjudication.id == adjudication_id).first()
    if not adjudication:
        logger.warning(f"Adjudication with ID {adjudication_id} not found")
        raise NotFoundError("Adjudication", adjudication_id)
    return adjudication


def list_adjudications(
    db: Session,
    status: Optional[AdjudicationStatus] = None,
    quotation_id: Optional[int] = None,
    licitation_id: Optional[int] = None
) -> List[models.Adjudication]:
    """
    Lists adjudications, newest first, optionally filtered by status, quotation or licitation.
    """
    query = db.query(models.Adjudication)
    if status is not None:
        query = query.filter(models.Adjudication.status == AdjudicationStatus(status).value)
    if quotation_id is not None:
        query = query.filter(models.Adjudication.quotation_id == quotation_id)
    if licitation_id is not None:
        query = query.filter(models.Adjudication.licitation_id == licitation_id)
    return query.order_by(models.Adjudication.created_at.desc(), models.Adjudication.id.desc()).all()


def _apply_awarded_item(db: Session, quotation_id: int, item: schemas.AwardedItem) -> List[SkippedItem]:
    if item.product_id is None:
        return [SkippedItem(AWARDED, None, "Item has no product_id")]

    skipped = []
    quotation_item = quotation_services.find_item(db, quotation_id, item.product_id)
    if quotation_item:
        quotation_services.add_awarded_quantity(db, quotation_item, item.quantity)
    else:
        skipped.append(SkippedItem(AWARDED, item.product_id, f"Product {item.product_id} is not quoted in quotation {quotation_id}"))

    product = catalog_services.get_product(db, item.product_id)
    if product:
        catalog_services.decrement_stock(db, product, item.quantity)
    else:
        skipped.append(SkippedItem(AWARDED, item.product_id, f"Product {item.product_id} not found in catalog"))
    return skipped


def _apply_non_awarded_item(db: Session, licitation_id: int, quotation_id: int, item: schemas.NonAwardedItem) -> List[SkippedItem]:
    if item.product_id is None:
        return [SkippedItem(NOT_AWARDED, None, "Item has no product_id")]

    skipped = []
    quotation_item = quotation_services.find_item(db, quotation_id, item.product_id)
    if quotation_item:
        quotation_services.mark_not_awarded(db, quotation_item)
    else:
        skipped.append(SkippedItem(NOT_AWARDED, item.product_id, f"Product {item.product_id} is not quoted in quotation {quotation_id}"))

    product = catalog_services.get_product(db, item.product_id)
    if product:
        catalog_services.record_competitor_win(
            db,
            product,
            licitation_id=licitation_id,
            competitor_name=item.competitor_name,
            competitor_rut=item.competitor_rut,
            competitor_price=item.competitor_price,
            competitor_brand=item.competitor_brand,
        )
    else:
        skipped.append(SkippedItem(NOT_AWARDED, item.product_id, f"Product {item.product_id} not found in catalog"))
    return skipped


def _merge_items(adjudication: models.Adjudication, items: List[schemas.AwardedItem]) -> List[models.AdjudicationItem]:
    """
    Merges submitted items into an adjudication by product.

    An existing item for the same product has its quantity and unit price
    replaced; anything else is appended. Items without a product are always
    appended.

    Returns:
        The created or updated items, in submission order and without repeats
    """
    touched = []
    for item in items:
        existing = None
        if item.product_id is not None:
            existing = next((current for current in adjudication.items if current.product_id == item.product_id), None)

        if existing:
            existing.quantity = item.quantity
            existing.unit_price = item.unit_price
            if item.product_name:
                existing.product_name = item.product_name
        else:
            existing = models.AdjudicationItem(
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity,
                unit_price=item.unit_price,
            )
            adjudication.items.append(existing)

        if existing not in touched:
            touched.append(existing)
    return touched


def _apply_award(db: Session, payload: schemas.AdjudicationCreate) -> AwardSubmission:
    licitation = licitation_services.get_licitation(db, payload.licitation_id, for_update=True)
    quotation = quotation_services.get_quotation(db, payload.quotation_id)
    adjudication = find_by_licitation_and_quotation(db, licitation.id, quotation.id)

    skipped = []
    for item in payload.items:
        skipped.extend(_apply_awarded_item(db, quotation.id, item))
    for item in payload.non_awarded_items:
        skipped.extend(_apply_non_awarded_item(db, licitation.id, quotation.id, item))
    for entry in skipped:
        logger.warning(f"Skipped {entry.kind} side effect for product {entry.product_id}: {entry.reason}")

    created = adjudication is None
    if created:
        adjudication = models.Adjudication(
            licitation_id=licitation.id,
            quotation_id=quotation.id,
            status=AdjudicationStatus(payload.status).value,
            adjudication_date=datetime.date.today(),
        )
        db.add(adjudication)
        db.flush()
        logger.info(f"Adjudication {adjudication.id} created for licitation {licitation.id} and quotation {quotation.id}")
    else:
        logger.info(f"Merging {len(payload.items)} items into adjudication {adjudication.id}")

    touched = _merge_items(adjudication, payload.items)
    db.flush()
    calculate_totals(adjudication)
    db.flush()

    # A new award always gets its delivery, even with no awarded items
    if created or touched:
        delivery_services.sync_from_adjudication(db, adjudication, touched)
    licitation_services.recompute_status(db, licitation.id)
    return AwardSubmission(adjudication=adjudication, skipped_items=skipped)


def submit_award(db: Session, payload: schemas.AdjudicationCreate) -> AwardSubmission:
    """
    Records an award for a (licitation, quotation) pair.

    Applies the quotation, stock and competitor-history side effects of every
    awarded and non-awarded item, creates the adjudication or merges the items
    into the existing one, syncs the delivery and recomputes the licitation
    status. Everything is committed at once or rolled back.

    Side effects that cannot be applied (unknown product, product not quoted)
    do not abort the submission; they are returned as skipped items.

    Args:
        db: Database session
        payload: Submitted award

    Returns:
        AwardSubmission with the persisted adjudication and the skipped items

    Raises:
        NotFoundError: If the licitation or quotation does not exist
    """
    for attempt in range(1, MAX_SUBMIT_ATTEMPTS + 1):
        try:
            result = _apply_award(db, payload)
            db.commit()
        except IntegrityError as e:
            # Another request created the adjudication for the same pair first
            db.rollback()
            if attempt < MAX_SUBMIT_ATTEMPTS:
                logger.warning(f"IntegrityError while saving adjudication, retrying: {str(e)}")
                continue
            logger.error(f"Error saving adjudication for licitation {payload.licitation_id}: {str(e)}")
            raise
        except Exception as e:
            db.rollback()
            logger.error(f"Error submitting adjudication for licitation {payload.licitation_id}: {str(e)}")
            raise

        db.refresh(result.adjudication)
        logger.info(
            f"Adjudication {result.adjudication.id} saved with {len(result.adjudication.items)} items, "
            f"{len(result.skipped_items)} skipped side effects"
        )
        return result


def add_item(db: Session, adjudication_id: int, item: schemas.AdjudicationItemCreate) -> models.Adjudication:
    """
    Appends one item to an adjudication and recomputes its totals.

    No quotation, stock or delivery side effects are applied.

    Raises:
        NotFoundError: If the adjudication does not exist
    """
    adjudication = get_adjudication(db, adjudication_id)
    try:
        adjudication.items.append(models.AdjudicationItem(
            product_id=item.product_id,
            product_name=item.product_name,
            quantity=item.quantity,
            unit_price=item.unit_price,
        ))
        db.flush()
        calculate_totals(adjudication)
        licitation_services.recompute_status(db, adjudication.licitation_id)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Error adding item to adjudication {adjudication_id}: {str(e)}")
        raise

    db.refresh(adjudication)
    logger.info(f"Item for product {item.product_id} added to adjudication {adjudication_id}")
    return adjudication


def remove_item(db: Session, adjudication_id: int, item_id: int) -> models.Adjudication:
    """
    Deletes one item from an adjudication and recomputes its totals.

    Raises:
        NotFoundError: If the adjudication does not exist or the item does not belong to it
    """
    adjudication = get_adjudication(db, adjudication_id)
    item = next((current for current in adjudication.items if current.id == item_id), None)
    if item is None:
        logger.warning(f"Item {item_id} not found in adjudication {adjudication_id}")
        raise NotFoundError("Adjudication item", item_id)

    try:
        adjudication.items.remove(item)
        db.flush()
        calculate_totals(adjudication)
        licitation_services.recompute_status(db, adjudication.licitation_id)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Error removing item {item_id} from adjudication {adjudication_id}: {str(e)}")
        raise

    db.refresh(adjudication)
    logger.info(f"Item {item_id} removed from adjudication {adjudication_id}")
    return adjudication


def remove_adjudication(db: Session, adjudication_id: int) -> None:
    """
    Deletes an adjudication with its items and recomputes the status of its licitation.

    Raises:
        NotFoundError: If the adjudication does not exist
    """
    adjudication = get_adjudication(db, adjudication_id)
    licitation_id = adjudication.licitation_id
    try:
        db.delete(adjudication)
        db.flush()
        licitation_services.recompute_status(db, licitation_id)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Error deleting adjudication {adjudication_id}: {str(e)}")
        raise
    logger.info(f"Adjudication {adjudication_id} deleted")


def update_awarded_quantity(db: Session, quotation_item_id: int, awarded_quantity: int):
    """
    Overwrites the awarded quantity of a quotation item.

    When the quotation belongs to a licitation, the delivery item of the product
    follows the new quantity and the licitation status is recomputed.

    Raises:
        NotFoundError: If the quotation item does not exist
    """
    item = quotation_services.get_quotation_item(db, quotation_item_id)
    try:
        quotation_services.set_awarded_quantity(db, item, awarded_quantity)

        licitation_id = item.quotation.licitation_id
        if licitation_id is not None:
            if item.product_id is not None:
                delivery_services.sync_item_quantity(db, licitation_id, item.product_id, awarded_quantity)
            licitation_services.recompute_status(db, licitation_id)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating awarded quantity of quotation item {quotation_item_id}: {str(e)}")
        raise

    db.refresh(item)
    return item
