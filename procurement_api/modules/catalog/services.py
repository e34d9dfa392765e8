# procurement_api/modules/catalog/services.py

import datetime
import logging
from typing import Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from procurement_api.modules.catalog import models

logger = logging.getLogger(__name__)


def get_product(db: Session, product_id: int) -> Optional[models.Product]:
    """
    Gets a product by its ID.
    """
    return db.query(models.Product).filter(models.Product.id == product_id).first()


def get_products(db: Session, product_ids) -> list:
    """
    Gets every product whose ID is in product_ids.
    """
    if not product_ids:
        return []
    return db.query(models.Product).filter(models.Product.id.in_(list(product_ids))).all()


def get_client(db: Session, client_id: int) -> Optional[models.Client]:
    """
    Gets a client by its ID.
    """
    return db.query(models.Client).filter(models.Client.id == client_id).first()


def decrement_stock(db: Session, product: models.Product, quantity: int) -> None:
    """
    Decrements the stock of a product by the awarded quantity.

    The update is issued as a SQL expression so concurrent awards do not lose
    updates. There is no floor: stock can become negative (back-order).
    """
    product.stock_quantity = func.coalesce(models.Product.stock_quantity, 0) - quantity
    db.flush()
    logger.info(f"Stock of product {product.id} decremented by {quantity}")


def record_competitor_win(
    db: Session,
    product: models.Product,
    licitation_id: int,
    competitor_name: str,
    competitor_rut: str,
    competitor_price: float,
    competitor_brand: Optional[str] = None,
) -> dict:
    """
    Appends a competitor-win record to the product's adjudication history.

    Returns:
        The appended history entry
    """
    entry = {
        "date": datetime.datetime.now(datetime.timezone.utc).isoformat(),
        "licitation_id": licitation_id,
        "competitor_name": competitor_name,
        "competitor_rut": competitor_rut,
        "competitor_price": competitor_price,
        "competitor_brand": competitor_brand,
    }
    # Reassign the list so the JSON column is marked as changed
    product.adjudication_history = list(product.adjudication_history or []) + [entry]
    db.flush()
    logger.info(f"Competitor {competitor_name} recorded as winner for product {product.id} in licitation {licitation_id}")
    return entry
