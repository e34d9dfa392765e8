from fastapi import APIRouter, Depends, HTTPException, status, Path
from typing import List
from sqlalchemy.orm import Session
from procurement_api.core.database import get_db
from procurement_api.core.exceptions import AppError
from procurement_api.modules.deliveries import schemas, services
import logging

router = APIRouter()

# Configure logging
logger = logging.getLogger(__name__)


@router.get("/", response_model=List[schemas.DeliveryResponse])
def list_deliveries(db: Session = Depends(get_db)):
    """
    List all deliveries, newest first.
    """
    return services.list_deliveries(db)


@router.get("/licitation/{licitation_id}", response_model=schemas.DeliveryResponse)
def get_delivery_by_licitation(
    licitation_id: int = Path(..., description="ID of the licitation"),
    db: Session = Depends(get_db)
):
    try:
        return services.get_delivery_by_licitation(db, licitation_id)
    except AppError as e:
        raise HTTPException(status_code=e.http_status, detail=str(e))


@router.get("/{delivery_id}", response_model=schemas.DeliveryResponse)
def get_delivery(
    delivery_id: int = Path(..., description="ID of the delivery"),
    db: Session = Depends(get_db)
):
    try:
        return services.get_delivery(db, delivery_id)
    except AppError as e:
        raise HTTPException(status_code=e.http_status, detail=str(e))


@router.get("/{delivery_id}/items", response_model=List[schemas.DeliveryItemResponse])
def get_delivery_items(
    delivery_id: int = Path(..., description="ID of the delivery"),
    db: Session = Depends(get_db)
):
    try:
        return services.get_delivery_items(db, delivery_id)
    except AppError as e:
        raise HTTPException(status_code=e.http_status, detail=str(e))


@router.patch("/{delivery_id}/items/{item_id}", response_model=schemas.DeliveryItemResponse)
def update_delivery_item(
    patch: schemas.DeliveryItemUpdate,
    delivery_id: int = Path(..., description="ID of the delivery"),
    item_id: int = Path(..., description="ID of the delivery item"),
    db: Session = Depends(get_db)
):
    """
    Update the status, actual date, observations or quantity of a delivery item.
    Marking an item as delivered without an actual date stamps today's date.
    """
    try:
        return services.update_item_status(db, delivery_id, item_id, patch)
    except AppError as e:
        raise HTTPException(status_code=e.http_status, detail=str(e))


@router.get("/{delivery_id}/invoices", response_model=List[schemas.InvoiceResponse])
def get_invoices(
    delivery_id: int = Path(..., description="ID of the delivery"),
    db: Session = Depends(get_db)
):
    try:
        return services.get_invoices(db, delivery_id)
    except AppError as e:
        raise HTTPException(status_code=e.http_status, detail=str(e))


@router.post("/{delivery_id}/invoices", response_model=schemas.InvoiceResponse, status_code=status.HTTP_201_CREATED)
def add_invoice(
    invoice: schemas.InvoiceCreate,
    delivery_id: int = Path(..., description="ID of the delivery"),
    db: Session = Depends(get_db)
):
    try:
        return services.add_invoice(db, delivery_id, invoice)
    except AppError as e:
        raise HTTPException(status_code=e.http_status, detail=str(e))
