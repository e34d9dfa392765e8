from fastapi import APIRouter, Depends, HTTPException, status, Path, Query, Response
from typing import List, Optional
from sqlalchemy.orm import Session
from procurement_api.core.database import get_db
from procurement_api.core.exceptions import AppError
from procurement_api.modules.adjudications import schemas, services
from procurement_api.modules.adjudications.models import AdjudicationStatus
from procurement_api.modules.quotations.schemas import QuotationItemResponse
import logging

router = APIRouter()

# Configure logging
logger = logging.getLogger(__name__)


@router.post("/", response_model=schemas.AdjudicationSubmitResponse, status_code=status.HTTP_201_CREATED)
def submit_adjudication(payload: schemas.AdjudicationCreate, db: Session = Depends(get_db)):
    """
    Record the awarded and non-awarded items of a quotation in a licitation.

    A second submission for the same licitation and quotation is merged into
    the existing adjudication. Side effects that could not be applied are
    listed in skipped_items.
    """
    try:
        result = services.submit_award(db, payload)
    except AppError as e:
        raise HTTPException(status_code=e.http_status, detail=str(e))
    return schemas.AdjudicationSubmitResponse.model_validate(result, from_attributes=True)


@router.get("/", response_model=List[schemas.AdjudicationResponse])
def list_adjudications(
    status: Optional[AdjudicationStatus] = Query(None, description="Filter by adjudication status"),
    quotation_id: Optional[int] = Query(None, description="Filter by quotation"),
    licitation_id: Optional[int] = Query(None, description="Filter by licitation"),
    db: Session = Depends(get_db)
):
    return services.list_adjudications(db, status=status, quotation_id=quotation_id, licitation_id=licitation_id)


@router.get("/{adjudication_id}", response_model=schemas.AdjudicationResponse)
def get_adjudication(
    adjudication_id: int = Path(..., description="ID of the adjudication"),
    db: Session = Depends(get_db)
):
    try:
        return services.get_adjudication(db, adjudication_id)
    except AppError as e:
        raise HTTPException(status_code=e.http_status, detail=str(e))


@router.patch("/{adjudication_id}/items", response_model=schemas.AdjudicationResponse)
def add_adjudication_item(
    item: schemas.AdjudicationItemCreate,
    adjudication_id: int = Path(..., description="ID of the adjudication"),
    db: Session = Depends(get_db)
):
    """
    Append an item to an adjudication. Totals and the licitation status are recomputed.
    """
    try:
        return services.add_item(db, adjudication_id, item)
    except AppError as e:
        raise HTTPException(status_code=e.http_status, detail=str(e))


@router.delete("/{adjudication_id}/items/{item_id}", response_model=schemas.AdjudicationResponse)
def remove_adjudication_item(
    adjudication_id: int = Path(..., description="ID of the adjudication"),
    item_id: int = Path(..., description="ID of the adjudication item"),
    db: Session = Depends(get_db)
):
    try:
        return services.remove_item(db, adjudication_id, item_id)
    except AppError as e:
        raise HTTPException(status_code=e.http_status, detail=str(e))


@router.delete("/{adjudication_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_adjudication(
    adjudication_id: int = Path(..., description="ID of the adjudication"),
    db: Session = Depends(get_db)
):
    try:
        services.remove_adjudication(db, adjudication_id)
    except AppError as e:
        raise HTTPException(status_code=e.http_status, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/quotation-items/{item_id}/awarded-quantity", response_model=QuotationItemResponse)
def update_awarded_quantity(
    payload: schemas.AwardedQuantityUpdate,
    item_id: int = Path(..., description="ID of the quotation item"),
    db: Session = Depends(get_db)
):
    """
    Overwrite the awarded quantity of a quotation item.
    The delivery item of the product and the licitation status follow the new quantity.
    """
    try:
        return services.update_awarded_quantity(db, item_id, payload.awarded_quantity)
    except AppError as e:
        raise HTTPException(status_code=e.http_status, detail=str(e))
