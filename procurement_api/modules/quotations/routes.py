from fastapi import APIRouter, Depends, HTTPException, status, Path
from sqlalchemy.orm import Session
from procurement_api.core.database import get_db
from procurement_api.core.exceptions import AppError
from procurement_api.modules.quotations import schemas, services

router = APIRouter()


@router.post("/", response_model=schemas.QuotationResponse, status_code=status.HTTP_201_CREATED)
def create_quotation(quotation: schemas.QuotationCreate, db: Session = Depends(get_db)):
    try:
        return services.create_quotation(db, quotation)
    except AppError as e:
        raise HTTPException(status_code=e.http_status, detail=str(e))


@router.get("/{quotation_id}", response_model=schemas.QuotationResponse)
def get_quotation(
    quotation_id: int = Path(..., description="ID of the quotation"),
    db: Session = Depends(get_db)
):
    """
    Get a quotation with its items, including award status and awarded quantity per item.
    """
    try:
        return services.get_quotation(db, quotation_id)
    except AppError as e:
        raise HTTPException(status_code=e.http_status, detail=str(e))
