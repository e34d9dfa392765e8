from fastapi import APIRouter, Depends, HTTPException, status, Path
from sqlalchemy.orm import Session
from procurement_api.core.database import get_db
from procurement_api.core.exceptions import AppError
from procurement_api.modules.licitations import schemas, services
import logging

router = APIRouter()

# Configure logging
logger = logging.getLogger(__name__)


@router.post("/", response_model=schemas.LicitationResponse, status_code=status.HTTP_201_CREATED)
def create_licitation(licitation: schemas.LicitationCreate, db: Session = Depends(get_db)):
    """
    Create a licitation with its requested products.
    The status always starts as Pending and is recomputed from the adjudications.
    """
    try:
        return services.create_licitation(db, licitation)
    except AppError as e:
        raise HTTPException(status_code=e.http_status, detail=str(e))


@router.get("/{licitation_id}", response_model=schemas.LicitationResponse)
def get_licitation(
    licitation_id: int = Path(..., description="ID of the licitation"),
    db: Session = Depends(get_db)
):
    try:
        return services.get_licitation(db, licitation_id)
    except AppError as e:
        raise HTTPException(status_code=e.http_status, detail=str(e))


@router.post("/{licitation_id}/recompute-status", response_model=schemas.LicitationStatusResponse)
def recompute_licitation_status(
    licitation_id: int = Path(..., description="ID of the licitation"),
    db: Session = Depends(get_db)
):
    """
    Recompute the status of a licitation from its adjudications.
    """
    try:
        new_status = services.recompute_status(db, licitation_id)
        db.commit()
    except AppError as e:
        raise HTTPException(status_code=e.http_status, detail=str(e))
    return schemas.LicitationStatusResponse(licitation_id=licitation_id, status=new_status)
