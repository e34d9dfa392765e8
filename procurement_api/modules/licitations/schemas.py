from pydantic import BaseModel, Field, ConfigDict
from datetime import date, datetime
from typing import List, Optional
from procurement_api.modules.licitations.models import LicitationStatus


class LicitationLineCreate(BaseModel):
    product_id: int = Field(..., description="Product ID")
    quantity: int = Field(default=1, ge=1, description="Quantity requested")


class LicitationCreate(BaseModel):
    start_date: date = Field(..., description="Start date of the licitation")
    deadline_date: date = Field(..., description="Deadline date, must be after the start date")
    client_id: int = Field(..., description="Client ID")
    call_number: str = Field(..., min_length=1, description="Call number")
    internal_number: str = Field(..., min_length=1, description="Internal number")
    products: List[LicitationLineCreate] = Field(..., min_length=1, description="Products with quantity")


class LicitationLineResponse(BaseModel):
    id: int
    product_id: int
    quantity: int

    model_config = ConfigDict(from_attributes=True)


class LicitationResponse(BaseModel):
    id: int
    start_date: date
    deadline_date: date
    client_id: int
    call_number: str
    internal_number: str
    status: LicitationStatus
    products: List[LicitationLineResponse] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class LicitationStatusResponse(BaseModel):
    """
    Schema for returning just the recomputed status of a licitation.
    """
    licitation_id: int
    status: LicitationStatus
