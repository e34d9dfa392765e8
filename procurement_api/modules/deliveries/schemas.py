from pydantic import BaseModel, Field, ConfigDict
from datetime import date, datetime
from typing import List, Optional
from procurement_api.modules.deliveries.models import DeliveryItemStatus, DeliveryStatus


class DeliveryItemUpdate(BaseModel):
    """
    Partial update of a delivery item.
    Only the fields present in the request are applied.
    """
    status: Optional[DeliveryItemStatus] = None
    actual_date: Optional[date] = None
    observations: Optional[str] = None
    quantity: Optional[int] = Field(None, ge=0)


class InvoiceCreate(BaseModel):
    invoice_number: str = Field(..., min_length=1, max_length=100)
    file_name: Optional[str] = Field(None, max_length=255)
    file_url: Optional[str] = Field(None, max_length=500)
    issue_date: date


class DeliveryItemResponse(BaseModel):
    id: int
    delivery_id: int
    product_id: Optional[int] = None
    product_code: str
    product_name: str
    quantity: int
    status: DeliveryItemStatus
    estimated_date: date
    actual_date: Optional[date] = None
    observations: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class InvoiceResponse(BaseModel):
    id: int
    delivery_id: int
    invoice_number: str
    file_name: Optional[str] = None
    file_url: Optional[str] = None
    issue_date: date
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class DeliveryResponse(BaseModel):
    id: int
    licitation_id: int
    status: DeliveryStatus
    observations: Optional[str] = None
    items: List[DeliveryItemResponse] = []
    invoices: List[InvoiceResponse] = []
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
