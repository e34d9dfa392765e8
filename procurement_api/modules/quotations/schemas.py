from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from typing import List, Optional
from procurement_api.modules.quotations.models import QuotationStatus, QuotationAwardStatus, Currency


class QuotationItemCreate(BaseModel):
    product_id: Optional[int] = Field(None, description="Product ID, if the product exists in the catalog")
    product_name: str = Field(..., min_length=1)
    sku: str = Field(..., min_length=1, description="SKU or part number")
    quantity: int = Field(..., gt=0, description="Requested quantity")
    price_without_iva: float = Field(..., gt=0, description="Quoted unit price without IVA")
    price_with_iva: Optional[float] = Field(None, gt=0, description="Quoted unit price with IVA, derived when omitted")
    iva_percentage: float = Field(default=19, ge=0, le=100)
    currency: Currency = Currency.CLP
    notes: Optional[str] = None


class QuotationCreate(BaseModel):
    quotation_identifier: str = Field(..., min_length=1, description="Unique quotation identifier, e.g. COT-2024-001")
    status: QuotationStatus = QuotationStatus.CREATED
    licitation_id: Optional[int] = Field(None, description="ID of the associated licitation")
    client_id: Optional[int] = None
    description: Optional[str] = None
    observations: Optional[str] = None
    items: List[QuotationItemCreate] = Field(..., min_length=1)


class QuotationItemResponse(BaseModel):
    id: int
    quotation_id: int
    product_id: Optional[int] = None
    product_name: str
    sku: str
    quantity: int
    price_without_iva: float
    price_with_iva: float
    iva_percentage: float
    currency: Currency
    award_status: QuotationAwardStatus
    awarded_quantity: int
    notes: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class QuotationResponse(BaseModel):
    id: int
    quotation_identifier: str
    status: QuotationStatus
    licitation_id: Optional[int] = None
    client_id: Optional[int] = None
    description: Optional[str] = None
    observations: Optional[str] = None
    items: List[QuotationItemResponse] = []
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
