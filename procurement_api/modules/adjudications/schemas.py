from pydantic import BaseModel, Field, ConfigDict
from datetime import date, datetime
from typing import List, Optional
from procurement_api.modules.adjudications.models import AdjudicationStatus


class AwardedItem(BaseModel):
    product_id: Optional[int] = Field(None, description="Product ID, if the product exists in the catalog")
    quantity: int = Field(..., gt=0, description="Awarded quantity")
    unit_price: float = Field(..., ge=0, description="Awarded unit price without IVA")
    product_name: Optional[str] = None


class NonAwardedItem(BaseModel):
    product_id: Optional[int] = Field(None, description="Product lost to a competitor")
    competitor_name: str = Field(..., min_length=1)
    competitor_rut: str = Field(..., min_length=1)
    competitor_price: float = Field(..., ge=0)
    competitor_brand: Optional[str] = None


class AdjudicationCreate(BaseModel):
    licitation_id: int = Field(..., description="ID of the licitation")
    quotation_id: int = Field(..., description="ID of the quotation")
    status: AdjudicationStatus = Field(default=AdjudicationStatus.TOTAL, description="Only used when the adjudication is created")
    items: List[AwardedItem] = []
    non_awarded_items: List[NonAwardedItem] = []


class AdjudicationItemCreate(BaseModel):
    product_id: int = Field(..., description="Product ID")
    quantity: int = Field(..., gt=0, description="Awarded quantity")
    unit_price: float = Field(..., ge=0, description="Awarded unit price without IVA")
    product_name: Optional[str] = None


class AdjudicationItemResponse(BaseModel):
    id: int
    product_id: Optional[int] = None
    product_name: Optional[str] = None
    quantity: int
    unit_price: float

    model_config = ConfigDict(from_attributes=True)


class AdjudicationResponse(BaseModel):
    id: int
    licitation_id: int
    quotation_id: int
    status: AdjudicationStatus
    total_price_without_iva: float
    total_price_with_iva: float
    total_quantity: int
    adjudication_date: Optional[date] = None
    items: List[AdjudicationItemResponse] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class SkippedItem(BaseModel):
    """Side effect of a submission that could not be applied"""
    kind: str
    product_id: Optional[int] = None
    reason: str

    model_config = ConfigDict(from_attributes=True)


class AdjudicationSubmitResponse(BaseModel):
    adjudication: AdjudicationResponse
    skipped_items: List[SkippedItem] = []

    model_config = ConfigDict(from_attributes=True)


class AwardedQuantityUpdate(BaseModel):
    awarded_quantity: int = Field(..., ge=0, description="New awarded quantity, replaces the current one")
