# procurement_api/modules/adjudications/models.py

import datetime
from sqlalchemy import Column, Integer, String, Float, Date, DateTime, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from procurement_api.core.database import Base
from enum import Enum as PyEnum


class AdjudicationStatus(str, PyEnum):
    TOTAL = "total"
    PARTIAL = "parcial"


class Adjudication(Base):
    """Award of quotation items for a licitation"""
    __tablename__ = "adjudications"

    id = Column(Integer, primary_key=True, index=True)
    quotation_id = Column(Integer, ForeignKey("quotations.id"), nullable=False, index=True)
    licitation_id = Column(Integer, ForeignKey("licitations.id"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default=AdjudicationStatus.TOTAL.value)
    total_price_without_iva = Column(Float, nullable=False, default=0)
    total_price_with_iva = Column(Float, nullable=False, default=0)
    total_quantity = Column(Integer, nullable=False, default=0)
    adjudication_date = Column(Date, nullable=False, default=datetime.date.today)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    items = relationship("AdjudicationItem", back_populates="adjudication",
                         cascade="all, delete-orphan", order_by="AdjudicationItem.id")

    # Later submissions for the same pair merge into this row
    __table_args__ = (
        UniqueConstraint('licitation_id', 'quotation_id', name='uq_adjudication_licitation_quotation'),
        CheckConstraint("status IN ('total', 'parcial')", name="chk_adjudication_status"),
    )

    def __repr__(self):
        return f"<Adjudication id={self.id} licitation={self.licitation_id} quotation={self.quotation_id}>"


class AdjudicationItem(Base):
    __tablename__ = "adjudication_items"

    id = Column(Integer, primary_key=True, index=True)
    adjudication_id = Column(Integer, ForeignKey("adjudications.id", ondelete="CASCADE"), nullable=False, index=True)
    # Plain reference: items for products missing from the catalog are still recorded
    product_id = Column(Integer, nullable=True, index=True)
    product_name = Column(String(255), nullable=True)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Float, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    adjudication = relationship("Adjudication", back_populates="items")
