# procurement_api/modules/quotations/models.py

from sqlalchemy import Column, Integer, String, Float, DateTime, Text, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from procurement_api.core.database import Base
from enum import Enum as PyEnum


class QuotationStatus(str, PyEnum):
    CREATED = "creada"
    FINALIZED = "finalizada"


class QuotationAwardStatus(str, PyEnum):
    PENDING = "en_espera"
    AWARDED = "adjudicado"
    PARTIALLY_AWARDED = "adjudicado_parcial"
    NOT_AWARDED = "no_adjudicado"


class Currency(str, PyEnum):
    USD = "USD"
    EUR = "EUR"
    CLP = "CLP"
    ARS = "ARS"
    BRL = "BRL"
    UYU = "UYU"


class Quotation(Base):
    """Priced proposal against a licitation"""
    __tablename__ = "quotations"

    id = Column(Integer, primary_key=True, index=True)
    quotation_identifier = Column(String(100), unique=True, nullable=False, index=True)
    status = Column(String(20), nullable=False, default=QuotationStatus.CREATED.value)
    licitation_id = Column(Integer, ForeignKey("licitations.id"), nullable=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=True)
    description = Column(Text, nullable=True)
    observations = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    items = relationship("QuotationItem", back_populates="quotation",
                         cascade="all, delete-orphan", order_by="QuotationItem.id")

    __table_args__ = (
        CheckConstraint("status IN ('creada', 'finalizada')", name="chk_quotation_status"),
    )

    def __repr__(self):
        return f"<Quotation id={self.id} identifier={self.quotation_identifier}>"


class QuotationItem(Base):
    __tablename__ = "quotation_items"

    id = Column(Integer, primary_key=True, index=True)
    quotation_id = Column(Integer, ForeignKey("quotations.id", ondelete="CASCADE"), nullable=False, index=True)
    # Optional: free-text items only carry sku/name
    product_id = Column(Integer, ForeignKey("products.id"), nullable=True, index=True)
    product_name = Column(String(255), nullable=False)
    sku = Column(String(100), nullable=False)
    quantity = Column(Integer, nullable=False)
    price_without_iva = Column(Float, nullable=False)
    price_with_iva = Column(Float, nullable=False)
    iva_percentage = Column(Float, nullable=False, default=19)
    currency = Column(String(3), nullable=False, default=Currency.CLP.value)
    award_status = Column(String(30), nullable=False, default=QuotationAwardStatus.PENDING.value)
    # Cumulative across award submissions
    awarded_quantity = Column(Integer, nullable=False, default=0)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    quotation = relationship("Quotation", back_populates="items")

    __table_args__ = (
        CheckConstraint(
            "award_status IN ('en_espera', 'adjudicado', 'adjudicado_parcial', 'no_adjudicado')",
            name="chk_quotation_item_award_status"
        ),
    )
