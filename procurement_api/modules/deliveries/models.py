# procurement_api/modules/deliveries/models.py

from sqlalchemy import Column, Integer, String, Date, DateTime, Text, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from procurement_api.core.database import Base
from enum import Enum as PyEnum
from typing import Iterable


class DeliveryItemStatus(str, PyEnum):
    PENDING = "pendiente_entrega"
    ON_WAY = "en_camino"
    DELIVERED = "entregado"
    ISSUE = "problema_entrega"


class DeliveryStatus(str, PyEnum):
    PENDING = "pendiente"
    PARTIAL = "parcial"
    COMPLETED = "entregada"
    ISSUE = "con_problemas"


def compute_delivery_status(item_statuses: Iterable[str]) -> DeliveryStatus:
    """
    Derives the status of a delivery from the statuses of its items.
    An issue on any item wins over a partial delivery.
    """
    statuses = [DeliveryItemStatus(value) for value in item_statuses]
    if not statuses:
        return DeliveryStatus.PENDING
    if any(value == DeliveryItemStatus.ISSUE for value in statuses):
        return DeliveryStatus.ISSUE
    delivered = sum(1 for value in statuses if value == DeliveryItemStatus.DELIVERED)
    if delivered == len(statuses):
        return DeliveryStatus.COMPLETED
    if delivered > 0:
        return DeliveryStatus.PARTIAL
    return DeliveryStatus.PENDING


class Delivery(Base):
    """Fulfillment record of a licitation, one per licitation"""
    __tablename__ = "deliveries"

    id = Column(Integer, primary_key=True, index=True)
    licitation_id = Column(Integer, ForeignKey("licitations.id"), nullable=False, index=True)
    observations = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    items = relationship("DeliveryItem", back_populates="delivery",
                         cascade="all, delete-orphan", order_by="DeliveryItem.id")
    invoices = relationship("Invoice", back_populates="delivery",
                            cascade="all, delete-orphan", order_by="Invoice.id")

    __table_args__ = (
        UniqueConstraint('licitation_id', name='uq_delivery_licitation'),
    )

    @property
    def status(self) -> DeliveryStatus:
        return compute_delivery_status(item.status for item in self.items)

    def __repr__(self):
        return f"<Delivery id={self.id} licitation={self.licitation_id}>"


class DeliveryItem(Base):
    __tablename__ = "delivery_items"

    id = Column(Integer, primary_key=True, index=True)
    delivery_id = Column(Integer, ForeignKey("deliveries.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, nullable=True, index=True)
    product_code = Column(String(100), nullable=False)
    product_name = Column(String(255), nullable=False)
    quantity = Column(Integer, nullable=False)
    status = Column(String(30), nullable=False, default=DeliveryItemStatus.PENDING.value)
    estimated_date = Column(Date, nullable=False)
    actual_date = Column(Date, nullable=True)
    observations = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    delivery = relationship("Delivery", back_populates="items")

    __table_args__ = (
        CheckConstraint(
            "status IN ('pendiente_entrega', 'en_camino', 'entregado', 'problema_entrega')",
            name="chk_delivery_item_status"
        ),
    )


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True, index=True)
    delivery_id = Column(Integer, ForeignKey("deliveries.id", ondelete="CASCADE"), nullable=False, index=True)
    invoice_number = Column(String(100), nullable=False)
    file_name = Column(String(255), nullable=True)
    file_url = Column(String(500), nullable=True)
    issue_date = Column(Date, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    delivery = relationship("Delivery", back_populates="invoices")
