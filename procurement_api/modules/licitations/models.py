# procurement_api/modules/licitations/models.py

from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from procurement_api.core.database import Base
from enum import Enum as PyEnum


class LicitationStatus(str, PyEnum):
    PENDING = "Pending"
    QUOTED = "Quoted"
    PARTIAL_ADJUDICATION = "Partial Adjudication"
    NOT_ADJUDICATED = "Not Adjudicated"
    TOTAL_ADJUDICATION = "Total Adjudication"


class Licitation(Base):
    """Public tender requesting a list of products and quantities"""
    __tablename__ = "licitations"

    id = Column(Integer, primary_key=True, index=True)
    start_date = Column(Date, nullable=False)
    deadline_date = Column(Date, nullable=False)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    call_number = Column(String(255), nullable=False)
    internal_number = Column(String(255), nullable=False)
    # Recomputed from the adjudications, never set from a request
    status = Column(
        String(50),
        nullable=False,
        default=LicitationStatus.PENDING.value
    )
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    products = relationship("LicitationProduct", back_populates="licitation",
                            cascade="all, delete-orphan", order_by="LicitationProduct.id")

    __table_args__ = (
        CheckConstraint("deadline_date > start_date", name="chk_licitation_date_range"),
        CheckConstraint(
            "status IN ('Pending', 'Quoted', 'Partial Adjudication', 'Not Adjudicated', 'Total Adjudication')",
            name="chk_licitation_status"
        ),
    )

    def __repr__(self):
        return f"<Licitation id={self.id} call_number={self.call_number} status={self.status}>"


class LicitationProduct(Base):
    """Requested product line of a licitation"""
    __tablename__ = "licitation_products"

    id = Column(Integer, primary_key=True, index=True)
    licitation_id = Column(Integer, ForeignKey("licitations.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, server_default=func.now())

    licitation = relationship("Licitation", back_populates="products")
