# procurement_api/modules/catalog/models.py

from sqlalchemy import Column, Integer, String, DateTime, Text, JSON
from sqlalchemy.sql import func
from procurement_api.core.database import Base


class Client(Base):
    """Buyer organisation that publishes licitations"""
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    identifier = Column(String(50), unique=True, nullable=False)
    contacts = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Client id={self.id} identifier={self.identifier}>"


class Product(Base):
    """Catalog product; stock and competitor history are mutated by adjudications"""
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    brand = Column(String(100), nullable=True)
    model = Column(String(100), nullable=True)
    code = Column(String(100), nullable=True, index=True)
    details = Column(Text, nullable=True)
    stock_quantity = Column(Integer, nullable=True, default=0)

    # List of competitor wins: date, licitation_id, competitor_name,
    # competitor_rut, competitor_price, competitor_brand
    adjudication_history = Column(JSON, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Product id={self.id} name={self.name}>"
