"""
Pytest configuration file for all tests.
This file is automatically loaded by pytest.
"""

import os
import sys
import itertools
from types import SimpleNamespace
import datetime
import pytest
from dotenv import load_dotenv

# Add the project root to the Python path
sys.path.insert(0, os.path.abspath(os.path.dirname(os.path.dirname(__file__))))

# Load test environment variables
def load_test_env():
    """Load environment variables from .env.test file"""
    # Get the project root directory
    root_dir = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))

    # Path to .env.test file
    env_test_path = os.path.join(root_dir, '.env.test')

    # Load environment variables from .env.test
    if os.path.exists(env_test_path):
        load_dotenv(env_test_path, override=True)
        return True
    return False

# Load test environment variables before the application settings are imported
load_test_env()
os.environ.setdefault("DATABASE_URL", "sqlite://")

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from procurement_api.core.init_db import create_tables, drop_tables
from procurement_api.modules.catalog.models import Client, Product
from procurement_api.modules.licitations.models import Licitation, LicitationProduct, LicitationStatus
from procurement_api.modules.quotations.models import Quotation, QuotationItem

_sequence = itertools.count(1)


@pytest.fixture
def engine():
    """
    In-memory SQLite engine shared by every connection of a test
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(bind=engine)
    yield engine
    drop_tables(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    """
    Database session against the in-memory schema
    """
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def seed(db):
    """
    Factory creating a client, two catalog products (P1, P2), a licitation
    requesting `lines` and a quotation for it quoting `quoted`.

    Quantities are given per product key, e.g. lines={"P1": 10}.
    """
    def _seed(lines=None, quoted=None, stock=100, quotation_licitation=True):
        lines = {"P1": 10} if lines is None else lines
        quoted = {"P1": 10, "P2": 5} if quoted is None else quoted
        number = next(_sequence)

        client = Client(name="Hospital Regional", identifier=f"61.602.{number:03d}-1", contacts=[])
        products = {
            "P1": Product(name="Guantes de nitrilo", brand="Medix", code=f"GN-{number}", stock_quantity=stock),
            "P2": Product(name="Mascarilla N95", brand="Medix", code=None, stock_quantity=stock),
        }
        db.add(client)
        db.add_all(products.values())
        db.flush()

        licitation = Licitation(
            start_date=datetime.date(2024, 1, 1),
            deadline_date=datetime.date(2024, 2, 1),
            client_id=client.id,
            call_number=f"CALL-{number}",
            internal_number=f"INT-{number}",
            status=LicitationStatus.PENDING.value,
        )
        for key, quantity in lines.items():
            licitation.products.append(LicitationProduct(product_id=products[key].id, quantity=quantity))
        db.add(licitation)
        db.flush()

        quotation = Quotation(
            quotation_identifier=f"COT-2024-{number:03d}",
            licitation_id=licitation.id if quotation_licitation else None,
            client_id=client.id,
        )
        quotation_items = {}
        for key, quantity in quoted.items():
            item = QuotationItem(
                product_id=products[key].id,
                product_name=products[key].name,
                sku=f"SKU-{key}",
                quantity=quantity,
                price_without_iva=100,
                price_with_iva=119,
            )
            quotation.items.append(item)
            quotation_items[key] = item
        db.add(quotation)
        db.commit()

        return SimpleNamespace(
            client=client,
            products=products,
            licitation=licitation,
            quotation=quotation,
            quotation_items=quotation_items,
        )

    return _seed
