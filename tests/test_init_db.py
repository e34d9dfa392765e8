# tests/test_init_db.py

from sqlalchemy import create_engine, inspect
from sqlalchemy.pool import StaticPool

from procurement_api.core.init_db import create_tables, drop_tables


def test_create_and_drop_tables():
    """Test creating the schema from the models and dropping it again"""
    # Setup
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)

    # Call the init functions
    create_tables(bind=engine)
    tables = set(inspect(engine).get_table_names())
    drop_tables(bind=engine)

    # Verify the result
    assert {"licitations", "adjudications", "deliveries"} <= tables
    assert inspect(engine).get_table_names() == []
    engine.dispose()
