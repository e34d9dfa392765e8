from procurement_api.core.database import Base, engine
import logging
import subprocess
import os

# Every models module must be imported so the tables are registered on Base.metadata
from procurement_api.modules.catalog import models as catalog_models  # noqa: F401
from procurement_api.modules.licitations import models as licitation_models  # noqa: F401
from procurement_api.modules.quotations import models as quotation_models  # noqa: F401
from procurement_api.modules.adjudications import models as adjudication_models  # noqa: F401
from procurement_api.modules.deliveries import models as delivery_models  # noqa: F401

# Configure logging
logger = logging.getLogger(__name__)


# Use Alembic to run migrations
def run_migrations():
    try:
        logger.info("Running database migrations with Alembic")
        # Get the absolute path of the project root
        project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))

        subprocess.check_call(
            ["alembic", "upgrade", "head"],
            cwd=project_root
        )
        logger.info("Database migrations completed successfully")
    except Exception as e:
        logger.error(f"Error running migrations: {str(e)}")
        raise


# Create all SQL tables
def create_tables(bind=None):
    """
    Creates every table directly from the models, without Alembic.
    Used for SQLite development databases and tests.
    """
    try:
        Base.metadata.create_all(bind=bind or engine)
        logger.info("SQL tables created successfully")
    except Exception as e:
        logger.error(f"Error creating SQL tables: {str(e)}")
        raise


def drop_tables(bind=None):
    """
    Drops every table registered on the models metadata.
    """
    Base.metadata.drop_all(bind=bind or engine)
    logger.info("SQL tables dropped")


if __name__ == "__main__":
    # Configure logging for script execution
    logging.basicConfig(level=logging.INFO)

    import argparse
    parser = argparse.ArgumentParser(description='Initialize the procurement database')
    parser.add_argument('--skip-migrations', action='store_true', help='Create the tables from the models instead of running Alembic')

    args = parser.parse_args()

    if args.skip_migrations:
        create_tables()
    else:
        run_migrations()
