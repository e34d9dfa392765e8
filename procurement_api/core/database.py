from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from procurement_api.core.config import settings
import logging
import urllib.parse

# Configure logging
logger = logging.getLogger(__name__)


def build_database_url() -> str:
    """
    Returns the SQLAlchemy URL, either DATABASE_URL or one assembled from the DB_* settings
    """
    if settings.DATABASE_URL:
        return settings.DATABASE_URL

    # URL encode the password to handle special characters
    encoded_password = urllib.parse.quote_plus(settings.DB_PASSWORD)
    return (
        f"postgresql+psycopg2://{settings.DB_USER}:{encoded_password}"
        f"@{settings.DB_SERVER}:{settings.DB_PORT}/{settings.DB_NAME}"
    )


SQLALCHEMY_DATABASE_URL = build_database_url()

if SQLALCHEMY_DATABASE_URL.startswith("sqlite"):
    logger.info(f"Connecting to SQLite database: {SQLALCHEMY_DATABASE_URL}")
    engine = create_engine(
        SQLALCHEMY_DATABASE_URL,
        echo=settings.DB_ECHO,
        connect_args={"check_same_thread": False},  # SQLite specific argument
    )
else:
    # Log connection info (without sensitive data)
    logger.info(f"Connecting to PostgreSQL: {settings.DB_SERVER}/{settings.DB_NAME} with user {settings.DB_USER}")
    engine = create_engine(
        SQLALCHEMY_DATABASE_URL,
        echo=settings.DB_ECHO,
        pool_pre_ping=True,
    )

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    """
    Dependency for getting a database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
