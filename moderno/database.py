import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from moderno.config import settings

logger = logging.getLogger(__name__)


def build_engine(database_url: str):
    """
    Create the SQLAlchemy engine for the given URL.

    MySQL connections get the utf8mb4 charset (Vietnamese content) and are
    recycled hourly; SQLite is only used for local runs and tests.
    """
    if database_url.startswith("sqlite"):
        return create_engine(database_url, connect_args={"check_same_thread": False})

    return create_engine(
        database_url,
        connect_args={
            'charset': 'utf8mb4',  # Support complet des caractères Unicode
            'connect_timeout': 30,
        },
        pool_recycle=3600,
        pool_pre_ping=True
    )


engine = build_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """
    Yield a database session for the duration of one request
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
