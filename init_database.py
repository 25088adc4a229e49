import sys
import logging

from sqlalchemy.exc import SQLAlchemyError

from moderno.config import settings
from moderno.database import Base, SessionLocal, engine
from moderno.models import User
from moderno.utils.auth import get_password_hash

# Configure logging
logging.basicConfig(level=logging.INFO,
                   format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def create_tables():
    Base.metadata.create_all(bind=engine)
    logger.info("Success: Create tables")


def seed_admin(db, username: str, password: str) -> bool:
    """
    Create the first admin account unless the username is already taken

    Returns:
        True when an account was created
    """
    if db.query(User).filter(User.username == username).first():
        logger.info(f"Admin '{username}' already exists, skipping")
        return False

    db.add(User(
        username=username,
        password_hash=get_password_hash(password),
        full_name="Administrator",
        role="admin",
        is_active=True
    ))
    db.commit()
    logger.info(f"Success: Create admin '{username}'")
    return True


def main() -> int:
    if not settings.ADMIN_PASSWORD:
        logger.error("ADMIN_PASSWORD environment variable not set")
        return 1

    try:
        create_tables()
        db = SessionLocal()
        try:
            seed_admin(db, settings.ADMIN_USERNAME, settings.ADMIN_PASSWORD)
        finally:
            db.close()
    except SQLAlchemyError as e:
        logger.error(f"Database initialisation failed: {str(e)}")
        return 1

    logger.info("Database initialization completed")
    return 0


if __name__ == "__main__":
    sys.exit(main())
