"""
Database initialization script.
"""
import logging
from diaryledger.db.session import SessionLocal, init_db
from diaryledger.services.diary_service import ensure_permission_levels

logger = logging.getLogger(__name__)


def seed_permission_levels() -> None:
    """Insert the diary permission levels if they are missing."""
    db = SessionLocal()
    try:
        ensure_permission_levels(db)
        db.commit()
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    logger.info("Initializing database...")
    init_db()
    seed_permission_levels()
    logger.info("Database initialized successfully!")
