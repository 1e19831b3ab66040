"""Database initialization module.

Creates missing tables on app startup when AUTO_CREATE_SCHEMA is enabled.
Production deployments run the Alembic migrations instead.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError

from app.core.config import get_settings
from app.core.db import get_engine
from app.models import Base

logger = logging.getLogger(__name__)


def init_database_schema() -> None:
    settings = get_settings()
    if not settings.AUTO_CREATE_SCHEMA:
        logger.debug("AUTO_CREATE_SCHEMA disabled, skipping schema initialization")
        return

    try:
        Base.metadata.create_all(bind=get_engine())
    except SQLAlchemyError as exc:
        logger.error("Failed to initialize database schema: %s", exc)
        raise
    logger.info("Database schema initialized")
