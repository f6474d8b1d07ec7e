import logging
import time

from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import declarative_base, sessionmaker

from cloud_kitchen.core.config import settings

logger = logging.getLogger(__name__)


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        # FastAPI runs sync endpoints in a threadpool
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


engine = create_engine(settings.DATABASE_URL, **_engine_kwargs(settings.DATABASE_URL))
# Repositories hand ORM objects back after the session closes.
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
Base = declarative_base()


def init_db(session_factory=None, retries: int = None, wait_seconds: int = None) -> None:
    """Create tables, retrying while the database container comes up."""
    # Models must be registered on Base.metadata before create_all.
    from cloud_kitchen.domain import models  # noqa: F401

    session_factory = session_factory or SessionLocal
    bind = session_factory.kw["bind"]
    retries = retries if retries is not None else settings.DB_CONNECT_RETRIES
    wait_seconds = wait_seconds if wait_seconds is not None else settings.DB_CONNECT_WAIT_SECONDS

    for attempt in range(1, retries + 1):
        try:
            logger.info("Attempting DB connection (%d/%d)...", attempt, retries)
            Base.metadata.create_all(bind=bind)
            logger.info("DB connected and tables created.")
            return
        except OperationalError as e:
            if attempt == retries:
                logger.error("Could not connect to DB after %d attempts: %s", retries, e)
                raise
            logger.warning("DB not ready yet. Waiting %ss...", wait_seconds)
            time.sleep(wait_seconds)
