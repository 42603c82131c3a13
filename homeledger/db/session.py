import logging
from contextlib import contextmanager
from typing import Iterator
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from ..core.config import settings
from ..core.errors import HomeLedgerError

logger = logging.getLogger(__name__)


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        # connections are shared across the ASGI worker threads
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.LOG_LEVEL.upper() == "DEBUG",
    **_engine_kwargs(settings.DATABASE_URL),
)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


@contextmanager
def commit_or_rollback(db: Session, action: str) -> Iterator[None]:
    """Commit the work done in the block, or roll it back and re-raise."""
    try:
        yield
        db.commit()
    except HomeLedgerError:
        db.rollback()
        raise
    except Exception as e:
        logger.error(f"Error while {action}: {str(e)}", exc_info=True)
        db.rollback()
        raise
