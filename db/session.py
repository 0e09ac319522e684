# WORKFLOW: Database engine and session handling for the prices table.
# Used by: Catalog store adapter, API dependencies, bootstrap script
# Functions:
# 1. get_db() - Request-scoped session for FastAPI endpoints and the CLI
# 2. init_db() - Create the prices table if it does not exist
# 3. check_db_connection() - SELECT 1 for the readiness check
#
# Engine and session factory are built on first use from settings.database_url.

from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker
from core.config import settings
import logging

logger = logging.getLogger(__name__)

_engine = None
_SessionLocal = None


def get_engine():
    """Get the catalog database engine."""
    global _engine
    if _engine is None:
        # SQLite connections are shared with the thread pool running the pipelines
        connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}
        _engine = create_engine(
            settings.database_url,
            pool_pre_ping=True,
            echo=settings.debug,
            connect_args=connect_args,
        )
        logger.info(f"Catalog database engine created for {_engine.url.render_as_string(hide_password=True)}")
    return _engine


def get_session_factory():
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=get_engine())
    return _SessionLocal


def get_db():
    """
    Yield a session for one request and close it afterwards.

    Anything left uncommitted when the request fails is rolled back.
    """
    db = get_session_factory()()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_db():
    """
    Create the prices table if it is missing.
    """
    from db.models import Base

    try:
        Base.metadata.create_all(bind=get_engine())
    except Exception as e:
        logger.error(f"Failed to create prices table: {e}")
        raise
    logger.info("Prices table is ready")


def check_db_connection() -> bool:
    """
    Check if the catalog database answers a trivial query.
    """
    try:
        with get_engine().connect() as conn:
            conn.execute(text("SELECT 1")).fetchone()
        return True
    except Exception as e:
        logger.error(f"Database connection check failed: {e}")
        return False
