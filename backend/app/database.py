"""
SQLAlchemy engine and session. Supports PostgreSQL and SQLite (for local testing without Docker).
Sync sessions, one per request via get_db; the engine's pool is the only shared state.
"""
import logging

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, declarative_base

from app.config import settings

logger = logging.getLogger(__name__)

_is_sqlite = settings.is_sqlite
if _is_sqlite:
    _connect_args = {"check_same_thread": False, "timeout": settings.db_connect_timeout_seconds}
    _pool_args = {}
else:
    _connect_args = {"connect_timeout": settings.db_connect_timeout_seconds}
    _pool_args = {"pool_size": settings.db_pool_size, "max_overflow": settings.db_max_overflow}

engine = create_engine(
    settings.database_url,
    pool_pre_ping=not _is_sqlite,
    connect_args=_connect_args,
    echo=False,  # Set True for SQL logging during development
    **_pool_args,
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


if _is_sqlite:
    @event.listens_for(engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
        """SQLite leaves foreign keys off per connection; cascades depend on them."""
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def init_db():
    """Create all tables. Call once at app startup; safe to call again."""
    # Import all models so they register with Base before create_all
    from app.models import user, store, rating  # noqa: F401
    Base.metadata.create_all(bind=engine)
    logger.info("Database schema ready (%s)", engine.url.get_backend_name())


def get_db():
    """Dependency: yield a DB session, close after request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
