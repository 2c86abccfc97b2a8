from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
import logging

logger = logging.getLogger(__name__)


Base = declarative_base()


# ------------------------------------------------------------------------------
# DATABASE ENGINE & SESSION
# ------------------------------------------------------------------------------
class Database:
    """Owns the engine and session factory for one application instance."""

    def __init__(self, url: str):
        self.url = url
        connect_args = {}
        if url.startswith("sqlite"):
            # sessions are handed between FastAPI's threadpool workers
            connect_args["check_same_thread"] = False

        try:
            self.engine = create_engine(
                url,
                connect_args=connect_args,
                pool_pre_ping=True,   # prevents "MySQL server has gone away" issues
                pool_recycle=280,     # helps with idle connection timeouts
            )
            self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        except Exception as e:
            logger.error(f"❌ Failed to create SQLAlchemy engine: {e}")
            raise

    def init(self) -> None:
        """Create tables (runs once on startup)."""
        from string_analyzer.models import string_record  # noqa: F401  ensure models are registered
        Base.metadata.create_all(bind=self.engine)
        logger.info("✅ Database tables created successfully.")

    def session(self) -> Iterator[Session]:
        db = self.SessionLocal()
        try:
            yield db
        finally:
            db.close()

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info("Database connections closed.")


# ------------------------------------------------------------------------------
# DB DEPENDENCY
# ------------------------------------------------------------------------------
def get_db(request: Request) -> Iterator[Session]:
    """Dependency to provide a DB session from the app's own Database."""
    yield from request.app.state.database.session()
