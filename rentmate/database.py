# database.py
"""
SQLAlchemy database connection and session management.

This module provides:
- Database engine configuration (Azure SQL via pymssql, or SQLite locally)
- Session factory for dependency injection
- Connection utilities

Usage:
     from rentmate.database import get_session

     # In FastAPI routes:
     @router.get("/items")
     def get_items(db: Session = Depends(get_session)):
          return db.query(Item).all()
"""
import logging
from contextlib import contextmanager
from typing import Generator, Optional
from urllib.parse import quote_plus

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from rentmate import config

logger = logging.getLogger(__name__)


def build_database_url() -> str:
     """
     Resolve the database URL.

     DATABASE_URL wins; otherwise an MS SQL Server URL is built from the
     DB_* variables; otherwise a local SQLite file is used.
     """
     if config.DATABASE_URL:
          return config.DATABASE_URL
     if config.DB_SERVER:
          safe_user = quote_plus(config.DB_USER or "")
          safe_pass = quote_plus(config.DB_PASS or "")
          return (
               f"mssql+pymssql://{safe_user}:{safe_pass}"
               f"@{config.DB_SERVER}:{config.DB_PORT}/{config.DB_NAME}"
          )
     return "sqlite:///./rentmate.db"


def build_engine(url: Optional[str] = None) -> Engine:
     url = url or build_database_url()
     if url.startswith("sqlite"):
          return create_engine(
               url,
               connect_args={"check_same_thread": False},
               echo=config.SQL_ECHO,
          )
     return create_engine(
          url,
          pool_size=5,
          max_overflow=10,
          pool_timeout=30,
          pool_recycle=1800,  # Recycle connections after 30 minutes
          echo=config.SQL_ECHO,
     )


engine = build_engine()

# Session factory
SessionLocal = sessionmaker(
     bind=engine,
     autocommit=False,
     autoflush=False,
     expire_on_commit=False,
)


def get_session() -> Generator[Session, None, None]:
     """
     FastAPI dependency that provides a database session.

     Commits when the request handler returns, rolls back if it raises, so a
     rejected operation never leaves a partial transition behind.
     """
     session = SessionLocal()
     try:
          yield session
          session.commit()
     except Exception:
          session.rollback()
          raise
     finally:
          session.close()


@contextmanager
def get_session_context(factory: Optional[sessionmaker] = None) -> Generator[Session, None, None]:
     """
     Context manager for database sessions (for use outside FastAPI routes).

     ``factory`` defaults to ``SessionLocal``; the push channel passes the
     app's own factory.

     Usage:
          with get_session_context() as db:
               leases = db.query(LeaseAgreement).all()
     """
     session = (factory or SessionLocal)()
     try:
          yield session
          session.commit()
     except Exception:
          session.rollback()
          raise
     finally:
          session.close()


def init_db(bind: Optional[Engine] = None) -> None:
     """
     Create all tables defined in the models if they don't exist.
     For production, use Alembic migrations instead.
     """
     from rentmate.models import Base
     Base.metadata.create_all(bind=bind or engine)


def check_connection() -> bool:
     """Return True if the database answers a trivial query."""
     try:
          with engine.connect() as conn:
               conn.execute(text("SELECT 1"))
          return True
     except SQLAlchemyError:
          logger.exception("Database connection failed")
          return False
