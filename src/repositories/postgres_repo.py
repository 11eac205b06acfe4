"""PostgreSQL repository base using SQLAlchemy Core."""

from typing import List, Optional

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql import Executable

from utils.error_handling import UpstreamError
from utils.logging_config import get_logger

logger = get_logger(__name__)


class PostgresRepository:
    """
    Thin wrapper to keep statements organized and parameterized.

    Driver errors are re-raised as ``UpstreamError`` labelled with the
    operation that failed, so handlers can report which stage broke.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    def fetch_all(self, stmt: Executable, label: str) -> List[dict]:
        """Execute a SELECT and return every row as a dict."""
        try:
            with self.engine.connect() as conn:
                return [dict(row._mapping) for row in conn.execute(stmt)]
        except SQLAlchemyError as exc:
            logger.error("Database read failed", extra={"operation": label, "error": str(exc)})
            raise UpstreamError(f"{label} read failed") from exc

    def fetch_one(self, stmt: Executable, label: str) -> Optional[dict]:
        """Execute a SELECT and return the first row as a dict."""
        try:
            with self.engine.connect() as conn:
                row = conn.execute(stmt).fetchone()
                return dict(row._mapping) if row else None
        except SQLAlchemyError as exc:
            logger.error("Database read failed", extra={"operation": label, "error": str(exc)})
            raise UpstreamError(f"{label} read failed") from exc

    def execute(self, stmt: Executable, label: str) -> int:
        """Execute a write in its own transaction and return the affected row count."""
        try:
            with self.engine.begin() as conn:
                return conn.execute(stmt).rowcount
        except SQLAlchemyError as exc:
            logger.error("Database write failed", extra={"operation": label, "error": str(exc)})
            raise UpstreamError(f"{label} write failed") from exc
