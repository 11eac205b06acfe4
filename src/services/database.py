"""
Database engine shared by every service in a warm Lambda.

The URL comes from DATABASE_URL, or is assembled from the RDS credentials
secret named by DB_SECRET_ARN. Nothing connects at import time.
"""

from __future__ import annotations

import json
import os
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import QueuePool

from utils.error_handling import UpstreamError
from utils.logging_config import get_logger

logger = get_logger(__name__)

_engine: Optional[Engine] = None


def get_db_engine() -> Engine:
    """Get or create the pooled SQLAlchemy engine."""
    global _engine
    if _engine is None:
        db_url = os.environ.get("DATABASE_URL")
        if not db_url:
            secret_arn = os.environ.get("DB_SECRET_ARN")
            db_url = _secret_to_db_url(secret_arn) if secret_arn else None
        if not db_url:
            raise UpstreamError("Database is not configured")
        _engine = create_engine(
            db_url,
            poolclass=QueuePool,
            pool_size=1,
            max_overflow=2,
            pool_pre_ping=True,
            pool_recycle=300,
        )
    return _engine


def reset_engine() -> None:
    """Dispose the cached engine so the next call rebuilds it."""
    global _engine
    if _engine is not None:
        _engine.dispose()
    _engine = None


def _secret_to_db_url(secret_arn: str) -> Optional[str]:
    """Build a SQLAlchemy URL from an RDS secret."""
    try:
        sm = boto3.client("secretsmanager")
        secret = json.loads(sm.get_secret_value(SecretId=secret_arn)["SecretString"])
    except (BotoCoreError, ClientError, KeyError, ValueError) as exc:
        logger.warning("Failed to load DB secret", extra={"error": str(exc)})
        return None

    host = secret.get("host")
    port = secret.get("port", 5432)
    username = secret.get("username")
    password = secret.get("password")
    dbname = secret.get("dbname", "postgres")
    if not (host and username and password):
        return None
    return f"postgresql+psycopg2://{username}:{password}@{host}:{port}/{dbname}"
