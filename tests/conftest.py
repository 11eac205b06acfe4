"""
Pytest configuration to ensure paths are set up correctly for tests.

This allows imports like `from handlers import main` to work when running
tests, simulating the Lambda environment where code is deployed from the
src/ directory. Database-backed tests run against in-memory SQLite.
"""

import os
import sys
import uuid
from pathlib import Path

import boto3
import pytest


def _ensure_paths_on_sys_path() -> None:
    """Add repository root AND src/ to sys.path if missing.

    The src/ directory is added to simulate Lambda's import behavior,
    where Code.from_asset("src") makes src/ the root of the package.
    """
    repo_root = Path(__file__).resolve().parents[1]
    src_root = repo_root / "src"

    # Add repo root first (for imports like infrastructure.*)
    root_str = str(repo_root)
    if root_str not in sys.path:
        sys.path.insert(0, root_str)

    # Add src/ for Lambda-style imports (from handlers import ...)
    src_str = str(src_root)
    if src_str not in sys.path:
        sys.path.insert(0, src_str)


_ensure_paths_on_sys_path()

# Ensure boto3 has offline-friendly defaults so tests do not require AWS access.
os.environ.setdefault("AWS_REGION", "eu-west-2")
os.environ.setdefault("AWS_DEFAULT_REGION", "eu-west-2")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "test")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "test")
os.environ.setdefault("AWS_SESSION_TOKEN", "test")
os.environ.setdefault("ENVIRONMENT", "dev")

# Create a default boto3 session so clients do not error during construction.
boto3.setup_default_session(region_name="eu-west-2")

from sqlalchemy import create_engine, insert  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402


@pytest.fixture
def engine():
    """Fresh in-memory database with every table created."""
    from repositories.tables import metadata

    eng = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    metadata.create_all(eng)
    yield eng
    eng.dispose()


class Seeder:
    """Insert support desk rows with minimal boilerplate."""

    def __init__(self, engine):
        self.engine = engine

    def _insert(self, table, **values):
        with self.engine.begin() as conn:
            conn.execute(insert(table).values(**values))

    def agent(self, user_id: str, name: str = None, online: bool = True) -> str:
        from repositories.tables import support_agents

        self._insert(
            support_agents,
            id=str(uuid.uuid4()),
            user_id=user_id,
            name=name or user_id.title(),
            is_online=online,
        )
        return user_id

    def ticket(self, status: str = "open", agent: str = None, ticket_id: str = None) -> str:
        from repositories.tables import support_tickets

        ticket_id = ticket_id or str(uuid.uuid4())
        self._insert(
            support_tickets,
            id=ticket_id,
            status=status,
            assigned_agent_id=agent,
            chat_mode="ai",
            agent_online=False,
        )
        return ticket_id

    def ratings(self, agent: str, *values: int) -> None:
        """One closed ticket per rating, handled by ``agent``."""
        from repositories.tables import support_ratings

        for value in values:
            ticket_id = self.ticket(status="closed", agent=agent)
            self._insert(support_ratings, id=str(uuid.uuid4()), ticket_id=ticket_id, rating=value)


@pytest.fixture
def seed(engine):
    return Seeder(engine)
