"""
Repository tests against SQLite.

Run with: pytest tests/unit/test_repositories.py -v
"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from models.otp import OtpCode
from repositories.otp_repo import OtpRepository
from repositories.support_repo import SupportRepository
from utils.error_handling import UpstreamError

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _otp(otp_id, user_id="user-1", code="482913", created=NOW, ttl_minutes=10):
    return OtpCode(
        id=otp_id,
        user_id=user_id,
        code=code,
        created_at=created,
        expires_at=created + timedelta(minutes=ttl_minutes),
    )


class TestSupportRepository:
    """Directory, workload and rating reads."""

    def test_lists_only_online_agents(self, engine, seed):
        seed.agent("alice")
        seed.agent("bob", online=False)

        agents = SupportRepository(engine).list_online_agents()

        assert [a.user_id for a in agents] == ["alice"]
        assert agents[0].is_online is True

    def test_open_assignments_skip_unassigned_and_closed(self, engine, seed):
        seed.agent("alice")
        open_id = seed.ticket(agent="alice")
        seed.ticket(agent=None)
        seed.ticket(status="closed", agent="alice")

        tickets = SupportRepository(engine).list_open_assignments(("open",))

        assert [t.id for t in tickets] == [open_id]

    def test_ratings_resolve_through_ticket_agent(self, engine, seed):
        seed.agent("alice")
        seed.agent("bob")
        seed.ratings("alice", 5, 3)
        seed.ratings("bob", 1)

        ratings = SupportRepository(engine).list_agent_ratings(["alice"])

        assert sorted(r.rating for r in ratings) == [3, 5]
        assert {r.agent_id for r in ratings} == {"alice"}

    def test_ratings_for_no_agents_skip_the_query(self):
        repo = SupportRepository(engine=None)
        assert repo.list_agent_ratings([]) == []

    def test_read_errors_become_upstream_errors(self):
        bare = create_engine(
            "sqlite://", poolclass=StaticPool, connect_args={"check_same_thread": False}
        )
        with pytest.raises(UpstreamError, match="agent directory read failed"):
            SupportRepository(bare).list_online_agents()

    def test_write_errors_become_upstream_errors(self):
        bare = create_engine(
            "sqlite://", poolclass=StaticPool, connect_args={"check_same_thread": False}
        )
        with pytest.raises(UpstreamError, match="ticket assignment write failed"):
            SupportRepository(bare).assign_ticket("t-1", "alice")


class TestOtpRepository:
    """Lookup honours owner, expiry and recency."""

    def test_find_valid_returns_matching_row(self, engine):
        repo = OtpRepository(engine)
        repo.insert(_otp("otp-1"))

        found = repo.find_valid("user-1", "482913", NOW + timedelta(minutes=5))

        assert found is not None
        assert found.id == "otp-1"

    def test_find_valid_ignores_other_owner(self, engine):
        repo = OtpRepository(engine)
        repo.insert(_otp("otp-1", user_id="someone-else"))

        assert repo.find_valid("user-1", "482913", NOW) is None

    def test_find_valid_ignores_expired(self, engine):
        repo = OtpRepository(engine)
        repo.insert(_otp("otp-1"))

        assert repo.find_valid("user-1", "482913", NOW + timedelta(minutes=11)) is None

    def test_most_recent_match_wins(self, engine):
        repo = OtpRepository(engine)
        repo.insert(_otp("older", created=NOW))
        repo.insert(_otp("newer", created=NOW + timedelta(minutes=2)))

        found = repo.find_valid("user-1", "482913", NOW + timedelta(minutes=3))

        assert found.id == "newer"

    def test_delete_reports_rowcount(self, engine):
        repo = OtpRepository(engine)
        repo.insert(_otp("otp-1"))

        assert repo.delete("otp-1") == 1
        assert repo.delete("otp-1") == 0
