"""Reads and writes for support agents, tickets and ratings."""

from typing import Iterable, List, Sequence

from sqlalchemy import select, update

from models.support import Agent, AgentRating, ChatMode, Ticket
from repositories.postgres_repo import PostgresRepository
from repositories.tables import support_agents, support_ratings, support_tickets


class SupportRepository(PostgresRepository):
    """Support desk queries used by agent assignment."""

    def list_online_agents(self) -> List[Agent]:
        """All agents currently flagged online, in table order."""
        stmt = select(
            support_agents.c.id,
            support_agents.c.user_id,
            support_agents.c.name,
            support_agents.c.is_online,
        ).where(support_agents.c.is_online.is_(True))
        rows = self.fetch_all(stmt, "agent directory")
        return [Agent.model_validate(row) for row in rows]

    def list_open_assignments(self, statuses: Sequence[str] = ("open",)) -> List[Ticket]:
        """Tickets in a workload status that already have an agent."""
        stmt = select(
            support_tickets.c.id,
            support_tickets.c.status,
            support_tickets.c.assigned_agent_id,
        ).where(
            support_tickets.c.status.in_(list(statuses)),
            support_tickets.c.assigned_agent_id.is_not(None),
        )
        rows = self.fetch_all(stmt, "workload")
        return [Ticket.model_validate(row) for row in rows]

    def list_agent_ratings(self, agent_ids: Iterable[str]) -> List[AgentRating]:
        """Ratings whose ticket was handled by one of ``agent_ids``."""
        ids = list(agent_ids)
        if not ids:
            return []
        stmt = (
            select(
                support_ratings.c.ticket_id,
                support_ratings.c.rating,
                support_tickets.c.assigned_agent_id.label("agent_id"),
            )
            .select_from(
                support_ratings.join(
                    support_tickets, support_ratings.c.ticket_id == support_tickets.c.id
                )
            )
            .where(support_tickets.c.assigned_agent_id.in_(ids))
        )
        rows = self.fetch_all(stmt, "ratings")
        return [AgentRating.model_validate(row) for row in rows]

    def assign_ticket(self, ticket_id: str, agent_user_id: str) -> int:
        """Hand the ticket's chat to an agent. Returns the number of rows updated."""
        stmt = (
            update(support_tickets)
            .where(support_tickets.c.id == ticket_id)
            .values(
                assigned_agent_id=agent_user_id,
                chat_mode=ChatMode.AGENT.value,
                agent_online=True,
            )
        )
        return self.execute(stmt, "ticket assignment")
