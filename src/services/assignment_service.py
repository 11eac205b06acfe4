"""
Support ticket agent assignment.

Picks the online agent with the best balance of customer rating and current
open workload, then hands the ticket's chat to that agent:

    score = rating * 2 - workload * 3 + 10

One point of average rating is worth two thirds of a pending ticket, so a
slightly lower rated but idle agent beats a busy star performer. The +10
offset does not change the ranking; it keeps common scores positive.

Reads (directory, workload, ratings) have no side effects, so any failure
before the final write aborts cleanly. The read snapshot is not locked: two
concurrent assignments can both pick the same least-loaded agent.
"""

from __future__ import annotations

import os
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from models.support import (
    Agent,
    AgentRating,
    AgentScore,
    AssignmentResult,
    RatingSummary,
    Ticket,
    TicketStatus,
)
from repositories.support_repo import SupportRepository
from utils.error_handling import NotFoundError
from utils.logging_config import get_logger

logger = get_logger(__name__)

# Mean rating given to agents with no ratings yet: a little above the
# midpoint of the 1-5 scale so new agents are not ranked below everyone.
NEUTRAL_RATING = 3.5

RATING_WEIGHT = 2
WORKLOAD_WEIGHT = 3
SCORE_OFFSET = 10


def _workload_statuses_from_env() -> Tuple[str, ...]:
    raw = os.environ.get("WORKLOAD_STATUSES", TicketStatus.OPEN.value)
    statuses = tuple(s.strip() for s in raw.split(",") if s.strip())
    return statuses or (TicketStatus.OPEN.value,)


def count_workload(
    tickets: Iterable[Ticket], statuses: Sequence[str] = (TicketStatus.OPEN.value,)
) -> Dict[str, int]:
    """
    Count assigned tickets per agent.

    Only tickets in one of ``statuses`` with an assigned agent count. Agents
    without such tickets are absent from the result.
    """
    return dict(
        Counter(
            t.assigned_agent_id
            for t in tickets
            if t.assigned_agent_id and t.status in statuses
        )
    )


def aggregate_ratings(
    ratings: Iterable[AgentRating], agent_ids: Iterable[str]
) -> Dict[str, RatingSummary]:
    """Mean rating per candidate agent, falling back to NEUTRAL_RATING."""
    by_agent: Dict[str, List[float]] = {agent_id: [] for agent_id in agent_ids}
    for rating in ratings:
        if rating.agent_id in by_agent:
            by_agent[rating.agent_id].append(rating.rating)

    summaries = {}
    for agent_id, values in by_agent.items():
        if values:
            summaries[agent_id] = RatingSummary(mean=sum(values) / len(values), count=len(values))
        else:
            summaries[agent_id] = RatingSummary(mean=NEUTRAL_RATING, count=0)
    return summaries


def score_agent(rating: float, workload: int) -> float:
    return rating * RATING_WEIGHT - workload * WORKLOAD_WEIGHT + SCORE_OFFSET


def rank_agents(
    agents: Iterable[Agent],
    workload: Mapping[str, int],
    ratings: Mapping[str, RatingSummary],
) -> List[AgentScore]:
    """Score every agent, best first. Equal scores are ordered by user_id."""
    scored = []
    for agent in agents:
        load = workload.get(agent.user_id, 0)
        summary = ratings.get(agent.user_id) or RatingSummary(mean=NEUTRAL_RATING, count=0)
        scored.append(
            AgentScore(
                user_id=agent.user_id,
                name=agent.name,
                workload=load,
                rating=summary.mean,
                rating_count=summary.count,
                score=score_agent(summary.mean, load),
            )
        )
    scored.sort(key=lambda s: (-s.score, s.user_id))
    return scored


@dataclass
class AssignmentService:
    """Runs directory lookup, workload and rating reads, scoring and the final write."""

    repository: SupportRepository
    workload_statuses: Tuple[str, ...] = field(default_factory=_workload_statuses_from_env)

    def assign(self, ticket_id: str) -> AssignmentResult:
        agents = self.repository.list_online_agents()
        if not agents:
            logger.info("No online agents; ticket left unassigned", extra={"ticket_id": ticket_id})
            return AssignmentResult.no_agents()

        agent_ids = [agent.user_id for agent in agents]
        workload = count_workload(
            self.repository.list_open_assignments(self.workload_statuses),
            self.workload_statuses,
        )
        ratings = aggregate_ratings(self.repository.list_agent_ratings(agent_ids), agent_ids)

        ranked = rank_agents(agents, workload, ratings)
        logger.debug(
            "Agent scores",
            extra={"ticket_id": ticket_id, "scores": [s.model_dump() for s in ranked]},
        )

        winner = ranked[0]
        if self.repository.assign_ticket(ticket_id, winner.user_id) == 0:
            raise NotFoundError(f"Ticket {ticket_id} not found")

        logger.info(
            "Ticket assigned",
            extra={
                "ticket_id": ticket_id,
                "agent_id": winner.user_id,
                "score": winner.score,
                "candidates": len(ranked),
            },
        )
        return AssignmentResult.for_agent(winner)
