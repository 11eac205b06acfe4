"""Support desk models used by agent assignment."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from models.response import ApiModel


class TicketStatus(str, Enum):
    """Ticket statuses the assignment logic cares about."""

    OPEN = "open"
    CLOSED = "closed"


class ChatMode(str, Enum):
    """Who is answering the ticket's chat."""

    AI = "ai"
    AGENT = "agent"


class Agent(BaseModel):
    """Support agent row. ``user_id`` is the identity tickets point at."""

    id: str
    user_id: str
    name: str
    is_online: bool = False


class Ticket(BaseModel):
    """The subset of a support ticket read and written here."""

    id: str
    status: str
    assigned_agent_id: Optional[str] = None
    chat_mode: Optional[str] = None
    agent_online: bool = False


class AgentRating(BaseModel):
    """A customer rating resolved to the agent who handled the ticket."""

    ticket_id: str
    agent_id: str
    rating: float


class RatingSummary(BaseModel):
    """Mean rating and how many ratings produced it."""

    mean: float
    count: int = Field(ge=0)


class AgentScore(BaseModel):
    """One candidate's inputs and resulting assignment score."""

    user_id: str
    name: str
    workload: int
    rating: float
    rating_count: int
    score: float


class AssignmentRequest(ApiModel):
    """Body of the assignment endpoint."""

    ticket_id: str

    @field_validator("ticket_id")
    @classmethod
    def validate_ticket_id(cls, value: str) -> str:
        cleaned = (value or "").strip()
        if not cleaned:
            raise ValueError("ticketId must be provided")
        return cleaned


class AssignmentResult(ApiModel):
    """Outcome returned by the assignment endpoint."""

    assigned: bool
    success: Optional[bool] = None
    agent_name: Optional[str] = None
    agent_id: Optional[str] = None
    score: Optional[float] = None
    error: Optional[str] = None

    @classmethod
    def no_agents(cls) -> "AssignmentResult":
        return cls(assigned=False, error="No agents available")

    @classmethod
    def for_agent(cls, winner: AgentScore) -> "AssignmentResult":
        return cls(
            success=True,
            assigned=True,
            agent_name=winner.name,
            agent_id=winner.user_id,
            score=winner.score,
        )
