"""SQLAlchemy Core table definitions for the hosted database tables we touch."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
)

metadata = MetaData()

support_agents = Table(
    "support_agents",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("user_id", String(36), nullable=False, unique=True),
    Column("name", String(255), nullable=False),
    Column("is_online", Boolean, nullable=False, default=False),
)

support_tickets = Table(
    "support_tickets",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("status", String(32), nullable=False, default="open"),
    Column("assigned_agent_id", String(36), nullable=True),
    Column("chat_mode", String(32), nullable=True),
    Column("agent_online", Boolean, nullable=False, default=False),
)

support_ratings = Table(
    "support_ratings",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("ticket_id", String(36), ForeignKey("support_tickets.id"), nullable=False),
    Column("rating", Integer, nullable=False),
)

otp_codes = Table(
    "otp_codes",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("user_id", String(36), nullable=False, index=True),
    Column("code", String(6), nullable=False),
    Column("expires_at", DateTime(timezone=True), nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
)
