"""Pydantic models for API payloads and database rows."""

from models.otp import (  # noqa: F401
    EmailDeliveryResult,
    OtpAction,
    OtpCode,
    OtpEmailDetails,
    OtpEmailRequest,
    OtpIssueBody,
    OtpIssueRequest,
    OtpIssueResult,
    OtpVerification,
    OtpVerifyRequest,
    VerificationMethod,
)
from models.response import ApiModel  # noqa: F401
from models.support import (  # noqa: F401
    Agent,
    AgentRating,
    AgentScore,
    AssignmentRequest,
    AssignmentResult,
    ChatMode,
    RatingSummary,
    Ticket,
    TicketStatus,
)
