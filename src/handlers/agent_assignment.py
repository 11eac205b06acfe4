"""
Handler for the agent assignment endpoint (/tickets/assign).

Called right after a support ticket is created. OPTIONS is answered as a CORS
preflight; every other method runs the assignment.
"""

from __future__ import annotations

import uuid
from typing import Optional

from models.support import AssignmentRequest
from utils.error_handling import AppError, json_response, preflight_response, to_response
from utils.logging_config import get_logger
from utils.validators import http_method, parse_body

logger = get_logger(__name__)

# Lazy-loaded service to avoid import-time DB connections
_assignment_service: Optional["AssignmentService"] = None


def _get_assignment_service():
    """Lazy-load AssignmentService."""
    global _assignment_service
    if _assignment_service is None:
        from repositories.support_repo import SupportRepository
        from services.assignment_service import AssignmentService
        from services.database import get_db_engine

        _assignment_service = AssignmentService(SupportRepository(get_db_engine()))
    return _assignment_service


def lambda_handler(event, context):
    """Assign the best online agent to the ticket in the request body."""
    if http_method(event) == "OPTIONS":
        return preflight_response()

    correlation_id = str(uuid.uuid4())
    try:
        request = parse_body(event, AssignmentRequest)
        result = _get_assignment_service().assign(request.ticket_id)
    except AppError as exc:
        logger.error(
            "Agent assignment failed",
            extra={"correlation_id": correlation_id, "error": str(exc)},
        )
        return to_response(exc, assigned=False, error=str(exc), correlation_id=correlation_id)
    except Exception as exc:
        logger.exception("Agent assignment failed", extra={"correlation_id": correlation_id})
        return json_response(
            500,
            {
                "error": str(exc) or "Unknown error",
                "assigned": False,
                "correlation_id": correlation_id,
            },
        )

    return json_response(200, result.to_body())
