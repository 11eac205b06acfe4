"""Handlers for POST /otp/issue and POST /otp/verify."""

from __future__ import annotations

import uuid
from typing import Optional

from models.otp import OtpIssueBody, OtpIssueRequest, OtpVerifyRequest
from utils.error_handling import (
    AppError,
    UnauthorizedError,
    json_response,
    preflight_response,
    to_response,
)
from utils.logging_config import get_logger
from utils.validators import caller_identity, http_method, parse_body

logger = get_logger(__name__)

# Lazy-loaded service to avoid import-time DB connections
_otp_service: Optional["OtpService"] = None


def _get_otp_service():
    """Lazy-load OtpService."""
    global _otp_service
    if _otp_service is None:
        from repositories.otp_repo import OtpRepository
        from services.database import get_db_engine
        from services.otp_service import OtpService

        _otp_service = OtpService(OtpRepository(get_db_engine()))
    return _otp_service


def issue_handler(event, context):
    """
    Generate, store and email a new code for the caller.

    The owner and address are the token's ``sub`` and ``email`` claims; any
    ``userId`` or ``email`` in the body is ignored. The response never
    contains the code.
    """
    if http_method(event) == "OPTIONS":
        return preflight_response()

    correlation_id = str(uuid.uuid4())
    try:
        user_id, email = caller_identity(event)
        if email is None:
            raise UnauthorizedError("Token has no email claim")
        body = parse_body(event, OtpIssueBody)
        request = OtpIssueRequest(user_id=user_id, email=email, **body.model_dump())
        result = _get_otp_service().issue(request)
    except AppError as exc:
        logger.error("OTP issue failed", extra={"correlation_id": correlation_id, "error": str(exc)})
        return to_response(exc, correlation_id=correlation_id)
    except Exception:
        logger.exception("OTP issue failed", extra={"correlation_id": correlation_id})
        return json_response(
            500, {"message": "Failed to issue verification code", "correlation_id": correlation_id}
        )

    return json_response(200, result.to_body())


def verify_handler(event, context):
    """Check a code against the caller's own codes. A wrong or expired code is a 200."""
    if http_method(event) == "OPTIONS":
        return preflight_response()

    correlation_id = str(uuid.uuid4())
    try:
        user_id, _ = caller_identity(event)
        request = parse_body(event, OtpVerifyRequest)
        result = _get_otp_service().verify(user_id, request.code)
    except AppError as exc:
        logger.error("OTP verify failed", extra={"correlation_id": correlation_id, "error": str(exc)})
        return to_response(exc, verified=False, correlation_id=correlation_id)
    except Exception:
        logger.exception("OTP verify failed", extra={"correlation_id": correlation_id})
        return json_response(
            500,
            {"message": "Failed to verify code", "verified": False, "correlation_id": correlation_id},
        )

    return json_response(200, result.to_body())
