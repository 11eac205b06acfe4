"""
Handler for POST /otp/email.

Sends a code that the caller already generated. This endpoint never returns an
HTTP error: bad payloads and provider failures come back as 200 with
``success: false, skipped: true`` so the verification screen stays usable.
"""

from __future__ import annotations

from typing import Optional

from models.otp import EmailDeliveryResult, OtpEmailRequest
from utils.error_handling import ValidationError, json_response, preflight_response
from utils.logging_config import get_logger
from utils.validators import http_method, parse_body

logger = get_logger(__name__)

_email_service: Optional["EmailService"] = None


def _get_email_service():
    """Lazy-load EmailService."""
    global _email_service
    if _email_service is None:
        from services.email_service import EmailService

        _email_service = EmailService()
    return _email_service


def lambda_handler(event, context):
    """Email an OTP for one of the supported flows."""
    if http_method(event) == "OPTIONS":
        return preflight_response()

    try:
        request = parse_body(event, OtpEmailRequest)
        result = _get_email_service().send_otp(
            request.email, request.otp, request.action, request
        )
    except ValidationError as exc:
        logger.warning("Rejected OTP email request", extra={"error": str(exc)})
        result = EmailDeliveryResult.soft_failure(str(exc))
    except Exception as exc:  # soft failure by contract
        logger.exception("Error sending OTP email")
        result = EmailDeliveryResult.soft_failure(str(exc) or "Unknown error")

    return json_response(200, result.to_body())
