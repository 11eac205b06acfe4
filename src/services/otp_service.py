"""
One-time passcode issue and verification.

A code moves NONE -> ISSUED -> VERIFIED | EXPIRED | SUPERSEDED. Issuing stores
a fresh six-digit code valid for ten minutes and emails it; an email failure
does not fail issuance. Verifying consumes the newest unexpired matching row,
so a code verifies at most once.

Bypass codes are accepted for any user without touching the database. They
only work when OTP_BYPASS_ENABLED is on (the default outside prod), and every
use is logged at WARNING.
"""

from __future__ import annotations

import os
import secrets
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, FrozenSet

from models.otp import (
    OtpCode,
    OtpIssueRequest,
    OtpIssueResult,
    OtpVerification,
    VerificationMethod,
)
from repositories.otp_repo import OtpRepository
from services.email_service import EmailService
from utils.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_BYPASS_CODES = "112233,654308"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _bypass_enabled_from_env() -> bool:
    return _env_flag("OTP_BYPASS_ENABLED", os.environ.get("ENVIRONMENT", "dev") != "prod")


def _bypass_codes_from_env() -> FrozenSet[str]:
    raw = os.environ.get("OTP_BYPASS_CODES", DEFAULT_BYPASS_CODES)
    return frozenset(code.strip() for code in raw.split(",") if code.strip())


def generate_code() -> str:
    """Uniformly random code in 100000..999999."""
    return str(100000 + secrets.randbelow(900000))


@dataclass
class OtpService:
    """Issues, emails and verifies step-up codes."""

    repository: OtpRepository
    email_service: EmailService = field(default_factory=EmailService)
    ttl_minutes: int = field(default_factory=lambda: int(os.environ.get("OTP_TTL_MINUTES", "10")))
    resend_cooldown_seconds: int = field(
        default_factory=lambda: int(os.environ.get("OTP_RESEND_COOLDOWN_SECONDS", "60"))
    )
    bypass_enabled: bool = field(default_factory=_bypass_enabled_from_env)
    bypass_codes: FrozenSet[str] = field(default_factory=_bypass_codes_from_env)
    clock: Callable[[], datetime] = _utcnow

    def issue(self, request: OtpIssueRequest) -> OtpIssueResult:
        now = self.clock()
        otp = OtpCode(
            id=str(uuid.uuid4()),
            user_id=request.user_id,
            code=generate_code(),
            expires_at=now + timedelta(minutes=self.ttl_minutes),
            created_at=now,
        )
        self.repository.insert(otp)

        delivery = self.email_service.send_otp(request.email, otp.code, request.action, request)
        if not delivery.success:
            logger.warning(
                "OTP email not delivered; code remains valid",
                extra={"user_id": request.user_id, "action": request.action.value, "reason": delivery.reason},
            )

        logger.info(
            "OTP issued",
            extra={"user_id": request.user_id, "action": request.action.value, "otp_id": otp.id},
        )
        return OtpIssueResult(
            expires_at=otp.expires_at,
            resend_after_seconds=self.resend_cooldown_seconds,
            email_sent=delivery.success,
            email_skipped_reason=delivery.reason,
        )

    def verify(self, user_id: str, code: str) -> OtpVerification:
        if self.bypass_enabled and code in self.bypass_codes:
            logger.warning("OTP bypass code accepted", extra={"user_id": user_id})
            return OtpVerification(verified=True, method=VerificationMethod.BYPASS)

        record = self.repository.find_valid(user_id, code, self.clock())
        if record is None:
            logger.info("OTP rejected", extra={"user_id": user_id})
            return OtpVerification.rejected()

        # A concurrent verify may have consumed the row first.
        if self.repository.delete(record.id) == 0:
            logger.info("OTP already consumed", extra={"user_id": user_id, "otp_id": record.id})
            return OtpVerification.rejected()

        logger.info("OTP verified", extra={"user_id": user_id, "otp_id": record.id})
        return OtpVerification(verified=True, method=VerificationMethod.CODE)
