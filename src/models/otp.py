"""One-time passcode models."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from models.response import ApiModel

OTP_PATTERN = r"^\d{6}$"


class OtpAction(str, Enum):
    """Flows that request step-up verification."""

    LOGIN = "login"
    TRANSFER = "transfer"
    WITHDRAWAL = "withdrawal"
    LINK_ACCOUNT = "link_account"
    DOMESTIC_TRANSFER = "domestic_transfer"
    INTERNATIONAL_TRANSFER = "international_transfer"
    CRYPTO_WITHDRAWAL = "crypto_withdrawal"


class VerificationMethod(str, Enum):
    """How a verification succeeded."""

    CODE = "code"
    BYPASS = "bypass"


class OtpCode(BaseModel):
    """Stored code row."""

    id: str
    user_id: str
    code: str
    expires_at: datetime
    created_at: datetime


def _validate_email(value: str) -> str:
    cleaned = (value or "").strip()
    if "@" not in cleaned:
        raise ValueError("a valid email address is required")
    return cleaned


class OtpEmailDetails(ApiModel):
    """Optional wording for the email, depending on the action."""

    amount: Optional[str] = None
    currency: Optional[str] = None
    account_type: Optional[str] = None
    account_identifier: Optional[str] = None


class OtpEmailRequest(OtpEmailDetails):
    """Body of the OTP email-send endpoint."""

    email: str
    otp: str = Field(pattern=OTP_PATTERN)
    action: OtpAction

    check_email = field_validator("email")(_validate_email)


class EmailDeliveryResult(ApiModel):
    """Result of an email send; failures are soft."""

    success: bool
    email_id: Optional[str] = None
    skipped: Optional[bool] = None
    reason: Optional[str] = None

    @classmethod
    def soft_failure(cls, reason: str) -> "EmailDeliveryResult":
        return cls(success=False, skipped=True, reason=reason)


class OtpIssueBody(OtpEmailDetails):
    """Body of the OTP issue endpoint. Owner and address come from the token."""

    action: OtpAction = OtpAction.LOGIN


class OtpIssueRequest(OtpIssueBody):
    """Issue request bound to an authenticated caller."""

    user_id: str = Field(min_length=1)
    email: str

    check_email = field_validator("email")(_validate_email)


class OtpIssueResult(ApiModel):
    """Issue outcome. The code itself is only ever sent by email."""

    success: bool = True
    expires_at: datetime
    resend_after_seconds: int
    email_sent: bool
    email_skipped_reason: Optional[str] = None


class OtpVerifyRequest(ApiModel):
    """Body of the OTP verify endpoint. The owner comes from the token."""

    code: str = Field(pattern=OTP_PATTERN)


class OtpVerification(ApiModel):
    """Verify outcome."""

    verified: bool
    method: Optional[VerificationMethod] = None
    reason: Optional[str] = None

    @classmethod
    def rejected(cls) -> "OtpVerification":
        return cls(verified=False, reason="invalid_or_expired")
