"""
OTP email delivery through Amazon SES.

Delivery problems never raise: every failure becomes a soft
``EmailDeliveryResult(success=False, skipped=True)`` so the calling flow can
still complete verification (for example with a bypass code in test mode).
"""

from __future__ import annotations

import html
import os
from dataclasses import dataclass, field
from typing import Dict, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from models.otp import EmailDeliveryResult, OtpAction, OtpEmailDetails
from utils.logging_config import get_logger

logger = get_logger(__name__)

BRAND = "VaultBank"


@dataclass(frozen=True)
class OtpMessage:
    """Rendered email content."""

    subject: str
    text: str
    html: str


def _amount_phrase(details: OtpEmailDetails, prefix: str = " of ") -> str:
    return f"{prefix}${details.amount}" if details.amount else ""


def _content_for(action: OtpAction, details: OtpEmailDetails) -> Dict[str, str]:
    """Subject, heading, description and warning for each flow."""
    if action is OtpAction.LOGIN:
        return {
            "subject": f"{BRAND} Login Verification Code",
            "title": "Login Verification",
            "description": f"You are attempting to log in to your {BRAND} account.",
            "warning": "If you did not attempt to log in, ignore this email and change your password immediately.",
        }
    if action is OtpAction.TRANSFER:
        return {
            "subject": f"{BRAND} Transfer Verification Code",
            "title": "Transfer Verification",
            "description": f"You are initiating a transfer{_amount_phrase(details)} from your {BRAND} account.",
            "warning": "If you did not initiate this transfer, contact our support team immediately.",
        }
    if action is OtpAction.CRYPTO_WITHDRAWAL:
        currency = f" {details.currency}" if details.currency else " cryptocurrency"
        amount = f" (${details.amount})" if details.amount else ""
        return {
            "subject": f"{BRAND} Crypto Withdrawal Verification",
            "title": "Crypto Withdrawal Verification",
            "description": f"You are withdrawing{currency}{amount} from your {BRAND} account.",
            "warning": "Crypto transactions are irreversible. If you did not initiate this withdrawal, contact support immediately.",
        }
    if action is OtpAction.DOMESTIC_TRANSFER:
        return {
            "subject": f"{BRAND} Domestic Wire Verification",
            "title": "Domestic Wire Transfer Verification",
            "description": f"You are initiating a domestic wire transfer{_amount_phrase(details)}.",
            "warning": "If you did not initiate this wire transfer, contact our support team immediately.",
        }
    if action is OtpAction.INTERNATIONAL_TRANSFER:
        return {
            "subject": f"{BRAND} International Wire Verification",
            "title": "International Wire Transfer Verification",
            "description": f"You are initiating an international wire transfer{_amount_phrase(details)}.",
            "warning": "International transfers may incur additional fees. If you did not initiate this transfer, contact support immediately.",
        }
    if action is OtpAction.WITHDRAWAL:
        return {
            "subject": f"{BRAND} Withdrawal Verification",
            "title": "Withdrawal Verification",
            "description": f"You are withdrawing{_amount_phrase(details, ' ') or ' funds'} from your {BRAND} account.",
            "warning": "If you did not initiate this withdrawal, contact our support team immediately.",
        }

    if details.account_type:
        target = f"Your account is being linked to {details.account_type.capitalize()}"
    else:
        target = f"A payment account is being linked to your {BRAND} account"
    if details.account_identifier:
        target = f"{target} ({details.account_identifier})"
    return {
        "subject": f"{BRAND} Account Link Verification",
        "title": "External Payment Account Link Request",
        "description": f"{target}.",
        "warning": "If you did not initiate this account linking, contact our support team immediately.",
    }


def build_otp_message(
    action: OtpAction, code: str, details: Optional[OtpEmailDetails] = None, ttl_minutes: int = 10
) -> OtpMessage:
    """Plain text plus a minimal HTML body for an OTP email."""
    content = _content_for(action, details or OtpEmailDetails())
    expiry = f"This code expires in {ttl_minutes} minutes."
    tip = f"Never share this code with anyone. {BRAND} staff will never ask for it."

    text = "\n\n".join(
        [content["title"], content["description"], f"Your verification code: {code}", expiry, tip, content["warning"]]
    )
    paragraphs = [content["description"], expiry, tip, content["warning"]]
    body = "".join(f"<p>{html.escape(p)}</p>" for p in paragraphs)
    rendered = (
        f"<h2>{html.escape(content['title'])}</h2>"
        f"<p style=\"font-size:28px;letter-spacing:6px;font-family:monospace\">{html.escape(code)}</p>"
        f"{body}"
    )
    return OtpMessage(subject=content["subject"], text=text, html=rendered)


@dataclass
class EmailService:
    """Sends OTP emails via SES v2. Unconfigured sender means every send is skipped."""

    sender: Optional[str] = field(default_factory=lambda: os.environ.get("OTP_SENDER_EMAIL"))
    region: str = field(
        default_factory=lambda: os.environ.get("SES_REGION")
        or os.environ.get("AWS_REGION")
        or "eu-west-2"
    )
    ttl_minutes: int = field(default_factory=lambda: int(os.environ.get("OTP_TTL_MINUTES", "10")))

    def __post_init__(self) -> None:
        self._client = None

    @property
    def client(self):
        """Lazy SES client so unconfigured environments never build one."""
        if self._client is None:
            self._client = boto3.client("sesv2", region_name=self.region)
        return self._client

    def send_otp(
        self,
        email: str,
        code: str,
        action: OtpAction,
        details: Optional[OtpEmailDetails] = None,
    ) -> EmailDeliveryResult:
        if not self.sender:
            logger.warning("OTP_SENDER_EMAIL is not configured; skipping email send")
            return EmailDeliveryResult.soft_failure("Email service not configured")

        message = build_otp_message(action, code, details, self.ttl_minutes)
        try:
            response = self.client.send_email(
                FromEmailAddress=f"{BRAND} Security <{self.sender}>",
                Destination={"ToAddresses": [email]},
                Content={
                    "Simple": {
                        "Subject": {"Data": message.subject},
                        "Body": {
                            "Text": {"Data": message.text},
                            "Html": {"Data": message.html},
                        },
                    }
                },
            )
        except ClientError as exc:
            code_name = exc.response.get("Error", {}).get("Code", "Unknown")
            logger.error(
                "SES rejected OTP email",
                extra={"action": action.value, "error": code_name},
            )
            return EmailDeliveryResult.soft_failure(f"Email service error: {code_name}")
        except BotoCoreError as exc:
            logger.error("OTP email send failed", extra={"action": action.value, "error": str(exc)})
            return EmailDeliveryResult.soft_failure(str(exc))

        message_id = response.get("MessageId")
        logger.info("OTP email sent", extra={"action": action.value, "email_id": message_id})
        return EmailDeliveryResult(success=True, email_id=message_id)
