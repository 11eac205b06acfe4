"""
EmailService tests with a mocked SES client.

Run with: pytest tests/unit/test_email_service.py -v
"""

from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from models.otp import OtpAction, OtpEmailDetails
from services.email_service import EmailService, build_otp_message


def _service(sender="security@vaultbank.example"):
    service = EmailService(sender=sender, region="eu-west-2", ttl_minutes=10)
    service._client = MagicMock()
    return service


class TestSendOtp:
    """Delivery outcomes are always soft."""

    def test_success_returns_message_id(self):
        service = _service()
        service._client.send_email.return_value = {"MessageId": "ses-123"}

        result = service.send_otp("jane@example.com", "482913", OtpAction.LOGIN)

        assert result.success is True
        assert result.to_body() == {"success": True, "emailId": "ses-123"}
        kwargs = service._client.send_email.call_args.kwargs
        assert kwargs["Destination"] == {"ToAddresses": ["jane@example.com"]}
        assert "security@vaultbank.example" in kwargs["FromEmailAddress"]
        simple = kwargs["Content"]["Simple"]
        assert simple["Subject"]["Data"] == "VaultBank Login Verification Code"
        assert "482913" in simple["Body"]["Text"]["Data"]

    def test_missing_sender_skips_without_calling_ses(self):
        service = _service(sender=None)

        result = service.send_otp("jane@example.com", "482913", OtpAction.LOGIN)

        assert result.to_body() == {
            "success": False,
            "skipped": True,
            "reason": "Email service not configured",
        }
        service._client.send_email.assert_not_called()

    def test_ses_client_error_is_soft(self):
        service = _service()
        service._client.send_email.side_effect = ClientError(
            {"Error": {"Code": "MessageRejected", "Message": "Email address is not verified."}},
            "SendEmail",
        )

        result = service.send_otp("jane@example.com", "482913", OtpAction.TRANSFER)

        assert result.success is False
        assert result.skipped is True
        assert result.reason == "Email service error: MessageRejected"

    def test_connection_error_is_soft(self):
        service = _service()
        service._client.send_email.side_effect = EndpointConnectionError(
            endpoint_url="https://email.eu-west-2.amazonaws.com"
        )

        result = service.send_otp("jane@example.com", "482913", OtpAction.WITHDRAWAL)

        assert result.success is False
        assert result.skipped is True

    def test_sender_read_from_env(self, monkeypatch):
        monkeypatch.setenv("OTP_SENDER_EMAIL", "otp@vaultbank.example")
        assert EmailService().sender == "otp@vaultbank.example"


class TestBuildOtpMessage:
    """Per-action wording."""

    @pytest.mark.parametrize(
        "action, subject",
        [
            (OtpAction.LOGIN, "VaultBank Login Verification Code"),
            (OtpAction.TRANSFER, "VaultBank Transfer Verification Code"),
            (OtpAction.WITHDRAWAL, "VaultBank Withdrawal Verification"),
            (OtpAction.LINK_ACCOUNT, "VaultBank Account Link Verification"),
            (OtpAction.DOMESTIC_TRANSFER, "VaultBank Domestic Wire Verification"),
            (OtpAction.INTERNATIONAL_TRANSFER, "VaultBank International Wire Verification"),
            (OtpAction.CRYPTO_WITHDRAWAL, "VaultBank Crypto Withdrawal Verification"),
        ],
    )
    def test_subject_per_action(self, action, subject):
        message = build_otp_message(action, "482913")
        assert message.subject == subject
        assert "482913" in message.text
        assert "482913" in message.html
        assert "10 minutes" in message.text

    def test_transfer_mentions_amount(self):
        message = build_otp_message(
            OtpAction.INTERNATIONAL_TRANSFER, "482913", OtpEmailDetails(amount="1500")
        )
        assert "international wire transfer of $1500" in message.text

    def test_crypto_mentions_currency(self):
        message = build_otp_message(
            OtpAction.CRYPTO_WITHDRAWAL, "482913", OtpEmailDetails(currency="BTC", amount="900")
        )
        assert "withdrawing BTC ($900)" in message.text

    def test_withdrawal_without_amount_says_funds(self):
        message = build_otp_message(OtpAction.WITHDRAWAL, "482913")
        assert "withdrawing funds" in message.text

    def test_link_account_names_provider(self):
        message = build_otp_message(
            OtpAction.LINK_ACCOUNT,
            "482913",
            OtpEmailDetails(account_type="paypal", account_identifier="j***@example.com"),
        )
        assert "linked to Paypal (j***@example.com)" in message.text

    def test_html_is_escaped(self):
        message = build_otp_message(
            OtpAction.LINK_ACCOUNT, "482913", OtpEmailDetails(account_type="<script>")
        )
        assert "<script>" not in message.html
