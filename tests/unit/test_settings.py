"""
Deployment settings tests (no CDK synth required).

Run with: pytest tests/unit/test_settings.py -v
"""

from infrastructure.config.settings import Settings


def test_dev_defaults(monkeypatch):
    for name in (
        "ENVIRONMENT", "LOG_LEVEL", "OTP_BYPASS_ENABLED", "OTP_SENDER_EMAIL", "WORKLOAD_STATUSES"
    ):
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_environment()

    assert settings.environment == "dev"
    assert settings.db_instance_class == "t3.micro"
    assert settings.otp_bypass_enabled is True
    assert settings.otp_ttl_minutes == 10
    assert settings.otp_resend_cooldown_seconds == 60


def test_prod_overrides_disable_bypass(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "prod")
    monkeypatch.setenv("OTP_BYPASS_ENABLED", "true")
    monkeypatch.setenv("OTP_SENDER_EMAIL", "security@vaultbank.example")

    settings = Settings.from_environment()

    assert settings.db_instance_class == "t3.small"
    assert settings.otp_bypass_enabled is False
    assert settings.otp_sender_email == "security@vaultbank.example"


def test_lambda_environment():
    settings = Settings(environment="dev", otp_sender_email="otp@vaultbank.example")

    env = settings.lambda_environment()

    assert env["ENVIRONMENT"] == "dev"
    assert env["OTP_TTL_MINUTES"] == "10"
    assert env["OTP_BYPASS_ENABLED"] == "true"
    assert env["OTP_SENDER_EMAIL"] == "otp@vaultbank.example"
    assert env["WORKLOAD_STATUSES"] == "open"


def test_lambda_environment_omits_unset_sender():
    assert "OTP_SENDER_EMAIL" not in Settings().lambda_environment()


def test_log_level_is_honoured_in_prod(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "prod")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    settings = Settings.from_environment()

    assert settings.log_level == "DEBUG"
    assert settings.lambda_environment()["LOG_LEVEL"] == "DEBUG"


def test_jwt_authorizer_settings(monkeypatch):
    monkeypatch.setenv("AUTH_JWT_ISSUER", "https://auth.vaultbank.example")
    monkeypatch.setenv("AUTH_JWT_AUDIENCE", "web-app, mobile-app")

    settings = Settings.from_environment()

    assert settings.auth_jwt_issuer == "https://auth.vaultbank.example"
    assert settings.auth_jwt_audience == ("web-app", "mobile-app")


def test_jwt_authorizer_unset_by_default(monkeypatch):
    monkeypatch.delenv("AUTH_JWT_ISSUER", raising=False)
    monkeypatch.delenv("AUTH_JWT_AUDIENCE", raising=False)

    settings = Settings.from_environment()

    assert settings.auth_jwt_issuer is None
    assert settings.auth_jwt_audience == ()
