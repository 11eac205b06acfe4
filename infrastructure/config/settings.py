"""
Environment-specific deployment settings.

Cost-optimized defaults for development/testing, with production overrides.
"""

from dataclasses import dataclass
import os
from typing import Optional, Tuple


@dataclass
class Settings:
    """Deployment settings with cost-optimized defaults."""

    environment: str = "dev"
    aws_region: str = "eu-west-2"

    # Database Configuration (Cost-optimized)
    db_instance_class: str = "t3.micro"  # Free tier eligible
    db_allocated_storage: int = 20  # Minimum GB

    # Lambda Configuration
    lambda_memory_mb: int = 256
    lambda_timeout_seconds: int = 15
    log_level: str = "INFO"

    # OTP Configuration
    otp_ttl_minutes: int = 10
    otp_resend_cooldown_seconds: int = 60
    otp_sender_email: Optional[str] = None  # Verified SES identity; unset skips email
    otp_bypass_enabled: bool = True  # Test-mode master codes; never on in prod

    # Caller identity (JWT authorizer on the OTP routes)
    auth_jwt_issuer: Optional[str] = None
    auth_jwt_audience: Tuple[str, ...] = ()

    # Assignment Configuration
    workload_statuses: str = "open"

    @classmethod
    def from_environment(cls) -> "Settings":
        """Load settings from environment variables."""
        env = os.environ.get("ENVIRONMENT", "dev")
        region = os.environ.get("AWS_REGION", cls.aws_region)
        log_level = os.environ.get("LOG_LEVEL", cls.log_level)
        sender = os.environ.get("OTP_SENDER_EMAIL") or None
        workload_statuses = os.environ.get("WORKLOAD_STATUSES", cls.workload_statuses)
        jwt_issuer = os.environ.get("AUTH_JWT_ISSUER") or None
        jwt_audience = tuple(
            aud.strip() for aud in os.environ.get("AUTH_JWT_AUDIENCE", "").split(",") if aud.strip()
        )

        # Production overrides
        if env == "prod":
            return cls(
                environment="prod",
                aws_region=region,
                db_instance_class="t3.small",  # Upgrade for prod
                db_allocated_storage=50,
                lambda_memory_mb=512,
                lambda_timeout_seconds=30,
                log_level=log_level,
                otp_sender_email=sender,
                otp_bypass_enabled=False,
                auth_jwt_issuer=jwt_issuer,
                auth_jwt_audience=jwt_audience,
                workload_statuses=workload_statuses,
            )

        bypass = os.environ.get("OTP_BYPASS_ENABLED", "true").lower() == "true"
        return cls(
            environment=env,
            aws_region=region,
            log_level=log_level,
            otp_sender_email=sender,
            otp_bypass_enabled=bypass,
            auth_jwt_issuer=jwt_issuer,
            auth_jwt_audience=jwt_audience,
            workload_statuses=workload_statuses,
        )

    def lambda_environment(self) -> dict:
        """Runtime environment variables shared by the API Lambda."""
        env = {
            "ENVIRONMENT": self.environment,
            "LOG_LEVEL": self.log_level,
            "OTP_TTL_MINUTES": str(self.otp_ttl_minutes),
            "OTP_RESEND_COOLDOWN_SECONDS": str(self.otp_resend_cooldown_seconds),
            "OTP_BYPASS_ENABLED": "true" if self.otp_bypass_enabled else "false",
            "WORKLOAD_STATUSES": self.workload_statuses,
            "SES_REGION": self.aws_region,
        }
        if self.otp_sender_email:
            env["OTP_SENDER_EMAIL"] = self.otp_sender_email
        return env
