"""Storage for issued one-time passcodes."""

from datetime import datetime
from typing import Optional

from sqlalchemy import delete, insert, select

from models.otp import OtpCode
from repositories.postgres_repo import PostgresRepository
from repositories.tables import otp_codes


class OtpRepository(PostgresRepository):
    """Insert, look up and consume rows in ``otp_codes``."""

    def insert(self, otp: OtpCode) -> None:
        self.execute(insert(otp_codes).values(**otp.model_dump()), "otp insert")

    def find_valid(self, user_id: str, code: str, now: datetime) -> Optional[OtpCode]:
        """Most recently issued unexpired row matching owner and code."""
        stmt = (
            select(otp_codes)
            .where(
                otp_codes.c.user_id == user_id,
                otp_codes.c.code == code,
                otp_codes.c.expires_at >= now,
            )
            .order_by(otp_codes.c.created_at.desc(), otp_codes.c.id.desc())
            .limit(1)
        )
        row = self.fetch_one(stmt, "otp lookup")
        return OtpCode.model_validate(row) if row else None

    def delete(self, otp_id: str) -> int:
        return self.execute(delete(otp_codes).where(otp_codes.c.id == otp_id), "otp delete")
