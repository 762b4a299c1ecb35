from datetime import datetime

from sqlmodel import SQLModel


class PendingOTP(SQLModel):
    email: str
    code: str
    expires_at: datetime

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or datetime.utcnow()) > self.expires_at
