from datetime import datetime
from enum import Enum
from typing import Optional

from sqlmodel import SQLModel, Field

from app.core.utils import full_name


class AccountKind(str, Enum):
    PATIENT = "patient"
    DOCTOR = "doctor"


class Account(SQLModel):
    kind: AccountKind
    email: str = Field(index=True)
    first_name: str
    last_name: str
    password_hash: str
    is_verified: bool = Field(default=False)
    created_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def name(self) -> str:
        return full_name(self.first_name, self.last_name)


class Patient(Account):
    kind: AccountKind = AccountKind.PATIENT


class Doctor(Account):
    kind: AccountKind = AccountKind.DOCTOR
    is_approved: bool = Field(default=False)
    specialization: Optional[str] = None
    experience_years: Optional[int] = None
    clinic_name: Optional[str] = None
    registration_id: Optional[str] = None

    @property
    def is_pending_approval(self) -> bool:
        return self.is_verified and not self.is_approved


ACCOUNT_MODELS = {
    AccountKind.PATIENT: Patient,
    AccountKind.DOCTOR: Doctor,
}
