from sqlmodel import SQLModel
from .account import ACCOUNT_MODELS, Account, AccountKind, Doctor, Patient
from .otp import PendingOTP

__all__ = [
    "SQLModel",
    "ACCOUNT_MODELS",
    "Account",
    "AccountKind",
    "Doctor",
    "Patient",
    "PendingOTP",
]
