from functools import lru_cache

from fastapi import Depends

from app.core.config import settings
from app.core.logger import logger
from app.db.models import AccountKind
from app.db.repository import AccountStore
from app.db.session import get_store
from app.services.account_service import AccountService
from app.services.admin_service import AdminService
from app.services.email_service import ConsoleEmailService, EmailService, SMTPEmailService


@lru_cache
def get_mailer() -> EmailService:
    if settings.MAIL_BACKEND == "console":
        return ConsoleEmailService()
    if settings.MAIL_BACKEND != "smtp":
        raise ValueError(f"Unknown MAIL_BACKEND: {settings.MAIL_BACKEND}")
    if not settings.EMAIL_USER or not settings.EMAIL_PASS:
        logger.warning("EMAIL_USER / EMAIL_PASS missing, OTP emails will fail to send")
    return SMTPEmailService()


async def get_patient_service(
    store: AccountStore = Depends(get_store),
    mailer: EmailService = Depends(get_mailer),
) -> AccountService:
    return AccountService(store, mailer, AccountKind.PATIENT)


async def get_doctor_service(
    store: AccountStore = Depends(get_store),
    mailer: EmailService = Depends(get_mailer),
) -> AccountService:
    return AccountService(store, mailer, AccountKind.DOCTOR)


async def get_admin_service(store: AccountStore = Depends(get_store)) -> AdminService:
    return AdminService(store)
