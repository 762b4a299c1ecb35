from datetime import datetime, timedelta

from starlette.concurrency import run_in_threadpool

from app.core.config import settings
from app.core.exceptions import (
    AccountNotFound,
    AlreadyRegistered,
    AlreadyVerified,
    DeliveryFailure,
    EmailNotVerified,
    InvalidCredentials,
    InvalidInput,
    NoPendingCode,
    OTPExpired,
    OTPMismatch,
    PendingApproval,
)
from app.core.logger import logger
from app.core.security import create_access_token, dummy_password_hash, get_password_hash, verify_password
from app.core.utils import generate_otp, normalize_email
from app.db.models import ACCOUNT_MODELS, Account, AccountKind, Doctor, PendingOTP
from app.db.repository import AccountStore
from app.schemas.auth import LoginRequest, LoginResponse, SignupRequest
from app.services.email_service import LOGIN, SIGNUP, EmailService


class AccountService:
    """
    Signup, OTP verification and login for one kind of account.

    Patients and doctors share this flow; the doctor variant additionally
    requires admin approval before login.
    """

    def __init__(self, store: AccountStore, mailer: EmailService, kind: AccountKind):
        self.store = store
        self.mailer = mailer
        self.kind = kind

    async def signup(self, data: SignupRequest) -> Account:
        email = normalize_email(data.email)
        profile = data.model_dump(exclude={"email", "password"})
        password_hash = await run_in_threadpool(get_password_hash, data.password)

        async with self.store.lock(self.kind, email):
            existing = await self.store.get_account(self.kind, email)
            if existing and existing.is_verified:
                raise AlreadyRegistered()

            # An unverified account is replaced wholesale
            account = ACCOUNT_MODELS[self.kind](
                email=email,
                password_hash=password_hash,
                **profile,
            )
            await self.store.save_account(account)
            pending = await self._store_otp(account)

        logger.info(f"New {self.kind.value} registered: {email}")
        await self._deliver_otp(account, pending, SIGNUP)
        return account

    async def request_otp(self, email: str) -> None:
        email = normalize_email(email)
        async with self.store.lock(self.kind, email):
            account = await self.store.get_account(self.kind, email)
            if not account:
                raise AccountNotFound("Email not registered. Please sign up first.")
            pending = await self._store_otp(account)

        await self._deliver_otp(account, pending, LOGIN)

    async def verify_signup_otp(self, email: str, code: str) -> Account:
        email = normalize_email(email)
        async with self.store.lock(self.kind, email):
            account = await self.store.get_account(self.kind, email)
            if not account:
                raise AccountNotFound()

            pending = await self.store.get_otp(self.kind, email)
            if not pending and account.is_verified:
                raise AlreadyVerified()
            await self._consume_otp(email, pending, code)

            account.is_verified = True
            await self.store.save_account(account)

        logger.info(f"{self.kind.value.capitalize()} verified: {email}")
        return account

    async def login(self, data: LoginRequest) -> LoginResponse:
        email = normalize_email(data.email)
        account = await self.store.get_account(self.kind, email)
        # Unknown emails still pay for one bcrypt check
        password_hash = account.password_hash if account else await run_in_threadpool(dummy_password_hash)
        valid = await run_in_threadpool(verify_password, data.password, password_hash)
        if not account or not valid:
            raise InvalidCredentials()

        async with self.store.lock(self.kind, email):
            account = await self.store.get_account(self.kind, email)
            # Rejected or re-registered while the password was being checked
            if not account or account.password_hash != password_hash:
                raise InvalidCredentials()

            if self.kind == AccountKind.DOCTOR:
                self._check_doctor_can_login(account)
            elif not account.is_verified:
                # Patients get no hint about which check failed
                raise InvalidCredentials()

            if self.kind == AccountKind.PATIENT and settings.PATIENT_LOGIN_REQUIRES_OTP:
                if not data.otp:
                    raise InvalidInput("Email, password, and OTP are required")
                pending = await self.store.get_otp(self.kind, email)
                await self._consume_otp(email, pending, data.otp)

        token = create_access_token(data={"sub": email, "role": self.kind.value})
        logger.info(f"{self.kind.value.capitalize()} logged in: {email}")
        return LoginResponse(
            message="Login successful!",
            token=token,
            name=account.name,
            email=email,
        )

    def _check_doctor_can_login(self, account: Doctor) -> None:
        if not account.is_verified:
            raise EmailNotVerified()
        if not account.is_approved:
            raise PendingApproval()

    async def _store_otp(self, account: Account) -> PendingOTP:
        pending = PendingOTP(
            email=account.email,
            code=generate_otp(),
            expires_at=datetime.utcnow() + timedelta(minutes=settings.OTP_EXPIRE_MINUTES),
        )
        await self.store.save_otp(self.kind, pending)
        return pending

    async def _deliver_otp(self, account: Account, pending: PendingOTP, purpose: str) -> None:
        """Send ``pending`` by email. Must be called without the account lock held."""
        try:
            await self.mailer.send_otp(account.email, account.first_name, pending.code, purpose)
        except Exception as exc:
            logger.exception(f"Error sending {purpose} OTP to {account.email}")
            raise DeliveryFailure() from exc

        logger.info(f"{purpose.capitalize()} OTP sent to {account.email}")

    async def _consume_otp(self, email: str, pending: PendingOTP | None, code: str) -> None:
        """Validate ``code`` against ``pending`` and delete it on success or expiry."""
        if not pending:
            raise NoPendingCode()

        if pending.is_expired():
            await self.store.delete_otp(self.kind, email)
            raise OTPExpired()

        if pending.code != code.strip():
            raise OTPMismatch()

        await self.store.delete_otp(self.kind, email)
