from typing import List

from app.core.exceptions import AccountNotFound, InvalidAdminCredentials, NotYetVerified
from app.core.logger import logger
from app.core.security import check_admin_credentials, create_access_token
from app.core.utils import normalize_email
from app.db.models import AccountKind, Doctor
from app.db.repository import AccountStore
from app.schemas.admin import AdminLoginRequest, AdminLoginResponse, OverviewStats

class AdminService:
    def __init__(self, store: AccountStore):
        self.store = store

    async def list_pending_doctors(self) -> List[Doctor]:
        doctors = await self.store.list_accounts(AccountKind.DOCTOR)
        return [doctor for doctor in doctors if doctor.is_pending_approval]

    async def approve_doctor(self, email: str) -> Doctor:
        email = normalize_email(email)
        async with self.store.lock(AccountKind.DOCTOR, email):
            doctor = await self.store.get_account(AccountKind.DOCTOR, email)
            if not doctor:
                raise AccountNotFound("Doctor not found")
            if not doctor.is_verified:
                raise NotYetVerified()

            if not doctor.is_approved:
                doctor.is_approved = True
                await self.store.save_account(doctor)
                logger.info(f"Doctor approved: {email}")
        return doctor

    async def reject_doctor(self, email: str) -> None:
        email = normalize_email(email)
        async with self.store.lock(AccountKind.DOCTOR, email):
            if not await self.store.delete_account(AccountKind.DOCTOR, email):
                raise AccountNotFound("Doctor not found")
            await self.store.delete_otp(AccountKind.DOCTOR, email)
        logger.info(f"Doctor rejected and removed: {email}")

    async def overview(self) -> OverviewStats:
        doctors = await self.store.list_accounts(AccountKind.DOCTOR)
        patients = await self.store.list_accounts(AccountKind.PATIENT)
        return OverviewStats(
            total_doctors=len(doctors),
            pending_doctors=sum(1 for doctor in doctors if doctor.is_pending_approval),
            total_patients=len(patients),
            total_appointments=0,
        )

    def login(self, data: AdminLoginRequest) -> AdminLoginResponse:
        if not check_admin_credentials(data.admin_id, data.email, data.password):
            logger.warning(f"Failed admin login for {data.email}")
            raise InvalidAdminCredentials()

        email = normalize_email(data.email)
        token = create_access_token(data={"sub": email, "role": "admin", "admin_id": data.admin_id})
        logger.info(f"Admin logged in: {email}")
        return AdminLoginResponse(message="Admin login successful", token=token, email=email)
