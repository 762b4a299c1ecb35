from typing import List
from pydantic import Field

from app.schemas.common import CamelModel, MessageResponse
from app.schemas.doctor import DoctorResponse

class AdminLoginRequest(CamelModel):
    admin_id: str = Field(min_length=1)
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)

class AdminLoginResponse(MessageResponse):
    token: str
    email: str

class DoctorEmailRequest(CamelModel):
    email: str = Field(min_length=1)

class PendingDoctorsResponse(MessageResponse):
    message: str = "Pending doctors fetched"
    doctors: List[DoctorResponse]

class OverviewStats(CamelModel):
    total_doctors: int
    pending_doctors: int
    total_patients: int
    total_appointments: int = 0

class OverviewResponse(MessageResponse):
    message: str = "Overview fetched"
    stats: OverviewStats
