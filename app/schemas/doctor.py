from datetime import datetime
from typing import Optional

from app.schemas.auth import SignupRequest
from app.schemas.common import CamelModel

class DoctorSignupRequest(SignupRequest):
    specialization: Optional[str] = None
    experience_years: Optional[int] = None
    clinic_name: Optional[str] = None
    registration_id: Optional[str] = None

class DoctorResponse(CamelModel):
    first_name: str
    last_name: str
    email: str
    specialization: Optional[str] = None
    experience_years: Optional[int] = None
    clinic_name: Optional[str] = None
    registration_id: Optional[str] = None
    is_verified: bool
    is_approved: bool
    created_at: datetime

    class Config:
        from_attributes = True
