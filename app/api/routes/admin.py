from fastapi import APIRouter, Depends

from app.api.deps import get_admin_service
from app.schemas.admin import (
    AdminLoginRequest,
    AdminLoginResponse,
    DoctorEmailRequest,
    OverviewResponse,
    PendingDoctorsResponse,
)
from app.schemas.common import MessageResponse
from app.schemas.doctor import DoctorResponse
from app.services.admin_service import AdminService

router = APIRouter()

@router.post("/login", response_model=AdminLoginResponse)
async def admin_login(
    payload: AdminLoginRequest,
    service: AdminService = Depends(get_admin_service)
):
    return service.login(payload)

@router.get("/overview", response_model=OverviewResponse)
async def overview(service: AdminService = Depends(get_admin_service)):
    return OverviewResponse(stats=await service.overview())

@router.get("/doctors/pending", response_model=PendingDoctorsResponse)
async def pending_doctors(service: AdminService = Depends(get_admin_service)):
    doctors = await service.list_pending_doctors()
    return PendingDoctorsResponse(
        doctors=[DoctorResponse.model_validate(doctor) for doctor in doctors]
    )

@router.post("/doctors/approve", response_model=MessageResponse)
async def approve_doctor(
    payload: DoctorEmailRequest,
    service: AdminService = Depends(get_admin_service)
):
    doctor = await service.approve_doctor(payload.email)
    return MessageResponse(message=f"Doctor {doctor.email} approved")

@router.post("/doctors/reject", response_model=MessageResponse)
async def reject_doctor(
    payload: DoctorEmailRequest,
    service: AdminService = Depends(get_admin_service)
):
    await service.reject_doctor(payload.email)
    return MessageResponse(message="Doctor rejected and removed")
