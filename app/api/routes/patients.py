from fastapi import APIRouter, Depends

from app.api.deps import get_patient_service
from app.schemas.auth import LoginRequest, LoginResponse, OTPRequest, SignupRequest, VerifyOTPRequest
from app.schemas.common import MessageResponse
from app.services.account_service import AccountService

router = APIRouter()

@router.post("/signup", response_model=MessageResponse)
async def signup(
    payload: SignupRequest,
    service: AccountService = Depends(get_patient_service)
):
    await service.signup(payload)
    return MessageResponse(message="Account created. OTP sent to your email. Please verify.")

@router.post("/verify-signup-otp", response_model=MessageResponse)
async def verify_signup_otp(
    payload: VerifyOTPRequest,
    service: AccountService = Depends(get_patient_service)
):
    await service.verify_signup_otp(payload.email, payload.otp)
    return MessageResponse(message="Email verified successfully! You can now login.")

@router.post("/send-otp", response_model=MessageResponse)
async def send_otp(
    payload: OTPRequest,
    service: AccountService = Depends(get_patient_service)
):
    await service.request_otp(payload.email)
    return MessageResponse(message="OTP sent to your email!")

@router.post("/login", response_model=LoginResponse)
async def login(
    payload: LoginRequest,
    service: AccountService = Depends(get_patient_service)
):
    return await service.login(payload)
