from typing import Optional
from pydantic import Field

from app.schemas.common import CamelModel, MessageResponse

class SignupRequest(CamelModel):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)

class VerifyOTPRequest(CamelModel):
    email: str = Field(min_length=1)
    otp: str = Field(min_length=1)

class OTPRequest(CamelModel):
    email: str = Field(min_length=1)

class LoginRequest(CamelModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)
    otp: Optional[str] = None

class LoginResponse(MessageResponse):
    token: str
    name: str
    email: str
