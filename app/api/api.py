from fastapi import APIRouter
from app.api.routes import admin, doctors, patients
from app.schemas.common import ErrorResponse

api_router = APIRouter(
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    }
)

api_router.include_router(patients.router, prefix="/patient", tags=["patient"])
api_router.include_router(doctors.router, prefix="/doctor", tags=["doctor"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
