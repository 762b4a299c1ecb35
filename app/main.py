from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.exceptions import InvalidInput, PortalError
from app.core.logger import logger
from app.db.session import close_store
from app.middleware.log_middleware import LogMiddleware
from app.schemas.common import ErrorResponse

@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await close_store()

app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(LogMiddleware)

@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError):
    body = ErrorResponse(message=exc.detail, error=exc.code)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(by_alias=True, exclude_none=True))

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    fields = [".".join(str(part) for part in error["loc"][1:]) for error in exc.errors()]
    logger.info(f"Rejected request to {request.url.path}: invalid fields {fields}")
    body = ErrorResponse(message=InvalidInput.message, error=InvalidInput.code, fields=fields)
    return JSONResponse(status_code=InvalidInput.status_code, content=body.model_dump(by_alias=True))

@app.get("/")
async def root():
    return {"message": "Backend running"}

from app.api.api import api_router
app.include_router(api_router, prefix=settings.API_PREFIX)
