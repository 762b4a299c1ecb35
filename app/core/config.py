from pydantic_settings import BaseSettings
from typing import List, Optional

class Settings(BaseSettings):
    PROJECT_NAME: str = "CarePortal"
    API_PREFIX: str = "/api"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    SECRET_KEY: str = "change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    BCRYPT_ROUNDS: int = 12

    OTP_EXPIRE_MINUTES: int = 10
    PATIENT_LOGIN_REQUIRES_OTP: bool = False

    STORE_BACKEND: str = "memory"
    REDIS_URL: str = "redis://localhost:6379/0"

    MAIL_BACKEND: str = "smtp"
    MAIL_BRAND: str = "Mental Health App"
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_USE_SSL: bool = False
    EMAIL_USER: Optional[str] = None
    EMAIL_PASS: Optional[str] = None
    EMAIL_FROM: Optional[str] = None

    ADMIN_ID: str = "admin"
    ADMIN_EMAIL: str = "admin@careportal.local"
    ADMIN_PASSWORD: str = "admin123"

    class Config:
        case_sensitive = True
        env_file = ".env"

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        if not self.EMAIL_FROM:
            self.EMAIL_FROM = self.EMAIL_USER

settings = Settings()
