import smtplib
from abc import ABC, abstractmethod
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from starlette.concurrency import run_in_threadpool

from app.core.config import settings
from app.core.logger import logger

SIGNUP = "signup"
LOGIN = "login"

_TEMPLATES = {
    SIGNUP: {
        "subject": "Signup OTP - {brand}",
        "title": "Verify Your Email",
        "intro": "Your OTP for account verification is:",
    },
    LOGIN: {
        "subject": "Your Login OTP - {brand}",
        "title": "{brand} - Login OTP",
        "intro": "Your One-Time Password (OTP) for login is:",
    },
}


def render_otp_email(name: str, otp: str, purpose: str) -> tuple[str, str]:
    """Return ``(subject, html)`` for an OTP email."""
    template = _TEMPLATES[purpose]
    brand = settings.MAIL_BRAND
    html = f"""
        <div style="font-family: Arial, sans-serif; padding: 20px; background: #f4f4f4;">
            <div style="max-width: 600px; margin: 0 auto; background: white; padding: 30px; border-radius: 10px;">
                <h2 style="color: #2d5a27;">{template["title"].format(brand=brand)}</h2>
                <p>Hello {name},</p>
                <p>{template["intro"]}</p>
                <h1 style="background: #2d5a27; color: white; padding: 15px; text-align: center; border-radius: 8px; letter-spacing: 5px;">
                    {otp}
                </h1>
                <p style="color: #666;">This OTP will expire in {settings.OTP_EXPIRE_MINUTES} minutes.</p>
                <p style="color: #666;">If you didn't request this, please ignore this email.</p>
            </div>
        </div>
    """
    return template["subject"].format(brand=brand), html


class EmailService(ABC):
    """Sends OTP emails. Raises on any delivery problem."""

    async def send_otp(self, to_email: str, name: str, otp: str, purpose: str = SIGNUP) -> None:
        subject, html = render_otp_email(name, otp, purpose)
        await self.send(to_email, subject, html)

    @abstractmethod
    async def send(self, to_email: str, subject: str, html: str) -> None:
        ...


class SMTPEmailService(EmailService):
    def __init__(
        self,
        host: str = settings.SMTP_HOST,
        port: int = settings.SMTP_PORT,
        username: str | None = settings.EMAIL_USER,
        password: str | None = settings.EMAIL_PASS,
        sender: str | None = settings.EMAIL_FROM,
        use_ssl: bool = settings.SMTP_USE_SSL,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender
        self.use_ssl = use_ssl

    def _deliver(self, to_email: str, subject: str, html: str) -> None:
        if not self.sender:
            raise RuntimeError("EMAIL_FROM / EMAIL_USER is not configured")

        msg = MIMEMultipart()
        msg["From"] = self.sender
        msg["To"] = to_email
        msg["Subject"] = subject
        msg.attach(MIMEText(html, "html"))

        if self.use_ssl:
            server = smtplib.SMTP_SSL(self.host, self.port, timeout=30)
        else:
            server = smtplib.SMTP(self.host, self.port, timeout=30)
        with server:
            if not self.use_ssl:
                server.starttls()
            if self.username and self.password:
                server.login(self.username, self.password)
            server.sendmail(self.sender, [to_email], msg.as_string())

    async def send(self, to_email: str, subject: str, html: str) -> None:
        await run_in_threadpool(self._deliver, to_email, subject, html)
        logger.info(f"Email sent | to={to_email} | subject={subject}")


class ConsoleEmailService(EmailService):
    """Development backend: logs the OTP instead of mailing it."""

    async def send_otp(self, to_email: str, name: str, otp: str, purpose: str = SIGNUP) -> None:
        logger.warning(f"[DEV] {purpose} OTP for {to_email}: {otp}")

    async def send(self, to_email: str, subject: str, html: str) -> None:
        logger.warning(f"[DEV] Email to {to_email}: {subject}")
