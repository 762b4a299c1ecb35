from typing import Optional

from fastapi import HTTPException


class PortalError(HTTPException):
    """
    Base class for every error the portal reports to a caller.

    Subclasses pin the HTTP status, a machine readable ``code`` and the
    default message; services may override the message per call.
    """
    status_code: int = 400
    code: str = "error"
    message: str = "Request failed"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(status_code=self.status_code, detail=detail or self.message)


# Validation

class InvalidInput(PortalError):
    code = "validation_error"
    message = "All fields are required"


# Not found

class AccountNotFound(PortalError):
    code = "not_found"
    message = "User not found. Please sign up again."


# State conflicts

class StateConflict(PortalError):
    code = "state_conflict"


class AlreadyRegistered(StateConflict):
    code = "already_registered"
    message = "Email already registered and verified. Please login."


class AlreadyVerified(StateConflict):
    code = "already_verified"
    message = "Email already verified. Please login."


class NoPendingCode(StateConflict):
    code = "no_pending_code"
    message = "No OTP found. Please request a new one."


class OTPExpired(StateConflict):
    code = "otp_expired"
    message = "OTP expired. Please request a new one."


class NotYetVerified(StateConflict):
    code = "not_yet_verified"
    message = "Doctor has not verified their email yet"


class EmailNotVerified(StateConflict):
    code = "email_not_verified"
    message = "Email not verified. Please complete signup."


class PendingApproval(StateConflict):
    code = "pending_approval"
    message = "Your account is pending admin approval."


# Authentication

class AuthFailure(PortalError):
    code = "auth_failure"


class InvalidCredentials(AuthFailure):
    code = "invalid_credentials"
    message = "Invalid email or password"


class OTPMismatch(AuthFailure):
    code = "otp_mismatch"
    message = "Invalid OTP."


class InvalidAdminCredentials(AuthFailure):
    status_code = 401
    code = "invalid_admin_credentials"
    message = "Invalid admin credentials"


# Delivery

class DeliveryFailure(PortalError):
    status_code = 500
    code = "delivery_failure"
    message = "Failed to send OTP. Please try again."
