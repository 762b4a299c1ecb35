import secrets

OTP_MIN = 100000
OTP_MAX = 999999

def generate_otp() -> str:
    # Uniform over 100000..999999 inclusive
    return str(OTP_MIN + secrets.randbelow(OTP_MAX - OTP_MIN + 1))

def normalize_email(email: str) -> str:
    return email.strip().lower()

def full_name(first_name: str, last_name: str) -> str:
    return f"{first_name} {last_name}".strip()
