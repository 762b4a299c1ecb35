import fnmatch
from contextlib import asynccontextmanager
from datetime import datetime, timedelta

from app.services.email_service import EmailService

PATIENT = {"firstName": "A", "lastName": "B", "email": "a@x.com", "password": "p"}

DOCTOR = {
    "firstName": "Grace",
    "lastName": "Hopper",
    "email": "grace@clinic.com",
    "password": "s3cret",
    "specialization": "Cardiology",
    "experienceYears": 12,
    "clinicName": "Harbor Clinic",
    "registrationId": "REG-001",
}


async def signup(client, kind="patient", body=None):
    body = body or (PATIENT if kind == "patient" else DOCTOR)
    res = await client.post(f"/api/{kind}/signup", json=body)
    assert res.status_code == 200, res.json()
    return body


async def signup_and_verify(client, mailer, kind="patient", body=None):
    body = await signup(client, kind, body)
    otp = mailer.last_otp(body["email"])
    res = await client.post(f"/api/{kind}/verify-signup-otp", json={"email": body["email"], "otp": otp})
    assert res.status_code == 200, res.json()
    return body


async def expire_otp(store, kind, email):
    pending = await store.get_otp(kind, email)
    pending.expires_at = datetime.utcnow() - timedelta(seconds=1)
    await store.save_otp(kind, pending)


class FakeRedisClient:
    """Stands in for app.core.redis.RedisClient in tests."""

    def __init__(self):
        self.data = {}
        self.ttls = {}
        self.locked = []
        self.held = set()
        self.closed = False

    async def set(self, key, value, expire=None):
        self.data[key] = value
        self.ttls[key] = expire

    async def get(self, key):
        return self.data.get(key)

    async def delete(self, key):
        return 1 if self.data.pop(key, None) is not None else 0

    async def keys(self, pattern):
        return [key for key in self.data if fnmatch.fnmatch(key, pattern)]

    @asynccontextmanager
    async def _lock(self, name):
        self.locked.append(name)
        self.held.add(name)
        try:
            yield
        finally:
            self.held.discard(name)

    def lock(self, name, timeout=10):
        return self._lock(name)

    async def close(self):
        self.closed = True


class RecordingMailer(EmailService):
    """Captures outgoing OTPs instead of sending them."""

    def __init__(self):
        self.sent = []
        self.fail = False

    async def send_otp(self, to_email, name, otp, purpose="signup"):
        if self.fail:
            raise ConnectionError("SMTP unavailable")
        self.sent.append({"to": to_email, "name": name, "otp": otp, "purpose": purpose})

    async def send(self, to_email, subject, html):
        if self.fail:
            raise ConnectionError("SMTP unavailable")

    def last_otp(self, email):
        for message in reversed(self.sent):
            if message["to"] == email:
                return message["otp"]
        return None
