import asyncio
import threading

import pytest

from app.core.exceptions import AccountNotFound, AlreadyVerified, EmailNotVerified, InvalidCredentials, NoPendingCode, OTPMismatch
from app.core.security import dummy_password_hash
from app.db.models import AccountKind
from app.db.redis_store import RedisAccountStore
from app.schemas.auth import LoginRequest, SignupRequest
from app.schemas.doctor import DoctorSignupRequest
from app.services import account_service
from app.services.account_service import AccountService
from tests.helpers import DOCTOR, PATIENT, FakeRedisClient, RecordingMailer


@pytest.fixture
def patients(store, mailer):
    return AccountService(store, mailer, AccountKind.PATIENT)


@pytest.fixture
def doctors(store, mailer):
    return AccountService(store, mailer, AccountKind.DOCTOR)


@pytest.mark.asyncio
async def test_verify_transitions_once(patients, mailer):
    await patients.signup(SignupRequest(**PATIENT))
    code = mailer.last_otp("a@x.com")

    account = await patients.verify_signup_otp("a@x.com", code)
    assert account.is_verified is True

    with pytest.raises(AlreadyVerified):
        await patients.verify_signup_otp("a@x.com", code)


@pytest.mark.asyncio
async def test_mismatch_keeps_pending_code(patients, store, mailer):
    await patients.signup(SignupRequest(**PATIENT))
    code = mailer.last_otp("a@x.com")
    wrong = "999999" if code != "999999" else "999998"

    with pytest.raises(OTPMismatch):
        await patients.verify_signup_otp("a@x.com", wrong)
    assert (await store.get_otp(AccountKind.PATIENT, "a@x.com")).code == code


@pytest.mark.asyncio
async def test_missing_pending_code_on_unverified_account(patients, store, mailer):
    await patients.signup(SignupRequest(**PATIENT))
    await store.delete_otp(AccountKind.PATIENT, "a@x.com")

    with pytest.raises(NoPendingCode):
        await patients.verify_signup_otp("a@x.com", "123456")


@pytest.mark.asyncio
async def test_request_otp_unknown_account(doctors):
    with pytest.raises(AccountNotFound):
        await doctors.request_otp("ghost@clinic.com")


@pytest.mark.asyncio
async def test_otps_are_scoped_per_kind(patients, doctors, store, mailer):
    await patients.signup(SignupRequest(**{**PATIENT, "email": DOCTOR["email"]}))
    await doctors.signup(DoctorSignupRequest(**DOCTOR))

    patient_otp = await store.get_otp(AccountKind.PATIENT, DOCTOR["email"])
    doctor_otp = await store.get_otp(AccountKind.DOCTOR, DOCTOR["email"])
    assert patient_otp is not None and doctor_otp is not None
    assert [m["otp"] for m in mailer.sent] == [patient_otp.code, doctor_otp.code]


@pytest.mark.asyncio
async def test_concurrent_signups_leave_one_consistent_record(patients, store, mailer):
    bodies = [SignupRequest(**{**PATIENT, "firstName": f"A{i}"}) for i in range(5)]
    await asyncio.gather(*(patients.signup(body) for body in bodies))

    account = await store.get_account(AccountKind.PATIENT, "a@x.com")
    pending = await store.get_otp(AccountKind.PATIENT, "a@x.com")
    # The surviving OTP belongs to the last writer
    assert pending.code == mailer.sent[-1]["otp"]
    assert account.first_name == mailer.sent[-1]["name"]


class LockCheckingMailer(RecordingMailer):
    """Fails delivery if the account lock is still held while sending."""

    def __init__(self, client):
        super().__init__()
        self.client = client

    async def send_otp(self, to_email, name, otp, purpose="signup"):
        assert self.client.held == set(), "OTP sent while holding the account lock"
        await super().send_otp(to_email, name, otp, purpose)


@pytest.mark.asyncio
async def test_otp_is_sent_after_lock_release():
    client = FakeRedisClient()
    mailer = LockCheckingMailer(client)
    service = AccountService(RedisAccountStore(client), mailer, AccountKind.PATIENT)

    await service.signup(SignupRequest(**PATIENT))
    await service.request_otp("a@x.com")

    assert [m["purpose"] for m in mailer.sent] == ["signup", "login"]
    assert client.locked == ["patient:a@x.com", "patient:a@x.com"]
    pending = await service.store.get_otp(AccountKind.PATIENT, "a@x.com")
    assert pending.code == mailer.sent[-1]["otp"]


@pytest.mark.asyncio
async def test_failed_logins_leave_no_locks_behind(patients, doctors, store):
    for i in range(50):
        with pytest.raises(InvalidCredentials):
            await patients.login(LoginRequest(email=f"ghost{i}@x.com", password="p"))

    # These get past the password check and fail under the lock
    await patients.signup(SignupRequest(**PATIENT))
    await doctors.signup(DoctorSignupRequest(**DOCTOR))
    for _ in range(5):
        with pytest.raises(InvalidCredentials):
            await patients.login(LoginRequest(email="a@x.com", password="p"))
        with pytest.raises(EmailNotVerified):
            await doctors.login(LoginRequest(email=DOCTOR["email"], password=DOCTOR["password"]))
    assert store._locks == {}


@pytest.mark.asyncio
async def test_unknown_email_still_checks_a_password_off_the_event_loop(patients, monkeypatch):
    calls = []

    def recording_verify(password, password_hash):
        calls.append((password_hash, threading.get_ident()))
        return False

    monkeypatch.setattr(account_service, "verify_password", recording_verify)

    with pytest.raises(InvalidCredentials):
        await patients.login(LoginRequest(email="ghost@x.com", password="p"))

    assert len(calls) == 1
    password_hash, thread_id = calls[0]
    assert password_hash == dummy_password_hash()
    assert thread_id != threading.get_ident()
