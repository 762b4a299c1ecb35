import json
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator, List, Optional

from app.core.redis import RedisClient
from app.db.models import ACCOUNT_MODELS, Account, AccountKind, PendingOTP
from app.db.repository import AccountStore


class RedisAccountStore(AccountStore):
    """
    Accounts as JSON documents under ``account:<kind>:<email>`` and pending
    OTPs under ``otp:<kind>:<email>`` with a TTL matching their validity.
    """

    def __init__(self, client: RedisClient):
        self.client = client

    @staticmethod
    def _account_key(kind: AccountKind, email: str) -> str:
        return f"account:{kind.value}:{email}"

    @staticmethod
    def _otp_key(kind: AccountKind, email: str) -> str:
        return f"otp:{kind.value}:{email}"

    def _load_account(self, kind: AccountKind, raw: str) -> Account:
        return ACCOUNT_MODELS[kind].model_validate(json.loads(raw))

    async def get_account(self, kind: AccountKind, email: str) -> Optional[Account]:
        raw = await self.client.get(self._account_key(kind, email))
        if raw is None:
            return None
        return self._load_account(kind, raw)

    async def save_account(self, account: Account) -> None:
        await self.client.set(self._account_key(account.kind, account.email), account.model_dump_json())

    async def delete_account(self, kind: AccountKind, email: str) -> bool:
        return bool(await self.client.delete(self._account_key(kind, email)))

    async def list_accounts(self, kind: AccountKind) -> List[Account]:
        accounts = []
        for key in await self.client.keys(f"account:{kind.value}:*"):
            raw = await self.client.get(key)
            # Deleted between scan and get
            if raw is not None:
                accounts.append(self._load_account(kind, raw))
        return accounts

    async def get_otp(self, kind: AccountKind, email: str) -> Optional[PendingOTP]:
        raw = await self.client.get(self._otp_key(kind, email))
        if raw is None:
            return None
        return PendingOTP.model_validate(json.loads(raw))

    async def save_otp(self, kind: AccountKind, otp: PendingOTP) -> None:
        ttl = int((otp.expires_at - datetime.utcnow()).total_seconds())
        await self.client.set(self._otp_key(kind, otp.email), otp.model_dump_json(), expire=max(ttl, 1))

    async def delete_otp(self, kind: AccountKind, email: str) -> None:
        await self.client.delete(self._otp_key(kind, email))

    @asynccontextmanager
    async def lock(self, kind: AccountKind, email: str) -> AsyncIterator[None]:
        async with self.client.lock(f"{kind.value}:{email}"):
            yield

    async def close(self) -> None:
        await self.client.close()
