import asyncio
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, List, Optional, Tuple

from app.db.models import Account, AccountKind, PendingOTP


class AccountStore(ABC):
    """
    Storage for accounts and their pending OTPs, keyed by (kind, email).

    Callers hold ``lock(kind, email)`` around any read-modify-write of a key.
    """

    @abstractmethod
    async def get_account(self, kind: AccountKind, email: str) -> Optional[Account]:
        ...

    @abstractmethod
    async def save_account(self, account: Account) -> None:
        ...

    @abstractmethod
    async def delete_account(self, kind: AccountKind, email: str) -> bool:
        ...

    @abstractmethod
    async def list_accounts(self, kind: AccountKind) -> List[Account]:
        ...

    @abstractmethod
    async def get_otp(self, kind: AccountKind, email: str) -> Optional[PendingOTP]:
        ...

    @abstractmethod
    async def save_otp(self, kind: AccountKind, otp: PendingOTP) -> None:
        ...

    @abstractmethod
    async def delete_otp(self, kind: AccountKind, email: str) -> None:
        ...

    @abstractmethod
    def lock(self, kind: AccountKind, email: str):
        ...

    async def close(self) -> None:
        pass


class InMemoryAccountStore(AccountStore):
    def __init__(self):
        self.accounts: Dict[AccountKind, Dict[str, Account]] = {kind: {} for kind in AccountKind}
        self.otps: Dict[AccountKind, Dict[str, PendingOTP]] = {kind: {} for kind in AccountKind}
        # key -> (lock, number of holders and waiters)
        self._locks: Dict[Tuple[AccountKind, str], Tuple[asyncio.Lock, int]] = {}

    async def get_account(self, kind: AccountKind, email: str) -> Optional[Account]:
        return self.accounts[kind].get(email)

    async def save_account(self, account: Account) -> None:
        self.accounts[account.kind][account.email] = account

    async def delete_account(self, kind: AccountKind, email: str) -> bool:
        return self.accounts[kind].pop(email, None) is not None

    async def list_accounts(self, kind: AccountKind) -> List[Account]:
        return list(self.accounts[kind].values())

    async def get_otp(self, kind: AccountKind, email: str) -> Optional[PendingOTP]:
        return self.otps[kind].get(email)

    async def save_otp(self, kind: AccountKind, otp: PendingOTP) -> None:
        self.otps[kind][otp.email] = otp

    async def delete_otp(self, kind: AccountKind, email: str) -> None:
        self.otps[kind].pop(email, None)

    @asynccontextmanager
    async def lock(self, kind: AccountKind, email: str) -> AsyncIterator[None]:
        key = (kind, email)
        key_lock, users = self._locks.get(key, (None, 0))
        if key_lock is None:
            key_lock = asyncio.Lock()
        self._locks[key] = (key_lock, users + 1)
        try:
            async with key_lock:
                yield
        finally:
            key_lock, users = self._locks[key]
            if users == 1:
                del self._locks[key]
            else:
                self._locks[key] = (key_lock, users - 1)
