"""Shared fakes for the unit tests."""

import asyncio
from typing import Optional

import pytest

from notifyfhe.errors import RpcError, USER_REJECTED_CODE
from notifyfhe.transport.ledger import LedgerClient, MemoryLedger

SENDER = "0x1111111111111111111111111111111111111111"
OTHER = "0x2222222222222222222222222222222222222222"


class FakeWallet:
    def __init__(self, address: Optional[str] = SENDER, chain_id: int = 31337, reject: bool = False,
                 fail: bool = False):
        self.address = address
        self.chain_id = chain_id
        self.reject = reject
        self.fail = fail
        self.signed: list[str] = []

    async def get_address(self) -> Optional[str]:
        return self.address

    async def get_chain_id(self) -> int:
        return self.chain_id

    async def sign_message(self, message: str) -> str:
        if self.reject:
            raise RpcError("User rejected the request.", rpc_code=USER_REJECTED_CODE)
        if self.fail:
            raise RuntimeError("wallet crashed")
        self.signed.append(message)
        return "0x" + "ab" * 65


class FlakyLedger(MemoryLedger):
    """MemoryLedger that fails writes or reads for chosen keys."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.fail_writes: set[str] = set()
        self.fail_reads: set[str] = set()
        self.writes: list[str] = []

    async def get_data(self, key: str) -> bytes:
        if key in self.fail_reads:
            raise RpcError(f"read of {key} failed")
        return await super().get_data(key)

    async def set_data(self, key: str, value: bytes) -> None:
        if key in self.fail_writes:
            raise RpcError(f"write of {key} failed")
        self.writes.append(key)
        await super().set_data(key, value)


class InterleavingLedger(MemoryLedger):
    """Holds readers of ``key`` until ``readers`` of them have read it."""

    def __init__(self, key: str, readers: int = 2, **kwargs):
        super().__init__(**kwargs)
        self._key = key
        self._readers = readers
        self._seen = 0
        self._all_read = asyncio.Event()

    async def get_data(self, key: str) -> bytes:
        value = await super().get_data(key)
        if key == self._key and not self._all_read.is_set():
            self._seen += 1
            if self._seen >= self._readers:
                self._all_read.set()
            await self._all_read.wait()
        return value


@pytest.fixture
def memory_ledger() -> FlakyLedger:
    return FlakyLedger(address="0xC0ffee0000000000000000000000000000000001")


@pytest.fixture
def ledger(memory_ledger) -> LedgerClient:
    return LedgerClient(memory_ledger)


@pytest.fixture
def wallet() -> FakeWallet:
    return FakeWallet()
