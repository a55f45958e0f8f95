"""
Ledger access — the key-value backend of record and the thin client over it.

Absence and an empty value are indistinguishable: both read as b"".
"""

import logging
from typing import Optional, Protocol

from notifyfhe.errors import TransientError, UserDeclinedError, is_user_rejection
from notifyfhe.transport.rpc import RpcClient

logger = logging.getLogger(__name__)


class LedgerBackend(Protocol):
    async def get_data(self, key: str) -> bytes: ...

    async def set_data(self, key: str, value: bytes) -> None: ...

    async def is_available(self) -> bool: ...

    async def get_address(self) -> str: ...


class MemoryLedger:
    """In-process backend for tests and offline use."""

    def __init__(self, address: str = "0x0000000000000000000000000000000000000000", available: bool = True):
        self.address = address
        self.available = available
        self.data: dict[str, bytes] = {}

    async def get_data(self, key: str) -> bytes:
        return self.data.get(key, b"")

    async def set_data(self, key: str, value: bytes) -> None:
        self.data[key] = bytes(value)

    async def is_available(self) -> bool:
        return self.available

    async def get_address(self) -> str:
        return self.address


class RpcLedger:
    """Backend reached through a JSON-RPC gateway; bytes travel as 0x-hex."""

    def __init__(self, rpc: RpcClient):
        self._rpc = rpc

    async def get_data(self, key: str) -> bytes:
        result = await self._rpc.call("getData", [key])
        if not result:
            return b""
        text = str(result)
        if text.startswith("0x"):
            text = text[2:]
        return bytes.fromhex(text)

    async def set_data(self, key: str, value: bytes) -> None:
        await self._rpc.call("setData", [key, "0x" + value.hex()])

    async def is_available(self) -> bool:
        return bool(await self._rpc.call("isAvailable"))

    async def get_address(self) -> str:
        return str(await self._rpc.call("getAddress"))


class LedgerClient:
    def __init__(self, backend: LedgerBackend):
        self._backend = backend

    async def healthy(self) -> bool:
        try:
            return bool(await self._backend.is_available())
        except Exception as e:
            logger.warning(f"Ledger health check failed: {e}")
            return False

    async def address(self) -> Optional[str]:
        try:
            return await self._backend.get_address()
        except Exception as e:
            logger.warning(f"Could not resolve ledger address: {e}")
            return None

    async def read(self, key: str, check_health: bool = True) -> bytes:
        if check_health and not await self.healthy():
            logger.debug(f"Ledger unavailable, skipping read of {key}")
            return b""
        try:
            return await self._backend.get_data(key)
        except Exception as e:
            raise TransientError(f"Failed to read {key}: {e}") from e

    async def write(self, key: str, value: bytes, check_health: bool = True) -> bool:
        if check_health and not await self.healthy():
            logger.debug(f"Ledger unavailable, skipping write of {key}")
            return False
        try:
            await self._backend.set_data(key, value)
        except Exception as e:
            if is_user_rejection(e):
                raise UserDeclinedError("Transaction rejected by user") from e
            raise TransientError(f"Failed to write {key}: {e}") from e
        return True
