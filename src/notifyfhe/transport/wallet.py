"""
Wallet capabilities: current account, chain id, and signing arbitrary text.
"""

from typing import Optional, Protocol

from notifyfhe.errors import UserDeclinedError, is_user_rejection
from notifyfhe.transport.rpc import RpcClient


class Wallet(Protocol):
    async def get_address(self) -> Optional[str]: ...

    async def get_chain_id(self) -> int: ...

    async def sign_message(self, message: str) -> str: ...


class RpcWallet:
    """Wallet exposed by a node or signer over JSON-RPC (EIP-1193 style)."""

    def __init__(self, rpc: RpcClient, address: Optional[str] = None):
        self._rpc = rpc
        self._address = address

    async def get_address(self) -> Optional[str]:
        if self._address:
            return self._address
        accounts = await self._rpc.call("eth_accounts")
        self._address = accounts[0] if accounts else None
        return self._address

    async def get_chain_id(self) -> int:
        result = await self._rpc.call("eth_chainId")
        if isinstance(result, str):
            return int(result, 16) if result.startswith("0x") else int(result)
        return int(result)

    async def sign_message(self, message: str) -> str:
        address = await self.get_address()
        data = "0x" + message.encode("utf-8").hex()
        try:
            return str(await self._rpc.call("personal_sign", [data, address]))
        except Exception as e:
            if is_user_rejection(e):
                raise UserDeclinedError("Signature request rejected by user") from e
            raise
