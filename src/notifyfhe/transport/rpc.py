"""
JSON-RPC 2.0 over HTTP, shared by the remote ledger and the remote wallet.
"""

import itertools
from typing import Any, Optional

import httpx

from notifyfhe.errors import RpcError

DEFAULT_RPC_URL = "http://127.0.0.1:8545"


class RpcClient:
    def __init__(
        self,
        url: str = DEFAULT_RPC_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._url = url
        self._ids = itertools.count(1)
        self._client = httpx.AsyncClient(
            headers={"User-Agent": "notifyfhe/0.1.0", "Accept": "application/json",
                     "Content-Type": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    @property
    def url(self) -> str:
        return self._url

    async def call(self, method: str, params: Optional[list[Any]] = None) -> Any:
        body = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params or []}
        try:
            resp = await self._client.post(self._url, json=body)
        except httpx.HTTPError as e:
            raise RpcError(f"{method} failed: {e}")
        if resp.status_code >= 400:
            raise RpcError(f"HTTP {resp.status_code}: {resp.text[:200]}")
        try:
            data = resp.json()
        except ValueError:
            raise RpcError(f"{method} returned a non-JSON response")
        error = data.get("error") if isinstance(data, dict) else None
        if error:
            if not isinstance(error, dict):
                raise RpcError(str(error))
            raise RpcError(str(error.get("message", "unknown error")), rpc_code=error.get("code"))
        if not isinstance(data, dict) or "result" not in data:
            raise RpcError(f"{method} returned no result")
        return data["result"]

    async def close(self) -> None:
        await self._client.aclose()
