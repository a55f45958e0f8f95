"""
NotifyFHE / AsyncNotifyFHE — main clients.

AsyncNotifyFHE wires the ledger, index, store, service and reveal
authorizer together and owns the session's AuthorizationContext.
"""

import asyncio
import logging
from typing import Any, Optional

from notifyfhe.errors import MailboxError, WalletNotConnectedError
from notifyfhe.index import MailboxIndex
from notifyfhe.mailbox import MailboxService, MailboxStats
from notifyfhe.models.message import Message
from notifyfhe.models.session import DEFAULT_SESSION_DURATION_DAYS, AuthorizationContext
from notifyfhe.reveal import DEFAULT_PACING_DELAY_S, RevealAuthorizer
from notifyfhe.store import MailboxStore
from notifyfhe.transform import Base64Transform, Transform
from notifyfhe.transport.ledger import LedgerBackend, LedgerClient, RpcLedger
from notifyfhe.transport.rpc import DEFAULT_RPC_URL, RpcClient
from notifyfhe.transport.wallet import RpcWallet, Wallet

logger = logging.getLogger(__name__)


class AsyncNotifyFHE:
    """Async mailbox client (primary)."""

    def __init__(
        self,
        rpc_url: str = DEFAULT_RPC_URL,
        wallet_url: Optional[str] = None,
        ledger: Optional[LedgerBackend] = None,
        wallet: Optional[Wallet] = None,
        transform: Optional[Transform] = None,
        pacing_delay_s: float = DEFAULT_PACING_DELAY_S,
        session_duration_days: int = DEFAULT_SESSION_DURATION_DAYS,
    ):
        self._rpc_clients: list[RpcClient] = []
        if ledger is None:
            ledger = RpcLedger(self._rpc(rpc_url))
        if wallet is None:
            wallet = RpcWallet(self._rpc(wallet_url or rpc_url))

        self.wallet = wallet
        self.transform = transform or Base64Transform()
        self.ledger = LedgerClient(ledger)
        self.index = MailboxIndex(self.ledger)
        self.store = MailboxStore(self.ledger)
        self.mailbox = MailboxService(self.index, self.store, self.transform)

        self._pacing_delay_s = pacing_delay_s
        self._session_duration_days = session_duration_days
        self._authorizer: Optional[RevealAuthorizer] = None

    def _rpc(self, url: str) -> RpcClient:
        for client in self._rpc_clients:
            if client.url == url:
                return client
        client = RpcClient(url)
        self._rpc_clients.append(client)
        return client

    @property
    def authorizer(self) -> RevealAuthorizer:
        if self._authorizer is None:
            raise MailboxError("not_started", "Client not started. Call start() first.")
        return self._authorizer

    async def start(self) -> AuthorizationContext:
        """Create this session's authorization context. Idempotent per session."""
        if self._authorizer is not None:
            return self._authorizer.context
        ledger_address = await self.ledger.address() or ""
        try:
            chain_id = await self.wallet.get_chain_id()
        except Exception as e:
            logger.warning(f"Could not resolve chain id: {e}")
            chain_id = 0
        context = AuthorizationContext.create(
            ledger_address=ledger_address,
            chain_id=chain_id,
            duration_days=self._session_duration_days,
        )
        self._authorizer = RevealAuthorizer(context, self.wallet, self.transform, self._pacing_delay_s)
        return context

    async def close(self) -> None:
        for client in self._rpc_clients:
            await client.close()
        self._rpc_clients.clear()

    async def load_messages(self) -> list[Message]:
        return await self.mailbox.load_all()

    async def send_message(self, title: str, content: float) -> Message:
        """Encrypt and store a message, then reload the mailbox."""
        sender = await self._require_address()
        message = await self.mailbox.send(title, content, sender)
        await self._refresh()
        return message

    async def mark_as_read(self, message_id: str) -> None:
        await self._require_address()
        await self.mailbox.mark_read(message_id)
        await self._refresh()

    async def decrypt(self, message: Message) -> float:
        """Reveal a message's plaintext. Needs a wallet signature once per session."""
        await self._require_address()
        await self.start()
        return await self.authorizer.reveal(message.payload)

    def filter(self, search: str = "", unread_only: bool = False) -> list[Message]:
        return self.mailbox.filter(search, unread_only)

    async def stats(self) -> MailboxStats:
        return self.mailbox.stats(await self.wallet.get_address())

    async def _refresh(self) -> None:
        """Reload after a completed write. Reload failures are logged, not raised."""
        try:
            await self.mailbox.load_all()
        except MailboxError as e:
            logger.warning(f"Error reloading messages: {e}")

    async def _require_address(self) -> str:
        address = await self.wallet.get_address()
        if not address:
            raise WalletNotConnectedError()
        return address


class NotifyFHE:
    """Sync wrapper around AsyncNotifyFHE. Runs the event loop internally."""

    def __init__(self, **kwargs: Any):
        self._async = AsyncNotifyFHE(**kwargs)
        self._loop = asyncio.new_event_loop()

    def _run(self, coro: Any) -> Any:
        return self._loop.run_until_complete(coro)

    @property
    def mailbox(self) -> MailboxService:
        return self._async.mailbox

    def start(self) -> AuthorizationContext:
        return self._run(self._async.start())

    def close(self) -> None:
        self._run(self._async.close())
        self._loop.close()

    def load_messages(self) -> list[Message]:
        return self._run(self._async.load_messages())

    def send_message(self, title: str, content: float) -> Message:
        return self._run(self._async.send_message(title, content))

    def mark_as_read(self, message_id: str) -> None:
        self._run(self._async.mark_as_read(message_id))

    def decrypt(self, message: Message) -> float:
        return self._run(self._async.decrypt(message))

    def filter(self, search: str = "", unread_only: bool = False) -> list[Message]:
        return self._async.filter(search, unread_only)

    def stats(self) -> MailboxStats:
        return self._run(self._async.stats())
