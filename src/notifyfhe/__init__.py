"""
notifyfhe — encrypted on-ledger mailbox client for Python.

Messages live in a key-value ledger as an index record plus one record per
message. Payloads are revealed locally after a wallet signature.
"""

from notifyfhe.client import NotifyFHE, AsyncNotifyFHE
from notifyfhe.mailbox import MailboxService, MailboxStats
from notifyfhe.index import MailboxIndex
from notifyfhe.store import MailboxStore
from notifyfhe.reveal import RevealAuthorizer, RevealState
from notifyfhe.transform import Base64Transform, Transform
from notifyfhe.transport.ledger import LedgerClient, MemoryLedger, RpcLedger
from notifyfhe.transport.wallet import RpcWallet, Wallet
from notifyfhe.models.message import Message, MessageRecord
from notifyfhe.models.session import AuthorizationContext
from notifyfhe.errors import (
    MailboxError,
    LedgerUnavailableError,
    NotFoundError,
    UserDeclinedError,
    TransientError,
    WalletNotConnectedError,
    RpcError,
)

__version__ = "0.1.0"
__all__ = [
    "NotifyFHE",
    "AsyncNotifyFHE",
    "MailboxService",
    "MailboxStats",
    "MailboxIndex",
    "MailboxStore",
    "RevealAuthorizer",
    "RevealState",
    "Base64Transform",
    "Transform",
    "LedgerClient",
    "MemoryLedger",
    "RpcLedger",
    "RpcWallet",
    "Wallet",
    "Message",
    "MessageRecord",
    "AuthorizationContext",
    "MailboxError",
    "LedgerUnavailableError",
    "NotFoundError",
    "UserDeclinedError",
    "TransientError",
    "WalletNotConnectedError",
    "RpcError",
]
