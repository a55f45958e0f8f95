"""
NotifyFHE error types.

Unavailable and malformed ledger data never surface as exceptions from the
index or store; they degrade to empty results. Everything here is what a
caller's flow can actually see.
"""

from typing import Any, Optional


class MailboxError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class LedgerUnavailableError(MailboxError):
    def __init__(self, message: str = "Ledger is not available"):
        super().__init__("ledger_unavailable", message)


class NotFoundError(MailboxError):
    def __init__(self, message_id: str):
        super().__init__("not_found", f"Message not found: {message_id}", {"message_id": message_id})


class UserDeclinedError(MailboxError):
    def __init__(self, message: str = "Request rejected by user"):
        super().__init__("user_declined", message)


class TransientError(MailboxError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("transient", message, details)


class WalletNotConnectedError(MailboxError):
    def __init__(self, message: str = "Please connect wallet first"):
        super().__init__("wallet_not_connected", message)


class RpcError(MailboxError):
    def __init__(self, message: str, rpc_code: Optional[int] = None):
        super().__init__("rpc_error", message, {"rpc_code": rpc_code} if rpc_code is not None else None)
        self.rpc_code = rpc_code


# EIP-1193 "User Rejected Request"
USER_REJECTED_CODE = 4001


def is_user_rejection(exc: BaseException) -> bool:
    if isinstance(exc, UserDeclinedError):
        return True
    if isinstance(exc, RpcError) and exc.rpc_code == USER_REJECTED_CODE:
        return True
    text = str(exc).lower()
    return "user rejected" in text or "user denied" in text
