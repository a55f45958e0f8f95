"""
Reveal authorizer — turns a payload token into plaintext only after the
wallet has signed the session's canonical authorization message.

States:
  IDLE -> AUTHORIZING -> AUTHORIZED | DENIED

DENIED is not terminal; a new reveal() tries again. Authorization is scoped
to the session: once a signature is held, later reveals decode without
asking the wallet again. hide() returns to IDLE and keeps the signature.
"""

import asyncio
import enum
import logging
from typing import NoReturn, Optional

from notifyfhe.errors import TransientError, UserDeclinedError, WalletNotConnectedError, is_user_rejection
from notifyfhe.models.session import AuthorizationContext
from notifyfhe.transform import Transform
from notifyfhe.transport.wallet import Wallet

logger = logging.getLogger(__name__)

DEFAULT_PACING_DELAY_S = 1.5


class RevealState(str, enum.Enum):
    IDLE = "idle"
    AUTHORIZING = "authorizing"
    AUTHORIZED = "authorized"
    DENIED = "denied"


class RevealAuthorizer:
    def __init__(
        self,
        context: AuthorizationContext,
        wallet: Wallet,
        transform: Transform,
        pacing_delay_s: float = DEFAULT_PACING_DELAY_S,
    ):
        self._context = context
        self._wallet = wallet
        self._transform = transform
        self._pacing_delay_s = pacing_delay_s
        self._signature: Optional[str] = None
        self.state = RevealState.IDLE

    @property
    def context(self) -> AuthorizationContext:
        return self._context

    @property
    def authorized(self) -> bool:
        return self._signature is not None

    @property
    def signature(self) -> Optional[str]:
        return self._signature

    async def authorize(self) -> str:
        """Request a signature over the canonical message. Returns the signature."""
        try:
            address = await self._wallet.get_address()
        except Exception as e:
            self._deny(e)
        if not address:
            raise WalletNotConnectedError()
        self.state = RevealState.AUTHORIZING
        message = self._context.canonical_message()
        try:
            signature = await self._wallet.sign_message(message)
        except Exception as e:
            self._deny(e)
        self._signature = signature
        self.state = RevealState.AUTHORIZED
        await asyncio.sleep(self._pacing_delay_s)
        return signature

    async def reveal(self, payload: str) -> float:
        if self._signature is None:
            await self.authorize()
        else:
            self.state = RevealState.AUTHORIZED
        return self._transform.decode(payload)

    def hide(self) -> None:
        self.state = RevealState.IDLE

    def _deny(self, e: Exception) -> NoReturn:
        self.state = RevealState.DENIED
        if is_user_rejection(e):
            logger.info("Reveal authorization declined by user")
            raise UserDeclinedError("Signature request rejected by user") from e
        logger.error(f"Decryption failed: {e}")
        raise TransientError(f"Decryption failed: {e}") from e
