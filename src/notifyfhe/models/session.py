"""
Authorization context — one per client session, never persisted.
"""

import secrets
import time
from typing import Optional

from pydantic import BaseModel

DEFAULT_SESSION_DURATION_DAYS = 30
PUBLIC_KEY_HEX_CHARS = 2000


def generate_public_key() -> str:
    return "0x" + secrets.token_hex(PUBLIC_KEY_HEX_CHARS // 2)


class AuthorizationContext(BaseModel):
    public_key: str
    ledger_address: str
    chain_id: int
    session_start: int
    session_duration_days: int = DEFAULT_SESSION_DURATION_DAYS

    model_config = {"frozen": True}

    @classmethod
    def create(
        cls,
        ledger_address: str,
        chain_id: int,
        duration_days: int = DEFAULT_SESSION_DURATION_DAYS,
        now: Optional[float] = None,
    ) -> "AuthorizationContext":
        return cls(
            public_key=generate_public_key(),
            ledger_address=ledger_address,
            chain_id=chain_id,
            session_start=int(time.time() if now is None else now),
            session_duration_days=duration_days,
        )

    def canonical_message(self) -> str:
        """The exact text the wallet is asked to sign."""
        return "\n".join([
            f"publickey:{self.public_key}",
            f"contractAddresses:{self.ledger_address}",
            f"contractsChainId:{self.chain_id}",
            f"startTimestamp:{self.session_start}",
            f"durationDays:{self.session_duration_days}",
        ])
