"""
Mailbox index — the list of message ids, stored as one JSON record.

append() is a read-modify-write with no isolation. Two appenders that read
the same base list both write it back with only their own id added, so one
id is lost from the index while its record stays in the store (an orphan).
The ledger has no compare-and-swap to prevent this.
"""

from __future__ import annotations

import json
import logging

from notifyfhe.models.message import parse_index
from notifyfhe.transport.ledger import LedgerClient

logger = logging.getLogger(__name__)

INDEX_KEY = "message_keys"


class MailboxIndex:
    def __init__(self, ledger: LedgerClient, key: str = INDEX_KEY):
        self._ledger = ledger
        self._key = key

    async def list(self) -> list[str]:
        raw = await self._ledger.read(self._key)
        if not raw:
            return []
        ids = parse_index(raw)
        if ids is None:
            logger.error(f"Error parsing message keys under {self._key!r}; treating index as empty")
            return []
        return ids

    async def append(self, message_id: str) -> bool:
        ids = await self.list()
        ids.append(message_id)
        written = await self._ledger.write(self._key, json.dumps(ids).encode("utf-8"))
        if written:
            logger.debug(f"Appended {message_id} to index ({len(ids)} ids)")
        return written
