"""
Mailbox store — one record per message id under ``message_<id>``.
"""

import logging
from typing import Optional

from pydantic import ValidationError

from notifyfhe.errors import NotFoundError
from notifyfhe.models.message import MessageRecord
from notifyfhe.transport.ledger import LedgerClient

logger = logging.getLogger(__name__)

RECORD_KEY_PREFIX = "message_"


def record_key(message_id: str) -> str:
    return f"{RECORD_KEY_PREFIX}{message_id}"


class MailboxStore:
    def __init__(self, ledger: LedgerClient):
        self._ledger = ledger

    async def get(self, message_id: str) -> Optional[MessageRecord]:
        return self._parse(message_id, await self._ledger.read(record_key(message_id)))

    def _parse(self, message_id: str, raw: bytes) -> Optional[MessageRecord]:
        if not raw:
            return None
        try:
            return MessageRecord.from_bytes(raw)
        except ValidationError as e:
            logger.error(f"Error parsing message data for {message_id}: {e.error_count()} validation error(s)")
            return None

    async def put(self, message_id: str, record: MessageRecord) -> bool:
        return await self._ledger.write(record_key(message_id), record.to_bytes())

    async def mark_read(self, message_id: str) -> bool:
        """Set isRead on the stored record. Not transactional: last writer wins."""
        if not await self._ledger.healthy():
            return False
        key = record_key(message_id)
        record = self._parse(message_id, await self._ledger.read(key, check_health=False))
        if record is None:
            raise NotFoundError(message_id)
        updated = record.model_copy(update={"is_read": True})
        return await self._ledger.write(key, updated.to_bytes(), check_health=False)
