"""
Mailbox service — lists, sends and marks messages, and keeps the snapshot
the rest of the client reads counts and filters from.

send() issues two separate writes (record, then index). If the index write
fails the record is orphaned: stored but never listed. Nothing here repairs it.
"""

import logging
import math
import random
import string
import time
from typing import Callable, Optional

from notifyfhe.errors import LedgerUnavailableError, MailboxError, TransientError, UserDeclinedError
from notifyfhe.index import MailboxIndex
from notifyfhe.models.message import Message, MessageRecord
from notifyfhe.store import MailboxStore
from notifyfhe.transform import Transform

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.digits + string.ascii_lowercase


def is_representable(plaintext) -> bool:
    """True for a finite number that survives conversion to a float unchanged."""
    if isinstance(plaintext, bool) or not isinstance(plaintext, (int, float)):
        return False
    try:
        number = float(plaintext)
    except OverflowError:
        return False
    return math.isfinite(number) and number == plaintext


def generate_message_id(now: Optional[float] = None) -> str:
    """``<epoch ms>-<7 base36 chars>``."""
    millis = int((time.time() if now is None else now) * 1000)
    suffix = "".join(random.choices(_ID_ALPHABET, k=7))
    return f"{millis}-{suffix}"


class MailboxStats:
    __slots__ = ("total", "unread", "sent", "received")

    def __init__(self, total: int, unread: int, sent: int, received: int):
        self.total = total
        self.unread = unread
        self.sent = sent
        self.received = received

    def __repr__(self) -> str:
        return (f"MailboxStats(total={self.total}, unread={self.unread}, "
                f"sent={self.sent}, received={self.received})")


class MailboxService:
    def __init__(
        self,
        index: MailboxIndex,
        store: MailboxStore,
        transform: Transform,
        clock: Callable[[], float] = time.time,
    ):
        self._index = index
        self._store = store
        self._transform = transform
        self._clock = clock
        self._messages: list[Message] = []

    @property
    def messages(self) -> list[Message]:
        return list(self._messages)

    async def load_all(self) -> list[Message]:
        ids = await self._index.list()
        loaded: list[Message] = []
        for message_id in ids:
            try:
                record = await self._store.get(message_id)
            except TransientError as e:
                logger.warning(f"Error loading message {message_id}: {e}")
                continue
            if record is None:
                logger.warning(f"Message {message_id} is indexed but has no readable record; skipping")
                continue
            loaded.append(Message.from_record(message_id, record))
        loaded.sort(key=lambda m: m.timestamp, reverse=True)
        self._messages = loaded
        return list(loaded)

    async def send(self, title: str, plaintext: float, sender: str) -> Message:
        if not title or not title.strip():
            raise MailboxError("invalid_message", "Title is required")
        if not is_representable(plaintext):
            raise MailboxError("invalid_message", "Content must be a finite number")
        if not sender:
            raise MailboxError("invalid_message", "Sender address is required")

        message_id = generate_message_id(self._clock())
        record = MessageRecord(
            payload=self._transform.encode(plaintext),
            timestamp=int(self._clock()),
            sender=sender,
            title=title,
            is_read=False,
        )
        if not await self._store.put(message_id, record):
            raise LedgerUnavailableError()
        try:
            appended = await self._index.append(message_id)
        except UserDeclinedError:
            logger.error(f"Message {message_id} stored but not indexed: index update rejected")
            raise
        except MailboxError as e:
            logger.error(f"Message {message_id} stored but not indexed: {e}")
            raise TransientError(f"Sending failed: {e}", {"message_id": message_id, "orphaned": True}) from e
        if not appended:
            logger.error(f"Message {message_id} stored but not indexed: ledger became unavailable")
            raise TransientError("Sending failed: ledger became unavailable",
                                 {"message_id": message_id, "orphaned": True})
        logger.debug(f"Sent message {message_id}")
        return Message.from_record(message_id, record)

    async def mark_read(self, message_id: str) -> None:
        if not await self._store.mark_read(message_id):
            raise LedgerUnavailableError()
        for i, message in enumerate(self._messages):
            if message.id == message_id:
                self._messages[i] = message.model_copy(update={"is_read": True})

    def stats(self, address: Optional[str] = None) -> MailboxStats:
        total = len(self._messages)
        unread = sum(1 for m in self._messages if not m.is_read)
        me = (address or "").lower()
        sent = sum(1 for m in self._messages if me and m.sender.lower() == me)
        return MailboxStats(total=total, unread=unread, sent=sent, received=total - sent)

    def filter(self, search: str = "", unread_only: bool = False) -> list[Message]:
        term = search.lower()
        return [
            m for m in self._messages
            if term in m.title.lower() and (not unread_only or not m.is_read)
        ]
