"""
Message records as stored in the ledger.

Wire shape: {"data", "timestamp", "sender", "title", "isRead"}.
"""

from typing import Optional

from pydantic import BaseModel, Field, TypeAdapter, ValidationError, field_validator


class MessageRecord(BaseModel):
    payload: str = Field(alias="data")
    timestamp: int
    sender: str
    title: str
    is_read: bool = Field(default=False, alias="isRead")

    # Unknown wire fields survive a read-modify-write.
    model_config = {"populate_by_name": True, "extra": "allow"}

    @field_validator("is_read", mode="before")
    @classmethod
    def _null_is_unread(cls, v):
        return False if v is None else v

    def to_bytes(self) -> bytes:
        return self.model_dump_json(by_alias=True).encode("utf-8")

    @classmethod
    def from_bytes(cls, raw: bytes) -> "MessageRecord":
        return cls.model_validate_json(raw)


class Message(MessageRecord):
    """A record together with the id it is stored under."""
    id: str

    @classmethod
    def from_record(cls, message_id: str, record: MessageRecord) -> "Message":
        return cls.model_validate({**record.model_dump(by_alias=True), "id": message_id})

    def record(self) -> MessageRecord:
        return MessageRecord.model_validate(self.model_dump(by_alias=True, exclude={"id"}))


MessageIds = TypeAdapter(list[str])


def parse_index(raw: bytes) -> Optional[list[str]]:
    """Decode an index record. None when malformed; [] when blank."""
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        return None
    if not text.strip():
        return []
    try:
        return MessageIds.validate_json(text)
    except ValidationError:
        return None
