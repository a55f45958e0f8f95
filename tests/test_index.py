import asyncio
import json
import logging

import pytest

from conftest import InterleavingLedger
from notifyfhe.errors import TransientError
from notifyfhe.index import INDEX_KEY, MailboxIndex
from notifyfhe.transport.ledger import LedgerClient


class TestList:
    @pytest.mark.asyncio
    async def test_first_use_is_empty(self, ledger):
        assert await MailboxIndex(ledger).list() == []

    @pytest.mark.asyncio
    async def test_whitespace_record_is_empty(self, ledger, memory_ledger):
        memory_ledger.data[INDEX_KEY] = b"   \n"
        assert await MailboxIndex(ledger).list() == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw", [b"{not json", b'{"a": 1}', b"[1, 2]", b"\xff\xfe"])
    async def test_malformed_record_is_empty_and_logged(self, ledger, memory_ledger, caplog, raw):
        memory_ledger.data[INDEX_KEY] = raw
        with caplog.at_level(logging.ERROR, logger="notifyfhe.index"):
            assert await MailboxIndex(ledger).list() == []
        assert "Error parsing message keys" in caplog.text

    @pytest.mark.asyncio
    async def test_unavailable_ledger_lists_nothing(self, ledger, memory_ledger):
        memory_ledger.data[INDEX_KEY] = b'["a"]'
        memory_ledger.available = False
        assert await MailboxIndex(ledger).list() == []

    @pytest.mark.asyncio
    async def test_read_failure_propagates_as_transient(self, ledger, memory_ledger):
        memory_ledger.fail_reads.add(INDEX_KEY)
        with pytest.raises(TransientError):
            await MailboxIndex(ledger).list()


class TestAppend:
    @pytest.mark.asyncio
    async def test_sequential_appends_keep_order(self, ledger, memory_ledger):
        index = MailboxIndex(ledger)
        ids = [f"id-{n}" for n in range(5)]
        for message_id in ids:
            assert await index.append(message_id) is True
        assert await index.list() == ids
        assert json.loads(memory_ledger.data[INDEX_KEY]) == ids

    @pytest.mark.asyncio
    async def test_append_when_unavailable_is_a_noop(self, ledger, memory_ledger):
        memory_ledger.available = False
        assert await MailboxIndex(ledger).append("a") is False
        assert INDEX_KEY not in memory_ledger.data

    @pytest.mark.asyncio
    async def test_append_over_malformed_index_starts_fresh(self, ledger, memory_ledger):
        memory_ledger.data[INDEX_KEY] = b"garbage"
        index = MailboxIndex(ledger)
        await index.append("a")
        assert await index.list() == ["a"]

    @pytest.mark.asyncio
    async def test_concurrent_appends_lose_an_update(self):
        # Both appenders read the same empty base list before either writes.
        backend = InterleavingLedger(INDEX_KEY, readers=2)
        index = MailboxIndex(LedgerClient(backend))
        results = await asyncio.gather(index.append("first"), index.append("second"))
        assert results == [True, True]
        listed = await index.list()
        assert len(listed) == 1
        assert listed[0] in ("first", "second")
